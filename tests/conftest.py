"""
Shared fixtures for the stabilizer test suite.

All path resolution is relative to the repository root so tests can be
invoked from any working directory (repo root, tests/, etc.).
"""

from pathlib import Path

import pytest
import torch

from flight_stabilization import load_config

# Absolute path to the repo root, independent of cwd
REPO_ROOT = Path(__file__).parent.parent
CONFIGS_DIR = REPO_ROOT / "configs"


# ---------------------------------------------------------------------------
# Config fixtures  (session-scoped: loaded once for the whole test run)
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def quad_config():
    """Cascade StabilizerConfig for the generic 250 mm quad."""
    return load_config(CONFIGS_DIR / "quad_250mm.yaml")


@pytest.fixture(scope="session")
def angle_only_config():
    """StabilizerConfig with an angle section only."""
    return load_config(CONFIGS_DIR / "angle_only.yaml")


# ---------------------------------------------------------------------------
# Helper fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def device():
    return torch.device("cpu")


@pytest.fixture(scope="session")
def num_envs():
    return 3
