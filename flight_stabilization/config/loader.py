"""
Stabilizer configuration: immutable gain snapshots and a YAML loader.

Config files follow the schema defined by the dataclasses below.  Integral
and blending limits are symmetric (±limit).  Values are kept as plain Python
numbers; stabilizers cast them into their numeric backend when they build
their per-axis engines.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Per-stabilizer gain block
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlightStabilizerConfig:
    """
    Gains, initial set-points, integral limit and output scale for one
    roll/pitch/yaw stabilizer loop.

    Defaults are neutral (``kp = 1``, everything else 0 or 1) and are meant to
    be replaced by values tuned for the airframe.
    """
    kp_roll:  Any = 1.0
    ki_roll:  Any = 0.0
    kd_roll:  Any = 0.0
    kp_pitch: Any = 1.0
    ki_pitch: Any = 0.0
    kd_pitch: Any = 0.0
    kp_yaw:   Any = 1.0
    ki_yaw:   Any = 0.0
    kd_yaw:   Any = 0.0
    set_point_roll:  Any = 0.0
    set_point_pitch: Any = 0.0
    set_point_yaw:   Any = 0.0
    i_limit: Any = 1.0  # Integral bound shared by all three axes
    scale:   Any = 1.0  # Controller units → actuator units


# ---------------------------------------------------------------------------
# Cascade blending
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CascadeBlendingConfig:
    """
    Weights for combining N cascade stages into one axis command.

    ``beta`` holds one dimensionless weight per stage (they need not sum to
    one), ``k`` is the gain applied to the first stage before saturation and
    ``limit`` the symmetric saturation bound.
    """
    beta:  Tuple[Any, ...] = (1.0, 1.0)
    k:     Any = 1.0
    limit: Any = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "beta", tuple(self.beta))

    @property
    def stages(self) -> int:
        return len(self.beta)


class ResetPolicy(enum.Enum):
    """Which cascade loops have their integral reset while throttle is low."""
    BOTH  = "both"
    OUTER = "outer"
    INNER = "inner"

    @property
    def resets_outer(self) -> bool:
        return self in (ResetPolicy.BOTH, ResetPolicy.OUTER)

    @property
    def resets_inner(self) -> bool:
        return self in (ResetPolicy.BOTH, ResetPolicy.INNER)


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StabilizerConfig:
    angle: FlightStabilizerConfig = field(default_factory=FlightStabilizerConfig)
    # Present only when the YAML contains a ``stabilizer.rate`` section.
    rate: Optional[FlightStabilizerConfig] = field(default=None)
    # Present only when the YAML contains a ``stabilizer.blending`` section.
    blending: Optional[CascadeBlendingConfig] = field(default=None)
    reset_policy: ResetPolicy = ResetPolicy.BOTH


# ---------------------------------------------------------------------------
# Loader helpers
# ---------------------------------------------------------------------------

def _stabilizer(d: dict) -> FlightStabilizerConfig:
    values = {}
    for axis in ("roll", "pitch", "yaw"):
        a = d[axis]
        values[f"kp_{axis}"] = float(a["kp"])
        values[f"ki_{axis}"] = float(a["ki"])
        values[f"kd_{axis}"] = float(a["kd"])
        values[f"set_point_{axis}"] = float(a.get("set_point", 0.0))

    i_limit = float(d["i_limit"])
    if i_limit < 0.0:
        raise ValueError(f"i_limit must be non-negative, got {i_limit}")

    return FlightStabilizerConfig(
        i_limit=i_limit,
        scale=float(d.get("scale", 1.0)),
        **values,
    )


def _blending(d: dict) -> CascadeBlendingConfig:
    beta = tuple(float(b) for b in d["beta"])
    if len(beta) != 2:
        raise ValueError(f"blending.beta must have 2 entries (angle, rate), got {len(beta)}")
    limit = float(d["limit"])
    if limit < 0.0:
        raise ValueError(f"blending.limit must be non-negative, got {limit}")
    return CascadeBlendingConfig(beta=beta, k=float(d["k"]), limit=limit)


def load_config(path: str | Path) -> StabilizerConfig:
    """
    Parse a stabilizer YAML config file and return a StabilizerConfig.

    Example
    -------
    >>> cfg = load_config("configs/quad_250mm.yaml")
    >>> stabilizer = CascadeStabilizer.from_config(cfg)
    """
    with open(path) as f:
        raw = yaml.safe_load(f)

    s = raw["stabilizer"]
    angle = _stabilizer(s["angle"])

    rate_raw = s.get("rate", None)
    rate = _stabilizer(rate_raw) if rate_raw is not None else None

    blending_raw = s.get("blending", None)
    blending = _blending(blending_raw) if blending_raw is not None else None

    policy_raw = s.get("reset_policy", ResetPolicy.BOTH.value)
    try:
        reset_policy = ResetPolicy(str(policy_raw).lower())
    except ValueError:
        raise ValueError(
            f"reset_policy must be one of {[p.value for p in ResetPolicy]}, got {policy_raw!r}"
        ) from None

    logger.info(
        "Loaded stabilizer config from %s (rate loop: %s, blending: %s, reset policy: %s)",
        path, rate is not None, blending is not None, reset_policy.value,
    )
    return StabilizerConfig(
        angle=angle,
        rate=rate,
        blending=blending,
        reset_policy=reset_policy,
    )
