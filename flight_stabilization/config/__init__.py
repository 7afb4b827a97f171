from .loader import (
    load_config,
    StabilizerConfig,
    FlightStabilizerConfig,
    CascadeBlendingConfig,
    ResetPolicy,
)

__all__ = [
    "load_config",
    "StabilizerConfig",
    "FlightStabilizerConfig",
    "CascadeBlendingConfig",
    "ResetPolicy",
]
