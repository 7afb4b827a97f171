from .controllers.pid import PidController
from .controllers.angle import AngleControlData, compute_angle
from .controllers.rate import RateControlData, compute_rate
from .stabilizer import (
    FlightStabilizer,
    AngleStabilizer,
    RateStabilizer,
    CascadeStabilizer,
    blend,
)
from .config.loader import (
    load_config,
    StabilizerConfig,
    FlightStabilizerConfig,
    CascadeBlendingConfig,
    ResetPolicy,
)
from .utils.numeric import Numeric, ScalarNumeric, TorchNumeric, FLOAT64

__all__ = [
    "PidController",
    "AngleControlData",
    "compute_angle",
    "RateControlData",
    "compute_rate",
    "FlightStabilizer",
    "AngleStabilizer",
    "RateStabilizer",
    "CascadeStabilizer",
    "blend",
    "load_config",
    "StabilizerConfig",
    "FlightStabilizerConfig",
    "CascadeBlendingConfig",
    "ResetPolicy",
    "Numeric",
    "ScalarNumeric",
    "TorchNumeric",
    "FLOAT64",
]
