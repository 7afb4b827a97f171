from .pid import PidController, ComputeFn
from .angle import AngleControlData, compute_angle
from .rate import RateControlData, compute_rate

__all__ = [
    "PidController",
    "ComputeFn",
    "AngleControlData",
    "compute_angle",
    "RateControlData",
    "compute_rate",
]
