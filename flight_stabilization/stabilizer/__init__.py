from .base import FlightStabilizer
from .angle import AngleStabilizer
from .rate import RateStabilizer
from .cascade import CascadeStabilizer, blend

__all__ = [
    "FlightStabilizer",
    "AngleStabilizer",
    "RateStabilizer",
    "CascadeStabilizer",
    "blend",
]
