"""
Angle-mode compute strategy.

The error is taken on the attitude angle, the integral is clamped to
``±integral_limit`` (or forced to zero on a reset tick) and the derivative is
the externally measured angular rate, so no differencing of noisy angle
samples is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from .pid import PidController


@dataclass(frozen=True)
class AngleControlData:
    """Per-tick input of the angle strategy."""
    measurement: Any          # Current measured angle
    rate: Any                 # Angular rate, typically from the gyro
    dt: Any                   # Time since the previous tick [s]
    integral_limit: Any       # Symmetric bound on the integral; must be >= 0
    reset_integral: bool = False


def compute_angle(
    pid: PidController[AngleControlData],
    data: AngleControlData,
) -> Tuple[Any, Any, Any]:
    """Return ``(error, integral, derivative)`` for angle-mode control."""
    numeric = pid.numeric
    error = pid.set_point - data.measurement
    if data.reset_integral:
        integral = numeric.zero()
    else:
        integral = numeric.clamp(
            pid.integral + error * data.dt,
            -data.integral_limit,
            data.integral_limit,
        )
    derivative = data.rate

    return error, integral, derivative
