"""
Rate-mode compute strategy, used by the inner loop of the cascade.

Error and integral follow the angle strategy.  The derivative is taken on
the measurement rather than on the error, so a step in the rate set-point
(which the outer loop produces every tick) does not kick the D term.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from .pid import PidController


@dataclass(frozen=True)
class RateControlData:
    """Per-tick input of the rate strategy."""
    measurement: Any            # Current angular rate [rad/s or deg/s]
    previous_measurement: Any   # Angular rate on the previous tick
    dt: Any                     # Time since the previous tick [s]; a scalar, shared by a batch
    integral_limit: Any         # Symmetric bound on the integral; must be >= 0
    reset_integral: bool = False


def compute_rate(
    pid: PidController[RateControlData],
    data: RateControlData,
) -> Tuple[Any, Any, Any]:
    """Return ``(error, integral, derivative)`` for rate-mode control."""
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

    # d(error)/dt == -d(measurement)/dt for a constant set-point
    if data.dt == 0:
        derivative = numeric.zero()
    else:
        derivative = (data.previous_measurement - data.measurement) / data.dt

    return error, integral, derivative
