"""
Single-axis PID accumulation engine with a pluggable compute strategy.

The engine owns the gains, the set-point and the persisted integral.  It does
not know how error, integral and derivative are derived: that is delegated to
a *compute function* fixed at construction ::

    compute_fn(pid, data) -> (error, integral, derivative)

The strategy reads ``pid.set_point``, ``pid.integral`` and ``pid.numeric``
but must not mutate the engine.  :meth:`PidController.tick` stores the
returned integral and produces ::

    output = kp * error + ki * integral + kd * derivative

Usage
-----
>>> from flight_stabilization.controllers import PidController, AngleControlData, compute_angle
>>> pid = PidController(compute_angle).set_gains(1.0, 1.0, 0.1).set_set_point(10.0)
>>> pid.tick(AngleControlData(measurement=0.0, rate=0.0, dt=1.0, integral_limit=100.0))
20.0
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

from ..utils.numeric import FLOAT64, Numeric

D = TypeVar("D")

ComputeFn = Callable[["PidController[D]", D], Tuple[Any, Any, Any]]


class PidController(Generic[D]):
    """
    Stateful PID engine for one control axis.

    Parameters
    ----------
    compute_fn : callable
        Strategy returning ``(error, integral, derivative)``.  Chosen once;
        there is no way to swap it on a live engine.
    numeric : Numeric
        Scalar backend.  Default: Python ``float``.
    kp, ki, kd : optional
        Gains.  Default: ``kp = 1``, ``ki = kd = 0``.
    set_point : optional
        Initial target.  Default: ``0``.
    """

    def __init__(
        self,
        compute_fn: ComputeFn,
        numeric: Numeric = FLOAT64,
        *,
        kp: Optional[Any] = None,
        ki: Optional[Any] = None,
        kd: Optional[Any] = None,
        set_point: Optional[Any] = None,
    ) -> None:
        self._compute_fn = compute_fn
        self.numeric = numeric

        self.kp = numeric.one()  if kp is None else numeric.cast(kp)
        self.ki = numeric.zero() if ki is None else numeric.cast(ki)
        self.kd = numeric.zero() if kd is None else numeric.cast(kd)
        self.set_point = numeric.zero() if set_point is None else numeric.cast(set_point)
        self.integral = numeric.zero()

    @property
    def compute_fn(self) -> ComputeFn:
        return self._compute_fn

    # ── Builder-style configuration ──────────────────────────────────────────

    def set_gains(self, kp: Any, ki: Any, kd: Any) -> "PidController[D]":
        self.kp = self.numeric.cast(kp)
        self.ki = self.numeric.cast(ki)
        self.kd = self.numeric.cast(kd)
        return self

    def set_set_point(self, set_point: Any) -> "PidController[D]":
        self.set_point = self.numeric.cast(set_point)
        return self

    # ── Control ──────────────────────────────────────────────────────────────

    def evaluate(self, data: D) -> Tuple[Any, Any, Any]:
        """Run the strategy against the current state without storing anything."""
        return self._compute_fn(self, data)

    def tick(self, data: D) -> Any:
        """
        Advance one control tick.

        The strategy sees the integral persisted by the previous tick; the
        integral it returns replaces it.  Nothing is validated: NaN inputs
        propagate until a reset tick brings the integral back to zero.
        """
        error, integral, derivative = self._compute_fn(self, data)
        self.integral = integral
        return self.kp * error + self.ki * integral + self.kd * derivative

    def reset(self) -> None:
        """Zero the persisted integral."""
        self.integral = self.numeric.zero()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(compute_fn={getattr(self._compute_fn, '__name__', self._compute_fn)}, "
            f"kp={self.kp}, ki={self.ki}, kd={self.kd}, set_point={self.set_point}, "
            f"integral={self.integral})"
        )
