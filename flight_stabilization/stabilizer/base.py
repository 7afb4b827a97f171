"""Shared contract and helpers for roll/pitch/yaw stabilizers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Tuple

from ..config.loader import FlightStabilizerConfig
from ..controllers.pid import ComputeFn, PidController
from ..utils.numeric import Numeric

Triple = Tuple[Any, Any, Any]

AXES = ("roll", "pitch", "yaw")


def make_axis_engines(
    config: FlightStabilizerConfig,
    compute_fn: ComputeFn,
    numeric: Numeric,
) -> Tuple[PidController, PidController, PidController]:
    """Build one engine per axis from the gains and set-points in *config*."""
    return tuple(
        PidController(
            compute_fn,
            numeric,
            kp=getattr(config, f"kp_{axis}"),
            ki=getattr(config, f"ki_{axis}"),
            kd=getattr(config, f"kd_{axis}"),
            set_point=getattr(config, f"set_point_{axis}"),
        )
        for axis in AXES
    )


class FlightStabilizer(ABC):
    """
    PID stabilizer that turns attitude and gyro data into roll, pitch and yaw
    actuator commands.

    Subclasses own independent per-axis engines; axes share nothing but the
    ``dt`` and ``low_throttle`` signals passed to :meth:`control`.  Instances
    are not thread-safe: ``control`` reads and writes every persisted
    integral.
    """

    def __init__(self, numeric: Numeric) -> None:
        self.numeric = numeric

    @abstractmethod
    def control(
        self,
        set_point: Triple,
        imu_attitude: Triple,
        gyro_rate: Triple,
        dt: Any,
        low_throttle: bool,
    ) -> Triple:
        """
        Compute one control step.

        Parameters
        ----------
        set_point : (roll, pitch, yaw)
            Desired set-points.
        imu_attitude : (roll, pitch, yaw)
            Measured attitude from sensor fusion.
        gyro_rate : (roll rate, pitch rate, yaw rate)
            Measured body rates.
        dt : scalar
            Time since the previous call [s].
        low_throttle : bool
            While true the integral terms are held at zero (level-triggered
            anti-windup before take-off and at idle).

        Returns
        -------
        (roll, pitch, yaw)
            Outputs scaled to actuator range.
        """

    @abstractmethod
    def engines(self) -> Tuple[PidController, ...]:
        """Every engine owned by the stabilizer."""

    def reset(self) -> None:
        """Zero the persisted integral of every engine."""
        for pid in self.engines():
            pid.reset()
