"""
Angle-mode stabilizer: one angle-strategy PID per axis.

Error is taken on the attitude angle and damping comes from the gyro rate,
so the output is ``scale * (kp·e + ki·∫e + kd·ω)`` per axis.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .base import FlightStabilizer, Triple, make_axis_engines
from ..config.loader import FlightStabilizerConfig, StabilizerConfig
from ..controllers.angle import AngleControlData, compute_angle
from ..controllers.pid import PidController
from ..utils.numeric import FLOAT64, Numeric

logger = logging.getLogger(__name__)


class AngleStabilizer(FlightStabilizer):
    """
    Stabilizer holding roll, pitch and yaw attitude angles.

    Usage
    -----
    >>> config = FlightStabilizerConfig(kp_roll=0.2, ki_roll=0.3, kd_roll=-0.05, i_limit=25.0, scale=0.01)
    >>> stabilizer = AngleStabilizer(config)
    >>> imu_attitude = (1.5, -0.5, 0.0)   # roll, pitch, yaw [deg]
    >>> gyro_rate = (2.0, 0.0, -1.0)      # body rates [deg/s]
    >>> roll, pitch, yaw = stabilizer.control(
    ...     (0.0, 0.0, 0.0), imu_attitude, gyro_rate, dt=0.004, low_throttle=False)
    """

    def __init__(
        self,
        config: Optional[FlightStabilizerConfig] = None,
        numeric: Numeric = FLOAT64,
    ) -> None:
        super().__init__(numeric)
        config = config if config is not None else FlightStabilizerConfig()

        self.roll_pid, self.pitch_pid, self.yaw_pid = make_axis_engines(
            config, compute_angle, numeric
        )
        self.i_limit = numeric.cast(config.i_limit)
        self.scale = numeric.cast(config.scale)

        logger.debug("Built %s with %r (numeric=%r)", type(self).__name__, config, numeric)

    @classmethod
    def from_config(
        cls,
        config: StabilizerConfig,
        numeric: Numeric = FLOAT64,
    ) -> "AngleStabilizer":
        """Instantiate directly from a loaded StabilizerConfig."""
        return cls(config.angle, numeric)

    def engines(self) -> tuple[PidController, PidController, PidController]:
        return self.roll_pid, self.pitch_pid, self.yaw_pid

    def control(
        self,
        set_point: Triple,
        imu_attitude: Triple,
        gyro_rate: Triple,
        dt: Any,
        low_throttle: bool,
    ) -> Triple:
        cast = self.numeric.cast
        dt = cast(dt)
        outputs = []
        for pid, target, angle, rate in zip(self.engines(), set_point, imu_attitude, gyro_rate):
            pid.set_point = cast(target)
            data = AngleControlData(
                measurement=cast(angle),
                rate=cast(rate),
                dt=dt,
                integral_limit=self.i_limit,
                reset_integral=low_throttle,
            )
            outputs.append(pid.tick(data) * self.scale)

        return tuple(outputs)
