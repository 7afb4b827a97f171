"""
Rate-mode ("acro") stabilizer: one rate-strategy PID per axis.

The set-points are body rates and the measurement is the gyro; the attitude
argument of :meth:`RateStabilizer.control` is accepted for interface
compatibility and ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .base import FlightStabilizer, Triple, make_axis_engines
from ..config.loader import FlightStabilizerConfig, StabilizerConfig
from ..controllers.pid import PidController
from ..controllers.rate import RateControlData, compute_rate
from ..utils.numeric import FLOAT64, Numeric

logger = logging.getLogger(__name__)


class RateStabilizer(FlightStabilizer):
    """Stabilizer tracking roll, pitch and yaw body rates."""

    def __init__(
        self,
        config: Optional[FlightStabilizerConfig] = None,
        numeric: Numeric = FLOAT64,
    ) -> None:
        super().__init__(numeric)
        config = config if config is not None else FlightStabilizerConfig()

        self.roll_pid, self.pitch_pid, self.yaw_pid = make_axis_engines(
            config, compute_rate, numeric
        )
        self.i_limit = numeric.cast(config.i_limit)
        self.scale = numeric.cast(config.scale)
        # Gyro sample of the previous tick, per axis; None before the first tick
        self.previous_rate: list = [None, None, None]

        logger.debug("Built %s with %r (numeric=%r)", type(self).__name__, config, numeric)

    @classmethod
    def from_config(
        cls,
        config: StabilizerConfig,
        numeric: Numeric = FLOAT64,
    ) -> "RateStabilizer":
        """Instantiate from the ``rate`` section of a loaded StabilizerConfig."""
        if config.rate is None:
            raise ValueError("StabilizerConfig has no rate section")
        return cls(config.rate, numeric)

    def engines(self) -> tuple[PidController, PidController, PidController]:
        return self.roll_pid, self.pitch_pid, self.yaw_pid

    def reset(self) -> None:
        super().reset()
        self.previous_rate = [None, None, None]

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
        for i, (pid, target, rate) in enumerate(zip(self.engines(), set_point, gyro_rate)):
            pid.set_point = cast(target)
            rate = cast(rate)
            previous = self.previous_rate[i]
            data = RateControlData(
                measurement=rate,
                previous_measurement=rate if previous is None else previous,
                dt=dt,
                integral_limit=self.i_limit,
                reset_integral=low_throttle,
            )
            self.previous_rate[i] = rate
            outputs.append(pid.tick(data) * self.scale)

        return tuple(outputs)
