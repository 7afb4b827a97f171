"""
Cascade angle → rate stabilizer with output blending.

Architecture
────────────
Angle loop (outer):  angle error [rad]    → rate set-point
Rate loop  (inner):  rate error  [rad/s]  → axis command

The outer output becomes the inner set-point.  Both raw outputs are then
blended into one axis command ::

    pre     = clamp(k * outer, -limit, limit)
    blended = beta[0] * pre + beta[1] * inner

so the slow trim correction of the angle loop cannot dominate the fast
damping of the rate loop.  The blended value is multiplied by the *rate*
config's ``scale``; the angle config's ``scale`` is not used here.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from .base import FlightStabilizer, Triple, make_axis_engines
from ..config.loader import (
    CascadeBlendingConfig,
    FlightStabilizerConfig,
    ResetPolicy,
    StabilizerConfig,
)
from ..controllers.angle import AngleControlData, compute_angle
from ..controllers.pid import PidController
from ..controllers.rate import RateControlData, compute_rate
from ..utils.numeric import FLOAT64, Numeric

logger = logging.getLogger(__name__)


def blend(
    config: CascadeBlendingConfig,
    outputs: Sequence[Any],
    numeric: Numeric = FLOAT64,
) -> Any:
    """
    Combine the raw outputs of N cascade stages, outermost first.

    Only the first stage goes through the pre-blend gain and saturation;
    the remaining stages are weighted as they are.
    """
    if len(outputs) != len(config.beta):
        raise ValueError(
            f"blend expects {len(config.beta)} stage outputs, got {len(outputs)}"
        )
    limit = numeric.cast(config.limit)
    pre = numeric.clamp(numeric.cast(config.k) * outputs[0], -limit, limit)

    blended = numeric.cast(config.beta[0]) * pre
    for beta, output in zip(config.beta[1:], outputs[1:]):
        blended = blended + numeric.cast(beta) * output
    return blended


class CascadeStabilizer(FlightStabilizer):
    """
    Two nested loops per axis: angle (outer) and rate (inner).

    Parameters
    ----------
    angle_config : FlightStabilizerConfig
        Outer loop gains, set-points and integral limit.
    rate_config : FlightStabilizerConfig
        Inner loop gains, integral limit and output ``scale``.  Its
        set-points are overwritten every tick by the outer loop.
    blending_config : CascadeBlendingConfig
        Two-stage blending (angle, rate), shared by all axes.
    reset_policy : ResetPolicy
        Loops whose integral follows ``low_throttle``.  Default: both.
    """

    def __init__(
        self,
        angle_config: Optional[FlightStabilizerConfig] = None,
        rate_config: Optional[FlightStabilizerConfig] = None,
        blending_config: Optional[CascadeBlendingConfig] = None,
        numeric: Numeric = FLOAT64,
        *,
        reset_policy: ResetPolicy = ResetPolicy.BOTH,
    ) -> None:
        super().__init__(numeric)
        angle_config = angle_config if angle_config is not None else FlightStabilizerConfig()
        rate_config = rate_config if rate_config is not None else FlightStabilizerConfig()
        blending_config = blending_config if blending_config is not None else CascadeBlendingConfig()
        if blending_config.stages != 2:
            raise ValueError(
                f"CascadeStabilizer blends 2 stages, blending config has {blending_config.stages}"
            )

        self.angle_pids = make_axis_engines(angle_config, compute_angle, numeric)
        self.rate_pids = make_axis_engines(rate_config, compute_rate, numeric)
        self.angle_i_limit = numeric.cast(angle_config.i_limit)
        self.rate_i_limit = numeric.cast(rate_config.i_limit)
        self.scale = numeric.cast(rate_config.scale)
        self.blending = blending_config
        self.reset_policy = reset_policy
        self.previous_rate: list = [None, None, None]

        logger.debug(
            "Built %s (blending=%r, reset_policy=%s, numeric=%r)",
            type(self).__name__, blending_config, reset_policy.value, numeric,
        )

    @classmethod
    def from_config(
        cls,
        config: StabilizerConfig,
        numeric: Numeric = FLOAT64,
    ) -> "CascadeStabilizer":
        """Instantiate directly from a loaded StabilizerConfig."""
        if config.rate is None:
            raise ValueError("StabilizerConfig has no rate section")
        return cls(
            config.angle,
            config.rate,
            config.blending,
            numeric,
            reset_policy=config.reset_policy,
        )

    def engines(self) -> tuple[PidController, ...]:
        return (*self.angle_pids, *self.rate_pids)

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
        reset_outer = low_throttle and self.reset_policy.resets_outer
        reset_inner = low_throttle and self.reset_policy.resets_inner

        cast = self.numeric.cast
        dt = cast(dt)
        axes = zip(self.angle_pids, self.rate_pids, set_point, imu_attitude, gyro_rate)

        outputs = []
        for i, (angle_pid, rate_pid, target, angle, rate) in enumerate(axes):
            rate = cast(rate)
            previous = self.previous_rate[i]

            angle_pid.set_point = cast(target)
            outer = angle_pid.tick(AngleControlData(
                measurement=cast(angle),
                rate=rate,
                dt=dt,
                integral_limit=self.angle_i_limit,
                reset_integral=reset_outer,
            ))

            rate_pid.set_point = outer
            inner = rate_pid.tick(RateControlData(
                measurement=rate,
                previous_measurement=rate if previous is None else previous,
                dt=dt,
                integral_limit=self.rate_i_limit,
                reset_integral=reset_inner,
            ))
            self.previous_rate[i] = rate

            outputs.append(blend(self.blending, (outer, inner), self.numeric) * self.scale)

        return tuple(outputs)
