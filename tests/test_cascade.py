"""
Unit tests for cascade blending and CascadeStabilizer.

Tests cover:
- Blend formula, pre-blend saturation and N-stage generalisation
- Outer output feeding the inner set-point
- Reset coupling policies under low throttle
- Batched (torch) and exact (Fraction) backends
"""

from fractions import Fraction

import pytest
import torch

from flight_stabilization import (
    CascadeBlendingConfig,
    CascadeStabilizer,
    FlightStabilizerConfig,
    ResetPolicy,
    ScalarNumeric,
    TorchNumeric,
    blend,
)

ZERO3 = (0.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# blend()
# ---------------------------------------------------------------------------

class TestBlend:
    def test_defaults(self):
        assert blend(CascadeBlendingConfig(), (0.5, 0.25)) == pytest.approx(0.75)

    def test_pre_blend_gain_and_weights(self):
        cfg = CascadeBlendingConfig(beta=(0.9, 0.5), k=2.0, limit=10.0)
        assert blend(cfg, (1.5, 4.0)) == pytest.approx(0.9 * 3.0 + 0.5 * 4.0)

    def test_outer_stage_saturates(self):
        cfg = CascadeBlendingConfig(beta=(1.0, 1.0), k=30.0, limit=240.0)
        assert blend(cfg, (100.0, 1.0)) == pytest.approx(241.0)
        assert blend(cfg, (-100.0, 1.0)) == pytest.approx(-239.0)

    def test_inner_stage_is_not_saturated(self):
        cfg = CascadeBlendingConfig(limit=1.0)
        assert blend(cfg, (0.0, 50.0)) == pytest.approx(50.0)

    def test_n_stages(self):
        cfg = CascadeBlendingConfig(beta=(1.0, 2.0, 3.0), k=2.0, limit=3.0)
        assert blend(cfg, (2.0, 1.0, 1.0)) == pytest.approx(3.0 + 2.0 + 3.0)

    def test_stage_count_mismatch_raises(self):
        with pytest.raises(ValueError):
            blend(CascadeBlendingConfig(), (1.0, 2.0, 3.0))

    def test_beta_list_is_frozen_to_tuple(self):
        cfg = CascadeBlendingConfig(beta=[0.1, 0.2])
        assert cfg.beta == (0.1, 0.2)
        assert cfg.stages == 2


# ---------------------------------------------------------------------------
# CascadeStabilizer
# ---------------------------------------------------------------------------

def make_integrating_cascade(policy: ResetPolicy) -> CascadeStabilizer:
    angle_cfg = FlightStabilizerConfig(ki_roll=1.0, i_limit=100.0)
    rate_cfg = FlightStabilizerConfig(ki_roll=1.0, i_limit=100.0)
    return CascadeStabilizer(angle_cfg, rate_cfg, reset_policy=policy)


class TestCascadeStabilizer:
    def test_default_configs(self):
        stab = CascadeStabilizer()
        out = stab.control((0.5, 0.0, 3.0), ZERO3, ZERO3, 0.01, False)
        # roll: outer 0.5, inner 0.5 → 0.5 + 0.5 ; yaw: pre clamped to 1, inner 3
        assert out == pytest.approx((1.0, 0.0, 4.0))

    def test_outer_output_is_inner_set_point(self):
        angle_cfg = FlightStabilizerConfig(kp_roll=2.0)
        stab = CascadeStabilizer(angle_cfg)
        stab.control((1.0, 0.0, 0.0), (0.25, 0.0, 0.0), ZERO3, 0.01, False)
        assert stab.rate_pids[0].set_point == pytest.approx(1.5)

    def test_blended_and_scaled(self):
        angle_cfg = FlightStabilizerConfig(kp_roll=2.0, scale=123.0)
        rate_cfg = FlightStabilizerConfig(kp_roll=0.5, scale=0.01)
        blending = CascadeBlendingConfig(beta=(0.9, 0.5), k=10.0, limit=5.0)
        stab = CascadeStabilizer(angle_cfg, rate_cfg, blending)

        out = stab.control((1.0, 0.0, 0.0), (0.4, 0.0, 0.0), (0.2, 0.0, 0.0), 0.01, False)
        # outer = 2 * 0.6 = 1.2 ; inner = 0.5 * (1.2 - 0.2) = 0.5
        # pre = clamp(12, ±5) = 5 ; 0.9 * 5 + 0.5 * 0.5 = 4.75 ; × 0.01
        assert out[0] == pytest.approx(0.0475)

    def test_rejects_non_two_stage_blending(self):
        with pytest.raises(ValueError):
            CascadeStabilizer(blending_config=CascadeBlendingConfig(beta=(1.0, 1.0, 1.0)))

    def test_engines_lists_both_loops(self):
        stab = CascadeStabilizer()
        assert len(stab.engines()) == 6

    def test_from_config(self, quad_config):
        stab = CascadeStabilizer.from_config(quad_config)
        assert stab.blending.beta == pytest.approx((0.9, 0.9))
        assert stab.blending.k == pytest.approx(30.0)
        assert stab.scale == pytest.approx(0.01)
        assert stab.reset_policy is ResetPolicy.BOTH

    def test_from_config_requires_rate_section(self, angle_only_config):
        with pytest.raises(ValueError):
            CascadeStabilizer.from_config(angle_only_config)


# ---------------------------------------------------------------------------
# Reset coupling
# ---------------------------------------------------------------------------

class TestResetPolicy:
    @pytest.mark.parametrize("policy, outer_zero, inner_zero", [
        (ResetPolicy.BOTH,  True,  True),
        (ResetPolicy.OUTER, True,  False),
        (ResetPolicy.INNER, False, True),
    ])
    def test_low_throttle_coupling(self, policy, outer_zero, inner_zero):
        stab = make_integrating_cascade(policy)
        sp = (1.0, 0.0, 0.0)
        stab.control(sp, ZERO3, ZERO3, 1.0, False)
        assert stab.angle_pids[0].integral != 0.0
        assert stab.rate_pids[0].integral != 0.0

        stab.control(sp, ZERO3, ZERO3, 1.0, True)
        assert (stab.angle_pids[0].integral == 0.0) is outer_zero
        assert (stab.rate_pids[0].integral == 0.0) is inner_zero

    def test_no_reset_when_throttle_up(self):
        stab = make_integrating_cascade(ResetPolicy.BOTH)
        for _ in range(3):
            stab.control((1.0, 0.0, 0.0), ZERO3, ZERO3, 1.0, False)
        assert stab.angle_pids[0].integral == pytest.approx(3.0)

    def test_manual_reset_clears_both_loops(self):
        stab = make_integrating_cascade(ResetPolicy.OUTER)
        stab.control((1.0, 0.0, 0.0), ZERO3, ZERO3, 1.0, False)
        stab.reset()
        assert all(pid.integral == 0.0 for pid in stab.engines())

    def test_low_throttle_is_level_triggered(self):
        stab = make_integrating_cascade(ResetPolicy.BOTH)
        sp = (1.0, 0.0, 0.0)
        for _ in range(2):
            stab.control(sp, ZERO3, ZERO3, 1.0, False)

        for _ in range(3):
            stab.control(sp, ZERO3, ZERO3, 1.0, True)
            assert stab.angle_pids[0].integral == 0.0
            assert stab.rate_pids[0].integral == 0.0

        stab.control(sp, ZERO3, ZERO3, 1.0, False)
        assert stab.angle_pids[0].integral == pytest.approx(1.0), "Integral must restart from zero"


# ---------------------------------------------------------------------------
# Numeric backends
# ---------------------------------------------------------------------------

class TestCascadeBackends:
    def test_batched_default_configs(self, num_envs):
        stab = CascadeStabilizer(numeric=TorchNumeric(torch.float32))
        zeros = torch.zeros(num_envs)
        sp = (torch.tensor([1.0, 2.0, 3.0]), zeros, zeros)
        roll, pitch, yaw = stab.control(sp, (zeros,) * 3, (zeros,) * 3, 0.01, False)
        # outer = inner = sp ; pre = clamp(sp, ±1) = 1
        assert torch.allclose(roll, torch.tensor([2.0, 3.0, 4.0]))
        assert torch.allclose(pitch, zeros)
        assert torch.allclose(yaw, zeros)

    def test_batched_previous_rate_kept_per_env(self, num_envs):
        stab = CascadeStabilizer(numeric=TorchNumeric(torch.float32))
        zeros = torch.zeros(num_envs)
        gyro = (torch.tensor([0.5, 1.0, 1.5]), zeros, zeros)
        stab.control((zeros,) * 3, (zeros,) * 3, gyro, 0.01, False)
        assert torch.allclose(stab.previous_rate[0], gyro[0])

    def test_fraction_stays_exact(self):
        angle_cfg = FlightStabilizerConfig(kp_roll=2.0)
        rate_cfg = FlightStabilizerConfig(kp_roll=0.5, scale=0.01)
        blending = CascadeBlendingConfig(beta=(0.9, 0.5), k=10.0, limit=5.0)
        stab = CascadeStabilizer(angle_cfg, rate_cfg, blending, ScalarNumeric(Fraction))

        out = stab.control((1.0, 0.0, 0.0), (0.4, 0.0, 0.0), (0.2, 0.0, 0.0), 0.01, False)
        assert out[0] == Fraction(19, 400)
        assert all(isinstance(v, Fraction) for v in out)
