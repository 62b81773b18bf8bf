"""
Tests for the closed-form transient response engine.

Validates against known circuit behaviour:
1. Sample grid is exact (i * time_step, no drift)
2. First-order steady state and the 63.2% point at t = τ
3. RLC regime selection and steady state for each regime
4. Impulse response ≈ derivative of step response
5. No jump in v(t) as ζ crosses the critical-damping band
"""

import math

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from rlc_engine.parameters import CircuitParameters, DampingType, InputType, InvalidParameterError, Topology
from rlc_engine.response import CircuitResponse, TimeSample, compute_response, sample_times


# Component values used by the interactive lessons
L_LESSON = 0.1      # 100 mH
C_LESSON = 1e-4     # 100 µF
R_CRITICAL = 2 * math.sqrt(L_LESSON / C_LESSON)   # ≈ 63.25 Ω


def rlc(R, Vs=10.0):
    return CircuitParameters(R=R, L=L_LESSON, C=C_LESSON, source_amplitude=Vs)


class TestSampleGrid:
    """Sample instants are generated from an integer counter."""

    def test_times_are_exact_multiples(self):
        dt = 1e-4
        resp = compute_response('RC', CircuitParameters(R=1000, C=1e-4, source_amplitude=10), dt, 0.05)
        for i, sample in enumerate(resp.samples):
            assert sample.time == i * dt

    def test_sample_count_includes_both_endpoints(self):
        resp = compute_response('RC', CircuitParameters(R=1000, C=1e-4), 0.001, 0.01)
        assert len(resp.samples) == 11
        assert resp.samples[0].time == 0.0

    def test_endpoint_on_grid_survives_rounding(self):
        """0.3 / 0.1 is 2.9999999999999996 in floating point."""
        t = sample_times(0.1, 0.3)
        assert len(t) == 4
        assert t[-1] == pytest.approx(0.3)

    def test_endpoint_off_grid_is_excluded(self):
        t = sample_times(0.25, 1.1)
        assert len(t) == 5
        assert t[-1] == 1.0

    def test_endpoint_just_short_of_grid_is_excluded(self):
        """A duration a hair below 4 * 0.25 must not pull in t = 1.0."""
        t = sample_times(0.25, 0.9999999995)
        assert len(t) == 4
        assert t[-1] == 0.75

    @pytest.mark.parametrize('dt,duration', [
        (0.25, 0.9999999995), (0.1, 0.3), (0.1, 0.29999999), (1e-4, 0.05),
        (0.3, 0.9), (1e-3, 0.0999999999), (0.7, 10.0),
    ])
    def test_last_sample_never_past_duration(self, dt, duration):
        t = sample_times(dt, duration)
        assert t[-1] <= duration * (1 + 1e-12)
        assert t[-1] + dt > duration * (1 + 1e-12)

    def test_zero_duration_gives_single_sample(self):
        resp = compute_response('RL', CircuitParameters(R=100, L=0.1), 1e-5, 0.0)
        assert len(resp.samples) == 1
        assert resp.samples[0].time == 0.0

    def test_times_strictly_increasing(self):
        resp = compute_response('RLC', rlc(200), 1e-5, 0.02)
        assert np.all(np.diff(resp.times) > 0)

    def test_no_drift_compared_with_accumulation(self):
        """Repeated addition drifts; the grid must not."""
        dt = 0.1
        t = sample_times(dt, 1000.0)
        accumulated = 0.0
        for _ in range(len(t) - 1):
            accumulated += dt
        assert t[-1] == (len(t) - 1) * dt
        assert accumulated != t[-1]


class TestRCResponse:
    """Series RC charged through R from a step source."""

    PARAMS = CircuitParameters(R=1000.0, C=100e-6, source_amplitude=10.0)   # τ = 0.1 s

    def test_time_constant_reported(self):
        resp = compute_response('RC', self.PARAMS, 1e-3, 0.5)
        assert resp.time_constant == pytest.approx(0.1)
        assert resp.damping_type is None
        assert resp.alpha is None

    def test_voltage_at_tau(self):
        """v(τ) ≈ 6.32 V for Vs = 10 V."""
        resp = compute_response('RC', self.PARAMS, 1e-3, 0.5)
        sample = resp.samples[100]
        assert sample.time == pytest.approx(0.1)
        assert sample.voltage == pytest.approx(6.32, abs=0.01)

    def test_63_percent_at_tau(self):
        tau = 0.1
        resp = compute_response('RC', self.PARAMS, tau / 100, tau)
        last = resp.samples[-1]
        assert last.voltage / 10.0 == pytest.approx(1 - math.exp(-last.time / tau), rel=1e-12)
        assert last.voltage / 10.0 == pytest.approx(1 - math.exp(-1), rel=1e-9)

    def test_initial_conditions(self):
        resp = compute_response('RC', self.PARAMS, 1e-3, 0.1)
        assert resp.samples[0].voltage == 0.0
        assert resp.samples[0].current == pytest.approx(10.0 / 1000.0)

    def test_steady_state_convergence(self):
        """v → Vs, i → 0 monotonically."""
        resp = compute_response('RC', self.PARAMS, 2e-3, 2.0)   # 20τ
        v = resp.voltages
        i = resp.currents

        assert v[-1] == pytest.approx(10.0, rel=1e-6)
        assert i[-1] == pytest.approx(0.0, abs=1e-9)
        assert np.all(np.diff(v) >= 0)
        assert np.all(np.diff(i) <= 0)

    def test_impulse_response(self):
        resp = compute_response('RC', self.PARAMS, 1e-3, 0.5, 'impulse')
        tau = 0.1
        assert resp.samples[0].voltage == pytest.approx(10.0 / tau)
        assert resp.samples[0].current == pytest.approx(-10.0 / (1000.0 * tau))
        assert resp.time_constant == pytest.approx(tau)

    def test_rc_ignores_inductance(self):
        """L is not part of the RC circuit and may be omitted."""
        resp = compute_response('RC', CircuitParameters(R=1000.0, C=1e-4), 1e-3, 0.01)
        assert len(resp.samples) == 11

    def test_amplitude_scales_linearly(self):
        a = compute_response('RC', CircuitParameters(R=1000.0, C=1e-4, source_amplitude=1.0), 1e-3, 0.3)
        b = compute_response('RC', CircuitParameters(R=1000.0, C=1e-4, source_amplitude=-5.0), 1e-3, 0.3)
        np.testing.assert_allclose(b.voltages, -5.0 * a.voltages)
        np.testing.assert_allclose(b.currents, -5.0 * a.currents)


class TestRLResponse:
    """Series RL energised from a step source."""

    PARAMS = CircuitParameters(R=100.0, L=0.1, source_amplitude=10.0)   # τ = 1 ms

    def test_current_at_tau(self):
        """i(τ) ≈ 63.2 mA for Vs = 10 V, R = 100 Ω."""
        resp = compute_response('RL', self.PARAMS, 1e-5, 0.01)
        sample = resp.samples[100]
        assert sample.time == pytest.approx(0.001)
        assert sample.current == pytest.approx(0.0632, abs=1e-4)
        assert resp.time_constant == pytest.approx(0.001)

    def test_steady_state_convergence(self):
        """i → Vs/R, v → 0."""
        resp = compute_response('RL', self.PARAMS, 2e-5, 0.02)
        assert resp.currents[-1] == pytest.approx(0.1, rel=1e-6)
        assert resp.voltages[-1] == pytest.approx(0.0, abs=1e-6)
        assert np.all(np.diff(resp.currents) >= 0)

    def test_inductor_voltage_starts_at_source(self):
        resp = compute_response('RL', self.PARAMS, 1e-5, 0.001)
        assert resp.samples[0].voltage == pytest.approx(10.0)
        assert resp.samples[0].current == 0.0

    def test_impulse_response(self):
        resp = compute_response('RL', self.PARAMS, 1e-5, 0.005, InputType.IMPULSE)
        assert resp.samples[0].current == pytest.approx(10.0 / 0.1)
        assert resp.samples[0].voltage == pytest.approx(-10.0 * 100.0 / 0.1)


class TestRLCResponse:
    """Series RLC, voltage across C."""

    def test_heavily_overdamped(self):
        """R = 2 kΩ: α = 10000, ω₀ ≈ 316.2, ζ ≈ 31.6."""
        resp = compute_response('RLC', rlc(2000.0), 1e-4, 0.05)
        assert resp.damping_type is DampingType.OVERDAMPED
        assert resp.alpha == pytest.approx(10000.0)
        assert resp.omega0 == pytest.approx(316.227766, rel=1e-6)
        assert resp.zeta == pytest.approx(31.6227766, rel=1e-6)
        assert resp.time_constant is None

    def test_overdamped(self):
        resp = compute_response('RLC', rlc(200.0), 1e-4, 0.05)
        assert resp.damping_type is DampingType.OVERDAMPED
        assert resp.alpha == pytest.approx(1000.0)
        assert resp.zeta == pytest.approx(3.16227766, rel=1e-6)

    def test_overdamped_step_closed_form(self):
        """v = Vs - A1·e^(s1·t) - A2·e^(s2·t), i = -C(A1·s1·e^(s1·t) + A2·s2·e^(s2·t))."""
        Vs = 10.0
        resp = compute_response('RLC', rlc(200.0, Vs=Vs), 1e-4, 0.02)
        alpha = 200.0 / (2 * L_LESSON)
        w0_sq = 1.0 / (L_LESSON * C_LESSON)
        s1 = -alpha + math.sqrt(alpha ** 2 - w0_sq)
        s2 = -alpha - math.sqrt(alpha ** 2 - w0_sq)
        A1 = Vs * s2 / (s2 - s1)
        A2 = -Vs * s1 / (s2 - s1)

        t = resp.times
        e1, e2 = np.exp(s1 * t), np.exp(s2 * t)
        np.testing.assert_allclose(resp.voltages, Vs - A1 * e1 - A2 * e2, rtol=1e-12, atol=1e-12)
        np.testing.assert_allclose(
            resp.currents, -C_LESSON * (A1 * s1 * e1 + A2 * s2 * e2), rtol=1e-12, atol=1e-12,
        )

    def test_critically_damped_at_critical_resistance(self):
        resp = compute_response('RLC', rlc(R_CRITICAL), 1e-4, 0.05)
        assert resp.damping_type is DampingType.CRITICALLY_DAMPED
        assert resp.zeta == pytest.approx(1.0)

    def test_underdamped(self):
        resp = compute_response('RLC', rlc(10.0), 1e-4, 0.05)
        assert resp.damping_type is DampingType.UNDERDAMPED
        assert resp.zeta < 1

    def test_tolerance_band_edges(self):
        inside_low = compute_response('RLC', rlc(0.995 * R_CRITICAL), 1e-4, 0.01)
        inside_high = compute_response('RLC', rlc(1.005 * R_CRITICAL), 1e-4, 0.01)
        below = compute_response('RLC', rlc(0.98 * R_CRITICAL), 1e-4, 0.01)
        above = compute_response('RLC', rlc(1.02 * R_CRITICAL), 1e-4, 0.01)

        assert inside_low.damping_type is DampingType.CRITICALLY_DAMPED
        assert inside_high.damping_type is DampingType.CRITICALLY_DAMPED
        assert below.damping_type is DampingType.UNDERDAMPED
        assert above.damping_type is DampingType.OVERDAMPED

    @pytest.mark.parametrize('R', [2000.0, 200.0, R_CRITICAL, 10.0])
    def test_step_starts_at_rest(self, R):
        resp = compute_response('RLC', rlc(R), 1e-4, 0.01)
        assert resp.samples[0].voltage == pytest.approx(0.0, abs=1e-9)
        assert resp.samples[0].current == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize('R', [200.0, R_CRITICAL, 10.0])
    def test_step_settles_at_source_voltage(self, R):
        resp = compute_response('RLC', rlc(R), 1e-3, 1.0)
        assert resp.voltages[-1] == pytest.approx(10.0, rel=1e-6)
        assert resp.currents[-1] == pytest.approx(0.0, abs=1e-6)

    def test_underdamped_overshoots(self):
        resp = compute_response('RLC', rlc(10.0), 1e-5, 0.05)
        assert resp.voltages.max() > 10.0
        assert resp.voltages.min() >= -1e-9

    def test_overdamped_does_not_overshoot(self):
        resp = compute_response('RLC', rlc(200.0), 1e-5, 0.2)
        assert resp.voltages.max() <= 10.0 + 1e-9
        assert np.all(np.diff(resp.voltages) >= -1e-12)

    def test_current_is_c_dv_dt(self):
        """Loop current equals C·dv/dt in every regime."""
        dt = 1e-6
        for R in (200.0, R_CRITICAL, 10.0):
            resp = compute_response('RLC', rlc(R), dt, 0.02)
            dv_dt = np.gradient(resp.voltages, dt)
            np.testing.assert_allclose(
                C_LESSON * dv_dt[1:-1], resp.currents[1:-1],
                atol=1e-4 * np.abs(resp.currents).max(),
            )

    def test_accepts_enum_arguments(self):
        a = compute_response(Topology.RLC, rlc(10.0), 1e-4, 0.01, InputType.STEP)
        b = compute_response('RLC', rlc(10.0), 1e-4, 0.01, 'step')
        assert a == b


class TestImpulseIsDerivativeOfStep:
    """Finite-difference derivative of the step response ≈ impulse response."""

    def _max_error(self, topology, params, dt, duration):
        step = compute_response(topology, params, dt, duration, 'step')
        impulse = compute_response(topology, params, dt, duration, 'impulse')
        derivative = np.gradient(step.voltages, dt)
        err = np.abs(derivative[1:-1] - impulse.voltages[1:-1])
        return err.max() / np.abs(impulse.voltages).max()

    @pytest.mark.parametrize('topology,params,duration', [
        ('RC', CircuitParameters(R=1000.0, C=1e-4, source_amplitude=10.0), 0.5),
        ('RL', CircuitParameters(R=100.0, L=0.1, source_amplitude=10.0), 0.005),
        ('RLC', CircuitParameters(R=200.0, L=0.1, C=1e-4, source_amplitude=10.0), 0.05),
        ('RLC', CircuitParameters(R=R_CRITICAL, L=0.1, C=1e-4, source_amplitude=10.0), 0.05),
        ('RLC', CircuitParameters(R=10.0, L=0.1, C=1e-4, source_amplitude=10.0), 0.05),
    ])
    def test_derivative_matches_and_converges(self, topology, params, duration):
        coarse = self._max_error(topology, params, duration / 2000, duration)
        fine = self._max_error(topology, params, duration / 20000, duration)

        assert coarse < 2e-3
        assert fine < coarse


class TestDampingContinuity:
    """v(t) at a fixed t has no jump as ζ sweeps through the critical band."""

    def test_sweep_through_band(self):
        zetas = np.linspace(0.98, 1.02, 81)
        values = []
        regimes = set()
        for zeta in zetas:
            resp = compute_response('RLC', rlc(zeta * R_CRITICAL), 1e-4, 0.01)
            values.append(resp.samples[-1].voltage)
            regimes.add(resp.damping_type)

        assert regimes == set(DampingType)
        steps = np.abs(np.diff(values))
        assert steps.max() < 0.015 * 10.0


class TestValidation:
    """Domain checks fail fast and name the field."""

    @pytest.mark.parametrize('topology,params,field', [
        ('RC', CircuitParameters(R=0.0, C=1e-4), 'R'),
        ('RC', CircuitParameters(R=100.0, C=0.0), 'C'),
        ('RC', CircuitParameters(R=100.0), 'C'),
        ('RL', CircuitParameters(R=100.0, L=-0.1), 'L'),
        ('RLC', CircuitParameters(R=100.0, L=0.1), 'C'),
        ('RLC', CircuitParameters(R=float('nan'), L=0.1, C=1e-4), 'R'),
    ])
    def test_invalid_elements(self, topology, params, field):
        with pytest.raises(InvalidParameterError) as exc_info:
            compute_response(topology, params, 1e-4, 0.01)
        assert exc_info.value.field == field

    def test_invalid_time_step(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            compute_response('RC', CircuitParameters(R=1.0, C=1.0), 0.0, 1.0)
        assert exc_info.value.field == 'time_step'

    def test_negative_duration(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            compute_response('RC', CircuitParameters(R=1.0, C=1.0), 0.1, -1.0)
        assert exc_info.value.field == 'duration'

    def test_unknown_topology(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            compute_response('LC', CircuitParameters(R=1.0, L=1.0, C=1.0), 0.1, 1.0)
        assert exc_info.value.field == 'topology'

    def test_unknown_input_type(self):
        with pytest.raises(InvalidParameterError):
            compute_response('RC', CircuitParameters(R=1.0, C=1.0), 0.1, 1.0, 'ramp')

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            compute_response('RL', CircuitParameters(R=1.0), 0.1, 1.0)


class TestSerialization:

    def test_to_dict(self):
        resp = compute_response('RLC', rlc(10.0), 1e-3, 0.01)
        d = resp.to_dict()
        assert d['num_points'] == 11
        assert len(d['time']) == len(d['voltage']) == len(d['current']) == 11
        assert d['damping_type'] == 'underdamped'
        assert d['time_constant'] is None

    def test_samples_are_named_tuples(self):
        resp = compute_response('RC', CircuitParameters(R=1.0, C=1.0), 0.5, 1.0)
        assert isinstance(resp, CircuitResponse)
        assert isinstance(resp.samples[0], TimeSample)
        assert resp.samples[1].time == 0.5

    def test_deterministic(self):
        a = compute_response('RLC', rlc(200.0), 1e-4, 0.02, 'impulse')
        b = compute_response('RLC', rlc(200.0), 1e-4, 0.02, 'impulse')
        assert a == b
