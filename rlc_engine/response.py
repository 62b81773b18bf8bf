"""
Closed-form transient response of series RC, RL and RLC circuits.

The source is an ideal voltage source of amplitude Vs applied at t = 0,
either as a step Vs·u(t) or as an impulse Vs·δ(t). Voltage is measured
across the capacitor (RC, RLC) or the inductor (RL); current is the
series loop current.

First-order circuits (τ = RC or τ = L/R):

    RC step:     v = Vs(1 - e^(-t/τ))          i = (Vs/R)e^(-t/τ)
    RC impulse:  v = (Vs/τ)e^(-t/τ)            i = -(Vs/Rτ)e^(-t/τ)
    RL step:     v = Vs e^(-t/τ)               i = (Vs/R)(1 - e^(-t/τ))
    RL impulse:  v = -(Vs·R/L)e^(-t/τ)         i = (Vs/L)e^(-t/τ)

The RLC response takes one of three closed forms depending on the damping
regime reported by rlc_engine.damping. Impulse responses are the time
derivatives of the corresponding step responses.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Tuple

import numpy as np

from rlc_engine.damping import SecondOrderCharacteristics, second_order_characteristics
from rlc_engine.parameters import (
    CircuitParameters,
    DampingType,
    InputType,
    Topology,
    parse_input_type,
    parse_topology,
    validate_parameters,
    validate_time_grid,
)

logger = logging.getLogger(__name__)

# Relative slack when comparing a grid instant with the duration, so an end
# point that lies on the grid survives rounding (3 * 0.1 > 0.3 by one ulp).
_GRID_TOLERANCE = 1e-12


class TimeSample(NamedTuple):
    """One point of a response: time (s), voltage (V), current (A)."""
    time: float
    voltage: float
    current: float


@dataclass(frozen=True)
class CircuitResponse:
    """Sampled response plus the characteristic parameters of the circuit."""
    samples: Tuple[TimeSample, ...]
    damping_type: Optional[DampingType] = None
    alpha: Optional[float] = None
    omega0: Optional[float] = None
    zeta: Optional[float] = None
    time_constant: Optional[float] = None

    @property
    def times(self) -> np.ndarray:
        return np.array([s.time for s in self.samples])

    @property
    def voltages(self) -> np.ndarray:
        return np.array([s.voltage for s in self.samples])

    @property
    def currents(self) -> np.ndarray:
        return np.array([s.current for s in self.samples])

    def to_dict(self) -> Dict:
        """Serialize to plain lists and scalars for JSON transport."""
        return {
            'time': [s.time for s in self.samples],
            'voltage': [s.voltage for s in self.samples],
            'current': [s.current for s in self.samples],
            'num_points': len(self.samples),
            'damping_type': self.damping_type.value if self.damping_type else None,
            'alpha': self.alpha,
            'omega0': self.omega0,
            'zeta': self.zeta,
            'time_constant': self.time_constant,
        }


def sample_times(time_step: float, duration: float) -> np.ndarray:
    """
    Sample instants t_i = i * time_step for i = 0 .. floor(duration / time_step).

    Each instant is an integer index times the step, so later samples carry
    no accumulated rounding error.
    """
    validate_time_grid(time_step, duration)
    last_index = _last_index(time_step, duration)
    return np.arange(last_index + 1, dtype=np.float64) * time_step


def _on_or_before(t: float, duration: float) -> bool:
    return t <= duration or math.isclose(t, duration, rel_tol=_GRID_TOLERANCE)


def _last_index(time_step: float, duration: float) -> int:
    """Largest i with i * time_step <= duration, up to floating-point rounding."""
    last = int(math.floor(duration / time_step))
    if _on_or_before((last + 1) * time_step, duration):
        last += 1
    while last > 0 and not _on_or_before(last * time_step, duration):
        last -= 1
    return last


def compute_response(
    topology,
    params: CircuitParameters,
    time_step: float,
    duration: float,
    input_type=InputType.STEP,
) -> CircuitResponse:
    """
    Compute the time-domain response of a series circuit.

    Args:
        topology: 'RC', 'RL' or 'RLC' (or a Topology member)
        params: Component values and source amplitude
        time_step: Sampling interval in seconds (> 0)
        duration: Length of the window in seconds (>= 0)
        input_type: 'step' or 'impulse' (or an InputType member)

    Returns:
        CircuitResponse. RC/RL set time_constant; RLC sets damping_type,
        alpha, omega0 and zeta.

    Raises:
        InvalidParameterError: for an unknown topology/input type or any
        element, time step or duration outside its domain.
    """
    topology = parse_topology(topology)
    input_type = parse_input_type(input_type)
    validate_parameters(topology, params)
    t = sample_times(time_step, duration)

    Vs = float(params.source_amplitude)

    if topology is Topology.RC:
        tau = params.R * params.C
        v, i = _rc_response(t, params.R, tau, Vs, input_type)
        return _build(t, v, i, time_constant=tau)

    if topology is Topology.RL:
        tau = params.L / params.R
        v, i = _rl_response(t, params.R, params.L, tau, Vs, input_type)
        return _build(t, v, i, time_constant=tau)

    char = second_order_characteristics(params.R, params.L, params.C)
    v, i = _rlc_response(t, char, params.L, params.C, Vs, input_type)
    return _build(
        t, v, i,
        damping_type=char.damping_type,
        alpha=char.alpha,
        omega0=char.omega0,
        zeta=char.zeta,
    )


def _build(t: np.ndarray, v: np.ndarray, i: np.ndarray, **fields) -> CircuitResponse:
    samples = tuple(
        TimeSample(float(tk), float(vk), float(ik))
        for tk, vk, ik in zip(t, v, i)
    )
    return CircuitResponse(samples=samples, **fields)


def _rc_response(t, R, tau, Vs, input_type):
    decay = np.exp(-t / tau)
    if input_type is InputType.STEP:
        return Vs * (1 - decay), (Vs / R) * decay
    return (Vs / tau) * decay, -(Vs / (R * tau)) * decay


def _rl_response(t, R, L, tau, Vs, input_type):
    decay = np.exp(-t / tau)
    if input_type is InputType.STEP:
        return Vs * decay, (Vs / R) * (1 - decay)
    return -(Vs * R / L) * decay, (Vs / L) * decay


def _rlc_response(t, char: SecondOrderCharacteristics, L, C, Vs, input_type):
    if char.damping_type is DampingType.OVERDAMPED:
        return _overdamped(t, char, C, Vs, input_type)
    if char.damping_type is DampingType.UNDERDAMPED:
        return _underdamped(t, char, C, Vs, input_type)
    return _critically_damped(t, char, L, C, Vs, input_type)


def _overdamped(t, char, C, Vs, input_type):
    s1, s2 = char.roots[0].real, char.roots[1].real
    e1 = np.exp(s1 * t)
    e2 = np.exp(s2 * t)

    if input_type is InputType.STEP:
        # Transient part A1·e^(s1·t) + A2·e^(s2·t) starts at Vs with zero slope,
        # so v(0) = 0 and i(0) = 0
        A1 = Vs * s2 / (s2 - s1)
        A2 = -Vs * s1 / (s2 - s1)
        v = Vs - (A1 * e1 + A2 * e2)
        i = -C * (A1 * s1 * e1 + A2 * s2 * e2)
        return v, i

    k = Vs * char.omega0_squared / (s1 - s2)
    v = k * (e1 - e2)
    i = C * k * (s1 * e1 - s2 * e2)
    return v, i


def _critically_damped(t, char, L, C, Vs, input_type):
    alpha = char.alpha
    decay = np.exp(-alpha * t)

    if input_type is InputType.STEP:
        v = Vs * (1 - decay * (1 + alpha * t))
        i = (Vs / L) * t * decay
        return v, i

    k = Vs * char.omega0_squared
    v = k * t * decay
    i = C * k * (1 - alpha * t) * decay
    return v, i


def _underdamped(t, char, C, Vs, input_type):
    alpha = char.alpha
    wd = char.omega_d
    decay = np.exp(-alpha * t)
    cos_wt = np.cos(wd * t)
    sin_wt = np.sin(wd * t)

    if input_type is InputType.STEP:
        v = Vs * (1 - decay * (cos_wt + (alpha / wd) * sin_wt))
        i = Vs * char.omega0_squared * C * decay * sin_wt / wd
        return v, i

    k = Vs * char.omega0_squared / wd
    v = k * decay * sin_wt
    i = C * k * decay * (wd * cos_wt - alpha * sin_wt)
    return v, i
