"""
Helpers for choosing a sensible time window and reading off key values.

A window of five time constants shows a first-order response settle to
within 1% of its final value; the same rule is applied to the RLC decay
envelope 1/α = 2L/R.
"""

import math
from typing import Optional

from rlc_engine.damping import second_order_characteristics
from rlc_engine.parameters import (
    CircuitParameters,
    DampingType,
    Topology,
    parse_topology,
    require_positive,
    validate_parameters,
)

MIN_DURATION = 0.001   # s
MAX_DURATION = 0.1     # s
SETTLING_TIME_CONSTANTS = 5
DEFAULT_POINTS = 1000


def characteristic_time(topology, params: CircuitParameters) -> float:
    """Time constant τ (RC, L/R) or RLC envelope time constant 2L/R."""
    topology = parse_topology(topology)
    validate_parameters(topology, params)

    if topology is Topology.RC:
        return params.R * params.C
    if topology is Topology.RL:
        return params.L / params.R
    return 2 * params.L / params.R


def auto_duration(topology, params: CircuitParameters) -> float:
    """Five time constants, clamped to [MIN_DURATION, MAX_DURATION]."""
    tau = characteristic_time(topology, params)
    return max(MIN_DURATION, min(MAX_DURATION, SETTLING_TIME_CONSTANTS * tau))


def auto_time_step(duration: float, points: int = DEFAULT_POINTS) -> float:
    """Step that splits duration into the given number of intervals."""
    duration = require_positive('duration', duration)
    if points < 1:
        raise ValueError(f"points must be at least 1, got {points}")
    return duration / points


def critical_resistance(L: float, C: float) -> float:
    """Series resistance 2√(L/C) that makes an RLC circuit critically damped."""
    L = require_positive('L', L)
    C = require_positive('C', C)
    return 2 * math.sqrt(L / C)


def damped_period(R: float, L: float, C: float) -> Optional[float]:
    """Ringing period 2π/ωd in seconds, or None if the circuit doesn't oscillate."""
    char = second_order_characteristics(R, L, C)
    if char.damping_type is not DampingType.UNDERDAMPED:
        return None
    return 2 * math.pi / char.omega_d
