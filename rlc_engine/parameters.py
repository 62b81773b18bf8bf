"""
Circuit parameter types and input validation.

The closed-form solutions in this package divide by R, L, C and the time
step, so every entry point validates its inputs up front and raises
InvalidParameterError naming the offending field instead of letting
NaN/Infinity leak into the sample series.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Topology(str, Enum):
    RC = "RC"
    RL = "RL"
    RLC = "RLC"


class InputType(str, Enum):
    STEP = "step"
    IMPULSE = "impulse"


class DampingType(str, Enum):
    OVERDAMPED = "overdamped"
    CRITICALLY_DAMPED = "critically-damped"
    UNDERDAMPED = "underdamped"


# Elements each topology needs (R is always required)
REQUIRED_ELEMENTS = {
    Topology.RC: ('R', 'C'),
    Topology.RL: ('R', 'L'),
    Topology.RLC: ('R', 'L', 'C'),
}


class InvalidParameterError(ValueError):
    """Raised when a circuit or sampling parameter is outside its domain."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


@dataclass(frozen=True)
class CircuitParameters:
    """Component values for a series circuit driven by an ideal source.

    R in Ohms, L in Henries, C in Farads, source_amplitude in Volts.
    L and C may be left as None for topologies that don't use them.
    """
    R: float
    L: Optional[float] = None
    C: Optional[float] = None
    source_amplitude: float = 1.0


def require_positive(field: str, value: Optional[float]) -> float:
    """Return value as float, or raise if it is missing, non-finite or <= 0."""
    if value is None:
        raise InvalidParameterError(field, "value is required")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(field, f"must be positive, got {value}")
    return value


def parse_topology(topology) -> Topology:
    try:
        return Topology(topology)
    except ValueError:
        raise InvalidParameterError(
            'topology', f"unknown topology {topology!r}, expected one of {[t.value for t in Topology]}"
        ) from None


def parse_input_type(input_type) -> InputType:
    try:
        return InputType(input_type)
    except ValueError:
        raise InvalidParameterError(
            'input_type', f"unknown input type {input_type!r}, expected one of {[t.value for t in InputType]}"
        ) from None


def validate_parameters(topology: Topology, params: CircuitParameters) -> None:
    """Check that every element the topology uses is present and positive."""
    for name in REQUIRED_ELEMENTS[topology]:
        require_positive(name, getattr(params, name))

    if not math.isfinite(float(params.source_amplitude)):
        raise InvalidParameterError(
            'source_amplitude', f"must be finite, got {params.source_amplitude}"
        )


def validate_time_grid(time_step: float, duration: float) -> None:
    require_positive('time_step', time_step)
    if duration is None or not math.isfinite(duration) or duration < 0:
        raise InvalidParameterError('duration', f"must be >= 0, got {duration}")
