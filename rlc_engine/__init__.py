"""
RLC Lab Compute Engine

Closed-form transient responses and transfer functions for series
RC, RL and RLC circuits driven by a step or impulse source.

All functions are pure and deterministic; no numerical integration.
"""

from rlc_engine.parameters import (
    CircuitParameters,
    DampingType,
    InputType,
    InvalidParameterError,
    Topology,
)
from rlc_engine.damping import CRITICAL_DAMPING_TOLERANCE, SecondOrderCharacteristics, classify_damping, second_order_characteristics
from rlc_engine.response import CircuitResponse, TimeSample, compute_response, sample_times
from rlc_engine.transfer import TransferFunction, compute_transfer_function, frequency_response, generate_frequencies
from rlc_engine.presets import auto_duration, auto_time_step, characteristic_time, critical_resistance, damped_period
from rlc_engine.physics import MATERIALS, get_material, resistance, capacitance, inductance

__version__ = "0.1.0"
