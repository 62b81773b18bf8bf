"""Pydantic models for RLC Lab API requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from rlc_engine.parameters import InputType, Topology


# --- Enums ---

class ElementType(str, Enum):
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"


# --- Circuit parameters ---

class CircuitParams(BaseModel):
    """Component values of a series circuit. Unused elements may be omitted."""
    R: float = Field(..., gt=0, description="Resistance (Ohms)")
    L: Optional[float] = Field(None, gt=0, description="Inductance (H)")
    C: Optional[float] = Field(None, gt=0, description="Capacitance (F)")
    source_amplitude: float = Field(10.0, description="Source amplitude (V)")


class RLCValues(BaseModel):
    R: float = Field(..., gt=0, description="Resistance (Ohms)")
    L: float = Field(..., gt=0, description="Inductance (H)")
    C: float = Field(..., gt=0, description="Capacitance (F)")


# --- Time domain ---

class ResponseRequest(BaseModel):
    topology: Topology
    params: CircuitParams
    input_type: InputType = InputType.STEP
    time_step: Optional[float] = Field(None, gt=0, description="Sampling interval (s); derived from duration if omitted")
    duration: Optional[float] = Field(None, ge=0, description="Window length (s); five time constants if omitted")


class ResponseResponse(BaseModel):
    time: list[float]
    voltage: list[float]
    current: list[float]
    num_points: int
    damping_type: Optional[str] = None
    alpha: Optional[float] = None
    omega0: Optional[float] = None
    zeta: Optional[float] = None
    time_constant: Optional[float] = None


# --- s-domain ---

class ComplexValue(BaseModel):
    real: float
    imag: float


class TransferFunctionResponse(BaseModel):
    numerator: list[float]
    denominator: list[float]
    poles: list[ComplexValue]
    zeros: list[ComplexValue]
    damping_type: str


class FrequencyResponseRequest(RLCValues):
    freq_start: float = Field(1.0, gt=0)
    freq_end: float = Field(100000.0, gt=0)
    num_points: int = Field(500, gt=10, le=5000)


class FrequencyResponseResponse(BaseModel):
    frequencies: list[float]
    magnitude_db: list[float]
    phase_deg: list[float]
    num_points: int


# --- Component physics ---

class ElementRequest(BaseModel):
    """Geometry of a physical element. Material properties can come from the
    material table or be given explicitly."""
    element: ElementType
    material: Optional[str] = None
    resistivity: Optional[float] = Field(None, gt=0, description="Ω·m")
    permittivity: Optional[float] = Field(None, gt=0, description="F/m")
    permeability: Optional[float] = Field(None, gt=0, description="H/m")
    length: Optional[float] = Field(None, gt=0, description="Conductor or coil length (m)")
    area: float = Field(..., gt=0, description="Cross-section or plate area (m²)")
    distance: Optional[float] = Field(None, gt=0, description="Plate separation (m)")
    turns: Optional[int] = Field(None, gt=0)


class ElementResponse(BaseModel):
    element: ElementType
    value: float
    unit: str


class MaterialInfo(BaseModel):
    name: str
    resistivity: Optional[float] = None
    permittivity: Optional[float] = None
    permeability: Optional[float] = None


class MaterialListResponse(BaseModel):
    materials: list[MaterialInfo]
    total: int
