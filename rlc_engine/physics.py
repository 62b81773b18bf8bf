"""
Physical origin of R, L and C.

Element values from material properties and geometry, the energy each
storage element holds, and their complex impedances:

    R = ρ·l / A          Z_R = R
    C = ε·A / d          Z_C = 1 / (jωC)        W = ½CV²
    L = N²·μ·A / l       Z_L = jωL              W = ½LI²
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np


@dataclass(frozen=True)
class Material:
    name: str
    resistivity: Optional[float] = None    # Ω·m
    permittivity: Optional[float] = None   # F/m
    permeability: Optional[float] = None   # H/m


MATERIALS: Dict[str, Material] = {
    m.name.lower(): m for m in [
        Material('Copper', resistivity=1.68e-8, permeability=1.256629e-6),
        Material('Aluminum', resistivity=2.65e-8, permeability=1.256665e-6),
        Material('Silver', resistivity=1.59e-8, permeability=1.256629e-6),
        Material('Gold', resistivity=2.44e-8, permeability=1.256629e-6),
        Material('Iron', resistivity=9.71e-8, permeability=6.3e-3),
        Material('Air', permittivity=8.854e-12, permeability=1.257e-6),
        Material('Paper', permittivity=3.7e-11),
        Material('Teflon', permittivity=2.1e-11),
        Material('Glass', permittivity=4.0e-11),
    ]
}


def get_material(name: str) -> Material:
    """Look up a material by case-insensitive name."""
    try:
        return MATERIALS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown material '{name}'. Must be one of: {sorted(MATERIALS)}"
        ) from None


def _check_positive(**values: float) -> None:
    for name, value in values.items():
        if value is None or value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def resistance(resistivity: float, length: float, area: float) -> float:
    """Resistance (Ω) of a uniform conductor."""
    _check_positive(resistivity=resistivity, length=length, area=area)
    return resistivity * length / area


def capacitance(permittivity: float, area: float, distance: float) -> float:
    """Capacitance (F) of a parallel-plate capacitor."""
    _check_positive(permittivity=permittivity, area=area, distance=distance)
    return permittivity * area / distance


def inductance(permeability: float, turns: int, area: float, length: float) -> float:
    """Inductance (H) of a long solenoid."""
    _check_positive(permeability=permeability, turns=turns, area=area, length=length)
    return permeability * turns * turns * area / length


def capacitor_energy(C: float, voltage: float) -> float:
    """Energy (J) stored in a capacitor charged to voltage."""
    return 0.5 * C * voltage ** 2


def inductor_energy(L: float, current: float) -> float:
    """Energy (J) stored in an inductor carrying current."""
    return 0.5 * L * current ** 2


def capacitor_impedance(C: float, omega: np.ndarray) -> np.ndarray:
    return 1.0 / (1j * np.asarray(omega, dtype=float) * C)


def inductor_impedance(L: float, omega: np.ndarray) -> np.ndarray:
    return 1j * np.asarray(omega, dtype=float) * L
