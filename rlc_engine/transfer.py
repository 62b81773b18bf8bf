"""
s-domain transfer function of the series RLC circuit.

With the output taken across the capacitor:

    H(s) = ω₀² / (s² + 2αs + ω₀²)

There are no finite zeros. The poles are the roots of the denominator and
are taken from the shared damping helper so that the pole structure always
matches the regime used by the time-domain response:

    overdamped         two distinct negative real poles
    critically damped  one repeated real pole at -α
    underdamped        complex-conjugate pair -α ± jωd
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from rlc_engine.damping import second_order_characteristics
from rlc_engine.parameters import DampingType, require_positive


@dataclass(frozen=True)
class TransferFunction:
    """Coefficient form (descending powers of s) plus poles and zeros."""
    numerator: Tuple[float, ...]
    denominator: Tuple[float, ...]
    poles: Tuple[complex, ...]
    zeros: Tuple[complex, ...]
    damping_type: DampingType

    @property
    def discriminant(self) -> float:
        """b² - 4ac of the denominator polynomial."""
        a, b, c = self.denominator
        return b * b - 4 * a * c

    def evaluate(self, s) -> np.ndarray:
        """Evaluate H(s) at one or more complex frequencies."""
        s = np.asarray(s, dtype=complex)
        return np.polyval(self.numerator, s) / np.polyval(self.denominator, s)

    def to_dict(self) -> Dict:
        return {
            'numerator': list(self.numerator),
            'denominator': list(self.denominator),
            'poles': [_complex_to_dict(p) for p in self.poles],
            'zeros': [_complex_to_dict(z) for z in self.zeros],
            'damping_type': self.damping_type.value,
        }


def _complex_to_dict(value: complex) -> Dict[str, float]:
    return {'real': float(value.real), 'imag': float(value.imag)}


def compute_transfer_function(R: float, L: float, C: float) -> TransferFunction:
    """
    Build H(s) for a series RLC circuit.

    Args:
        R: Resistance (Ohms), > 0
        L: Inductance (H), > 0
        C: Capacitance (F), > 0

    Returns:
        TransferFunction with numerator (ω₀²,), denominator (1, 2α, ω₀²),
        two poles and no zeros.

    Raises:
        InvalidParameterError: if any element is missing or not positive.
    """
    char = second_order_characteristics(R, L, C)

    return TransferFunction(
        numerator=(char.omega0_squared,),
        denominator=(1.0, 2 * char.alpha, char.omega0_squared),
        poles=char.roots,
        zeros=(),
        damping_type=char.damping_type,
    )


def generate_frequencies(
    start: float = 1.0,
    end: float = 100000.0,
    num_points: int = 500,
) -> np.ndarray:
    """Generate logarithmically-spaced frequency array (Hz)."""
    require_positive('freq_start', start)
    require_positive('freq_end', end)
    return np.logspace(np.log10(start), np.log10(end), num_points)


def frequency_response(
    transfer_function: TransferFunction,
    frequencies: np.ndarray,
) -> Dict:
    """
    Evaluate H(j·2πf) over a set of frequencies.

    Args:
        transfer_function: Result of compute_transfer_function
        frequencies: Array of frequencies in Hz

    Returns:
        Dict with frequencies, magnitude_db, phase_deg lists.
    """
    frequencies = np.asarray(frequencies, dtype=float)
    omega = 2 * np.pi * frequencies
    H = transfer_function.evaluate(1j * omega)

    magnitude_db = 20 * np.log10(np.maximum(np.abs(H), 1e-10))
    # Unwrapped so the 2nd-order roll-off reads 0° → -180° without a jump
    phase_deg = np.degrees(np.unwrap(np.angle(H)))

    return {
        'frequencies': frequencies.tolist(),
        'magnitude_db': magnitude_db.tolist(),
        'phase_deg': phase_deg.tolist(),
        'num_points': len(frequencies),
    }
