"""
Second-order characteristics of a series RLC circuit.

    α  = R / 2L          damping coefficient (1/s)
    ω₀ = 1 / √(LC)       natural frequency (rad/s)
    ζ  = α / ω₀          damping ratio

The characteristic equation s² + 2αs + ω₀² = 0 has roots

    s1,2 = -α ± √(α² - ω₀²)

which are real and distinct (overdamped), repeated at -α (critically
damped) or a complex-conjugate pair -α ± jωd (underdamped).

Both the time-domain response and the transfer-function poles are derived
from second_order_characteristics(), so the two can never disagree about
the damping regime for the same R, L, C.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from rlc_engine.parameters import DampingType, require_positive

logger = logging.getLogger(__name__)

# Half-width of the band around ζ = 1 treated as critically damped.
# Keeps the overdamped/underdamped closed forms away from the
# near-zero divisors √(α² - ω₀²) and ωd.
CRITICAL_DAMPING_TOLERANCE = 0.01


@dataclass(frozen=True)
class SecondOrderCharacteristics:
    """Damping regime of an RLC circuit together with its regime-specific data.

    roots holds the two natural-response roots for every regime (equal to
    -α twice when critically damped). omega_d is only set when underdamped.
    """
    alpha: float
    omega0: float
    omega0_squared: float
    zeta: float
    damping_type: DampingType
    roots: Tuple[complex, complex]
    omega_d: Optional[float] = None

    @property
    def envelope_time_constant(self) -> float:
        """Decay time constant of the exponential envelope, 1/α."""
        return 1.0 / self.alpha


def classify_damping(zeta: float, tolerance: float = CRITICAL_DAMPING_TOLERANCE) -> DampingType:
    if zeta > 1 + tolerance:
        return DampingType.OVERDAMPED
    if zeta < 1 - tolerance:
        return DampingType.UNDERDAMPED
    return DampingType.CRITICALLY_DAMPED


def second_order_characteristics(R: float, L: float, C: float) -> SecondOrderCharacteristics:
    """
    Derive α, ω₀, ζ and the damping regime for a series RLC circuit.

    Args:
        R: Resistance (Ohms), > 0
        L: Inductance (H), > 0
        C: Capacitance (F), > 0

    Returns:
        SecondOrderCharacteristics for the circuit.

    Raises:
        InvalidParameterError: if any element is missing or not positive.
    """
    R = require_positive('R', R)
    L = require_positive('L', L)
    C = require_positive('C', C)

    alpha = R / (2 * L)
    omega0_squared = 1.0 / (L * C)
    omega0 = math.sqrt(omega0_squared)
    zeta = alpha / omega0

    damping_type = classify_damping(zeta)
    omega_d = None

    if damping_type is DampingType.OVERDAMPED:
        root_term = math.sqrt(alpha * alpha - omega0_squared)
        roots = (complex(-alpha + root_term, 0.0), complex(-alpha - root_term, 0.0))
    elif damping_type is DampingType.UNDERDAMPED:
        omega_d = omega0 * math.sqrt(1 - zeta * zeta)
        roots = (complex(-alpha, omega_d), complex(-alpha, -omega_d))
    else:
        roots = (complex(-alpha, 0.0), complex(-alpha, 0.0))

    logger.debug(
        "RLC R=%g L=%g C=%g: alpha=%g omega0=%g zeta=%g -> %s",
        R, L, C, alpha, omega0, zeta, damping_type.value,
    )

    return SecondOrderCharacteristics(
        alpha=alpha,
        omega0=omega0,
        omega0_squared=omega0_squared,
        zeta=zeta,
        damping_type=damping_type,
        roots=roots,
        omega_d=omega_d,
    )

