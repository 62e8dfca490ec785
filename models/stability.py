"""
Pasquill-Gifford Stability Parameter Table.

Maps a stability class code (A = very unstable ... F = stable) to the
numeric spread parameters used by each dispersion model version.  Less
stability means more turbulent mixing, so both schemes give a wider,
longer footprint for A than for F.

Unknown or missing codes fall back to neutral stability (D).
"""

from dataclasses import dataclass
from typing import Optional

from config import (
    DEFAULT_STABILITY_CLASS,
    GAUSSIAN_STABILITY_PARAMS,
    PLUME_SPREAD_FRACTIONS,
    STABILITY_LABELS,
)


@dataclass(frozen=True)
class GaussianStabilityParams:
    """Scheme A parameters, paired with the gaussian-v1 model.

    Args:
        sigma_y: Lateral spread coefficient.
        sigma_z: Vertical spread coefficient (unused by the 2-D footprint).
        spread_factor: Plume length multiplier.
    """

    sigma_y: float
    sigma_z: float
    spread_factor: float


def resolve_stability_class(code: Optional[str]) -> str:
    """Return ``code`` if it is one of A-F, otherwise the neutral class."""
    if code in GAUSSIAN_STABILITY_PARAMS:
        return code
    return DEFAULT_STABILITY_CLASS


def get_gaussian_parameters(code: Optional[str]) -> GaussianStabilityParams:
    """Scheme A lookup: (sigma_y, sigma_z, spread_factor) for a stability class."""
    params = GAUSSIAN_STABILITY_PARAMS[resolve_stability_class(code)]
    return GaussianStabilityParams(
        sigma_y=params["sigma_y"],
        sigma_z=params["sigma_z"],
        spread_factor=params["spread_factor"],
    )


def get_spread_fraction(code: Optional[str]) -> float:
    """Scheme B lookup: lateral spread as a fraction of plume distance."""
    return PLUME_SPREAD_FRACTIONS[resolve_stability_class(code)]


def stability_label(code: Optional[str]) -> str:
    return STABILITY_LABELS[resolve_stability_class(code)]


def dispersion_outlook(code: Optional[str]) -> str:
    """Short operator-facing hint about how well odour will disperse."""
    sc = resolve_stability_class(code)
    if sc <= "C":
        return "Good dispersion conditions"
    if sc >= "E":
        return "Poor dispersion - odour may linger"
    return "Moderate dispersion conditions"
