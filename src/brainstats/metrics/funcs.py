"""
funcs.py

Scoring primitives shared by all index calculators:
- z-scores against reference norms
- weighted thickness / surface area / volume composites
- z-score to percentile conversion (normal CDF approximation)
- piecewise-linear percentile bands for lateralization ratios
- half-up rounding for reported values
"""

import math
from typing import NamedTuple, Sequence

# Abramowitz & Stegun 7.1.26 coefficients
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def z_score(value, mean, std):
    """
    Standard score of a value against a population mean and std.

    Raises ValueError for a non-positive std; valid reference tables never
    contain one (they are checked at load time).
    """
    if std <= 0:
        raise ValueError(f"std must be positive, got {std}")
    return (value - mean) / std


def composite_z_score(measurement, reference, weights):
    """
    Weighted thickness / surface area / volume z-score of one region.

    Parameters
    ----------
    measurement : RegionMeasurement
        Measured values for one region in one hemisphere.
    reference : Mapping
        Metric name -> ReferenceEntry for that region.
    weights : tuple of 3 numbers
        Percent weights (thickness, surface area, volume). Must sum to 100.

    Returns
    -------
    z : float
        sum(weight_i / 100 * z_i). NaN if any input value is NaN.
    """
    z_thick = z_score(measurement.thickness, reference["thickness"].mean, reference["thickness"].std)
    z_area = z_score(measurement.surf_area, reference["surf_area"].mean, reference["surf_area"].std)
    z_vol = z_score(measurement.volume, reference["volume"].mean, reference["volume"].std)

    w_thick, w_area, w_vol = (w / 100 for w in weights)
    return z_thick * w_thick + z_area * w_area + z_vol * w_vol


def round_half_up(value, ndigits=0):
    """
    Round with ties going towards +infinity.

    Reported values are compared against literal cutoffs downstream, so the
    rounding rule is fixed rather than Python's round-half-even.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def z_to_percentile(z):
    """
    Convert a z-score to an integer percentile in [0, 100].

    Uses the Abramowitz-Stegun rational approximation of erf:
        t = 1 / (1 + p|z|)
        y = 1 - (((((a5 t + a4) t + a3) t + a2) t + a1) t) exp(-z^2 / 2)
        CDF = 0.5 (1 + sign(z) y)
    and rounds 100 * CDF half-up.
    """
    sign = -1 if z < 0 else 1
    abs_z = abs(z)
    t = 1.0 / (1.0 + _P * abs_z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-abs_z * abs_z / 2)
    return int(math.floor((0.5 * (1.0 + sign * y)) * 100 + 0.5))


class PercentileBand(NamedTuple):
    """
    One linear segment of a piecewise percentile mapping.

    Applies to values >= lower: percentile = base + (value - anchor) * slope.
    """
    lower: float
    base: float
    anchor: float
    slope: float


def banded_percentile(value, bands: Sequence[PercentileBand], floor=1, ceiling=99):
    """
    Map a value to a percentile through ordered bands.

    Bands are evaluated top-down; the first with ``value >= lower`` applies.
    The result is clamped to [floor, ceiling] and rounded half-up.
    """
    for band in bands:
        if value >= band.lower:
            raw = band.base + (value - band.anchor) * band.slope
            break
    else:
        raw = float(floor)
    return int(round_half_up(max(floor, min(ceiling, raw))))


def normalized_ratio(left_sum, right_sum, epsilon=0.001):
    """(L - R) / (|L| + |R| + epsilon), bounded to about [-1, 1]."""
    return (left_sum - right_sum) / (abs(left_sum) + abs(right_sum) + epsilon)
