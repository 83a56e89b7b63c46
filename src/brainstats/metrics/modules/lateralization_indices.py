"""
lateralization_indices.py

Left/right difference indices. Instead of averaging hemispheres, each region
contributes a signed left-minus-right (right-minus-left for the nostril
index) term.

Indices:
- Handedness Index (BA_exvivo motor/somatosensory, folding-aware)
- Dominant Eye Index
- Preferred Nostril Index
- Language Output Lateralization Index (BA44/BA45, folding-aware)
- Language Input Lateralization Index
- Language Lateralization Index (output/input blend)

Handedness and Dominant Eye report an unnormalised sum and use the normal-CDF
percentile. The language indices report a normalised ratio in about [-1, 1]
and map it to a percentile through piecewise-linear bands.
"""

import logging
import math
from dataclasses import replace

from ...config import DEFAULT_CONFIG
from ...data.loader import get_morphometry_reference, get_curvature_reference
from ...data.regions import Region, PROXY_REGIONS
from ..funcs import (
    z_score,
    z_to_percentile,
    round_half_up,
    PercentileBand as Band,
    banded_percentile,
    normalized_ratio,
)
from .scoring import RegionWeighting as W, weightings, region_z_pairs, make_detail
from .types import IndexInfo

logger = logging.getLogger(__name__)

VALUE_DIGITS = 3

_INF = float("inf")


# ---------------------------------------------------------------------------
# Percentile bands (evaluated top-down, clamped to [1, 99])
# ---------------------------------------------------------------------------

LANGUAGE_OUTPUT_BANDS = (
    Band(0.25, 90, 0.25, 30),
    Band(0.10, 70, 0.10, 133),
    Band(-0.10, 50, 0.0, 100),
    Band(-0.25, 20, -0.10, 200),
    Band(-_INF, 5, -0.25, 60),
)

LANGUAGE_INPUT_BANDS = (
    Band(0.20, 90, 0.20, 40),
    Band(0.05, 70, 0.05, 133),
    Band(-0.05, 50, 0.0, 200),
    Band(-0.15, 20, -0.05, 300),
    Band(-_INF, 5, -0.15, 100),
)

LANGUAGE_LATERALIZATION_BANDS = (
    Band(0.20, 95, 0.20, 20),
    Band(0.05, 80, 0.05, 100),
    Band(-0.05, 50, 0.0, 300),
    Band(-0.15, 20, -0.05, 300),
    Band(-_INF, 5, -0.15, 100),
)

# 50 ± 40 × value
NOSTRIL_BANDS = (
    Band(-_INF, 50, 0.0, 40),
)


# ---------------------------------------------------------------------------
# Index definitions
# ---------------------------------------------------------------------------

# Metric triples for folding-aware indices: thickness, surface area, folding index
HANDEDNESS_REGIONS = weightings(
    "handedness",
    W(Region.BA4A, 0.35, (35, 35, 30), subregion=True),
    W(Region.BA4P, 0.35, (35, 35, 30), subregion=True),
    W(Region.BA3B, 0.30, (40, 30, 30), subregion=True),
)

DOMINANT_EYE_REGIONS = weightings(
    "dominant_eye",
    W(Region.PERICALCARINE, 0.70, (92, 4, 4)),
    W(Region.CUNEUS, 0.15, (92, 4, 4)),
    W(Region.LINGUAL, 0.15, (92, 4, 4)),
)

NOSTRIL_REGIONS = weightings(
    "preferred_nostril",
    W(Region.ENTORHINAL, 0.45, (70, 20, 10)),
    W(Region.PARAHIPPOCAMPAL, 0.20, (70, 20, 10)),
    W(Region.MEDIAL_ORBITOFRONTAL, 0.20, (70, 20, 10)),
    W(Region.INSULA, 0.10, (70, 20, 10)),
    W(Region.PIRIFORM, 0.05, (70, 20, 10), source=PROXY_REGIONS[Region.PIRIFORM]),
)

LANGUAGE_OUTPUT_REGIONS = weightings(
    "language_output",
    W(Region.BA44, 0.60, (40, 35, 25), subregion=True),
    W(Region.BA45, 0.40, (40, 35, 25), subregion=True),
)

LANGUAGE_INPUT_REGIONS = weightings(
    "language_input",
    W(Region.SUPERIOR_TEMPORAL, 0.35, (68, 18, 14)),
    W(Region.INFERIOR_PARIETAL, 0.20, (55, 32, 13)),
    W(Region.MIDDLE_TEMPORAL, 0.20, (60, 20, 20)),
    W(Region.SUPRAMARGINAL, 0.15, (48, 38, 14)),
    W(Region.FUSIFORM, 0.10, (45, 20, 35)),
)


def _percent_labels(configs):
    return tuple(f"{cfg.display_name} ({cfg.weight * 100:.0f}%)" for cfg in configs)


HANDEDNESS_INFO = IndexInfo(
    key="handedness",
    name="Handedness Index",
    threshold="≥+1.28 extreme right (top 10%); ≥+0.84 strong right (top 20%); "
              "≥+0.52 moderate right (top 30%); ±0.52 ambidextrous (60%); "
              "≤-0.84 left-handed (bottom 10%)",
    formula="LI = Σ[wᵢ × ((wT×zT + wA×zA + wF×zFold)_L − (wT×zT + wA×zA + wF×zFold)_R)]",
    references=("Amunts 1996 Brain", "Sha 2024 Nat Commun", "Wiberg 2019 PNAS", "UKBB 2024"),
    regions=_percent_labels(HANDEDNESS_REGIONS),
    weights="Thickness 35% : Surface Area 35% : Folding Index 30%",
)

DOMINANT_EYE_INFO = IndexInfo(
    key="dominant_eye",
    name="Dominant Eye Index",
    threshold="≥+1.5 extreme right eye (4-6%); +0.8~+1.5 strong right eye (18-22%); "
              "+0.3~+0.8 mild right eye (25-30%); ±0.3 balanced (35-40%); "
              "-0.8~-0.3 mild left eye (12-15%); ≤-0.8 strong left eye (5-7%)",
    formula="LI_eye = Σ[weight × (z_L − z_R)]",
    references=("Hayat 2022 Neuroimage", "Jensen 2015", "HCP 2024"),
    regions=tuple(f"{cfg.display_name} ({cfg.weight:.2f})" for cfg in DOMINANT_EYE_REGIONS),
    weights="Thickness 92 : Surface Area 4 : Volume 4",
)

PREFERRED_NOSTRIL_INFO = IndexInfo(
    key="preferred_nostril",
    name="Preferred Nostril Index",
    threshold="> +0.7 strong right nostril | < -0.7 strong left nostril | ±0.3 balanced",
    formula="OLI = Σwᵢ×(zRᵢ − zLᵢ)  positive=right nostril dominance",
    references=(
        "ENIGMA-Olfaction 2024 (n>8,200)",
        "Zatorre et al. 2023 Chem Senses",
        "Frasnelli 2022 Physiol Rev meta",
    ),
    regions=_percent_labels(NOSTRIL_REGIONS),
    weights="Thickness 70% : Surface Area 20% : Volume 10%",
)

LANGUAGE_OUTPUT_INFO = IndexInfo(
    key="language_output",
    name="Language Output Lateralization Index",
    threshold="≥0.25 strong left (typical); ±0.10 bilateral; ≤-0.10 right (atypical)",
    formula="LI_output = (Σw×zL − Σw×zR) / (|ΣwzL| + |ΣwzR|)",
    references=("Amunts 1999 Brain", "Keller 2009 Cereb Cortex", "Knecht 2000 Brain", "Foundas 1998 Brain"),
    regions=_percent_labels(LANGUAGE_OUTPUT_REGIONS),
    weights="Thickness 40% : Surface Area 35% : Folding Index 25%",
)

LANGUAGE_INPUT_INFO = IndexInfo(
    key="language_input",
    name="Language Input Lateralization Index",
    threshold="≥0.15 typical left; ±0.05 bilateral; ≤-0.10 right (atypical)",
    formula="LI_input = (Σw×zL − Σw×zR) / (|ΣwzL| + |ΣwzR|)",
    references=(
        "ENIGMA-Laterality 2024",
        "Labache 2023 Cereb Cortex",
        "Hickok & Poeppel 2007 Nat Rev Neurosci",
        "Price 2012 Brain",
    ),
    regions=_percent_labels(LANGUAGE_INPUT_REGIONS),
    weights="Independent weights per region (see details)",
)

LANGUAGE_LATERALIZATION_INFO = IndexInfo(
    key="language_lateralization",
    name="Language Lateralization Index",
    threshold="≥0.20 typical left | ±0.05 bilateral | ≤-0.10 right",
    formula="LI = 0.6×LI_output + 0.4×LI_input",
    references=(
        "ENIGMA-Laterality 2024",
        "Labache 2023 Cereb Cortex",
        "Knecht 2000 Brain",
        "Amunts 1999 Brain (BA44/45)",
    ),
    regions=("Output: BA44 (60%), BA45 (40%)", "Input: STG, IPL, MTG, SMG, FG"),
    weights="Output 60% : Input 40%",
)


# ---------------------------------------------------------------------------
# Scoring helpers
# ---------------------------------------------------------------------------

def _thickness_area_z(measurement, ref, cfg):
    w_thick, w_area, _ = (w / 100 for w in cfg.metric_weights)
    z_thick = z_score(measurement.thickness, ref["thickness"].mean, ref["thickness"].std)
    z_area = z_score(measurement.surf_area, ref["surf_area"].mean, ref["surf_area"].std)
    return w_thick * z_thick + w_area * z_area


def _folding_z_pair(name, lh, rh, curvature_ref):
    """Folding-index z-scores of both hemispheres, or None when unavailable."""
    if curvature_ref is None:
        return None
    folds = (lh.folding_index, rh.folding_index)
    if all(f is None for f in folds):
        return None
    if any(f is None or not math.isfinite(f) for f in folds):
        logger.debug("Dropping folding term for %s: non-finite folding index %s", name, folds)
        return None
    entry = curvature_ref["folding_index"]
    return tuple(z_score(f, entry.mean, entry.std) for f in folds)


def folding_z_pairs(left, right, configs, reference, curvature):
    """
    Yield (config, z_left, z_right) using thickness, area and folding index.

    The folding term contributes zero when either hemisphere lacks curvature
    columns or the region has no curvature norms.
    """
    for cfg, z_left, z_right in region_z_pairs(
        left, right, configs, reference, z_fn=_thickness_area_z
    ):
        name = cfg.measured_region
        fold = _folding_z_pair(name, left[name], right[name], curvature.get(name))
        if fold is not None:
            w_fold = cfg.metric_weights[2] / 100
            z_left += w_fold * fold[0]
            z_right += w_fold * fold[1]
        yield cfg, z_left, z_right


def _difference_sum(pairs):
    """Sum weight × (z_L − z_R); details report weight × z per side."""
    total = 0.0
    details = []
    for cfg, z_left, z_right in pairs:
        total += cfg.weight * (z_left - z_right)
        details.append(make_detail(
            cfg, z_left, z_right, cfg.weight * z_left, cfg.weight * z_right
        ))
    return total, details


def _side_sums(pairs):
    """Per-side weighted sums for normalised ratios."""
    sum_left = 0.0
    sum_right = 0.0
    strength = 0.0
    details = []
    for cfg, z_left, z_right in pairs:
        contrib_left = cfg.weight * z_left
        contrib_right = cfg.weight * z_right
        sum_left += contrib_left
        sum_right += contrib_right
        strength += cfg.weight * (z_left + z_right) / 2
        details.append(make_detail(cfg, z_left, z_right, contrib_left, contrib_right))
    return sum_left, sum_right, strength, details


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------

def calculate_handedness_index(data, reference=None, curvature=None):
    """
    Handedness Index from BA4a/BA4p/BA3b_exvivo subregions.

    Positive values mean a larger left motor/somatosensory cortex, i.e.
    right-hand dominance. Without BA_exvivo data the result is neutral.
    """
    if not data.has_subregions:
        return HANDEDNESS_INFO.neutral()

    reference = reference if reference is not None else get_morphometry_reference()
    curvature = curvature if curvature is not None else get_curvature_reference()

    total, details = _difference_sum(folding_z_pairs(
        data.left_sub, data.right_sub, HANDEDNESS_REGIONS, reference, curvature
    ))
    if not details:
        return HANDEDNESS_INFO.neutral()

    return HANDEDNESS_INFO.result(
        value=round_half_up(total, VALUE_DIGITS),
        percentile=z_to_percentile(total),
        details=details,
    )


def calculate_dominant_eye_index(data, reference=None):
    """Dominant Eye Index: Σ weight × (z_L − z_R) over occipital visual regions."""
    if reference is None:
        reference = get_morphometry_reference()

    total, details = _difference_sum(region_z_pairs(
        data.left, data.right, DOMINANT_EYE_REGIONS, reference
    ))
    if not details:
        return DOMINANT_EYE_INFO.neutral()

    return DOMINANT_EYE_INFO.result(
        value=round_half_up(total, VALUE_DIGITS),
        percentile=z_to_percentile(total),
        details=details,
    )


def calculate_preferred_nostril_index(data, reference=None):
    """
    Preferred Nostril Index: Σ weight × (z_R − z_L).

    The sign convention is reversed relative to the other lateralization
    indices (positive = right nostril). Piriform cortex is not part of the
    DKT atlas; its term is computed from entorhinal measurements and reported
    as ``piriform``.
    """
    if reference is None:
        reference = get_morphometry_reference()

    total, details = _difference_sum(region_z_pairs(
        data.left, data.right, NOSTRIL_REGIONS, reference
    ))
    if not details:
        return PREFERRED_NOSTRIL_INFO.neutral()

    # right minus left
    total = -total
    value = round_half_up(total, VALUE_DIGITS)
    return PREFERRED_NOSTRIL_INFO.result(
        value=value,
        percentile=banded_percentile(total, NOSTRIL_BANDS),
        details=details,
        z_score=value,
    )


def calculate_language_output_lateralization(
    data,
    reference=None,
    curvature=None,
    epsilon=DEFAULT_CONFIG["ratio_epsilon"],
):
    """
    Language Output Lateralization Index from the Broca subregions.

    Returns the normalised ratio (ΣwzL − ΣwzR) / (|ΣwzL| + |ΣwzR| + ε)
    with a banded percentile. Neutral without BA_exvivo data.
    """
    if not data.has_subregions:
        return LANGUAGE_OUTPUT_INFO.neutral()

    reference = reference if reference is not None else get_morphometry_reference()
    curvature = curvature if curvature is not None else get_curvature_reference()

    sum_left, sum_right, _, details = _side_sums(folding_z_pairs(
        data.left_sub, data.right_sub, LANGUAGE_OUTPUT_REGIONS, reference, curvature
    ))
    if not details:
        return LANGUAGE_OUTPUT_INFO.neutral()

    ratio = normalized_ratio(sum_left, sum_right, epsilon)
    return LANGUAGE_OUTPUT_INFO.result(
        value=round_half_up(ratio, VALUE_DIGITS),
        percentile=banded_percentile(ratio, LANGUAGE_OUTPUT_BANDS),
        details=details,
    )


def calculate_language_input_lateralization(
    data,
    reference=None,
    epsilon=DEFAULT_CONFIG["ratio_epsilon"],
):
    """
    Language Input Lateralization Index from DKT comprehension regions.

    ``z_score`` carries the bilateral weighted strength Σ w × (z_L + z_R)/2
    alongside the ratio.
    """
    if reference is None:
        reference = get_morphometry_reference()

    sum_left, sum_right, strength, details = _side_sums(region_z_pairs(
        data.left, data.right, LANGUAGE_INPUT_REGIONS, reference
    ))
    if not details:
        return LANGUAGE_INPUT_INFO.neutral()

    ratio = normalized_ratio(sum_left, sum_right, epsilon)
    return LANGUAGE_INPUT_INFO.result(
        value=round_half_up(ratio, VALUE_DIGITS),
        percentile=banded_percentile(ratio, LANGUAGE_INPUT_BANDS),
        details=details,
        z_score=round_half_up(strength, VALUE_DIGITS),
    )


def calculate_language_lateralization_index(
    data,
    reference=None,
    curvature=None,
    epsilon=DEFAULT_CONFIG["ratio_epsilon"],
    output_share=DEFAULT_CONFIG["language_output_share"],
):
    """
    Language Lateralization Index: output_share × output + (1 − output_share) × input.

    Blends the reported (rounded) sub-index values. Details are the
    concatenation of both sub-indices' details, each region tagged with
    ``(Output)`` or ``(Input)``.
    """
    output = calculate_language_output_lateralization(data, reference, curvature, epsilon)
    lang_input = calculate_language_input_lateralization(data, reference, epsilon)

    if not output.details and not lang_input.details:
        return LANGUAGE_LATERALIZATION_INFO.neutral()

    combined = output.value * output_share + lang_input.value * (1 - output_share)
    details = (
        [replace(d, region=f"{d.region} (Output)") for d in output.details]
        + [replace(d, region=f"{d.region} (Input)") for d in lang_input.details]
    )

    return LANGUAGE_LATERALIZATION_INFO.result(
        value=round_half_up(combined, VALUE_DIGITS),
        percentile=banded_percentile(combined, LANGUAGE_LATERALIZATION_BANDS),
        details=details,
    )
