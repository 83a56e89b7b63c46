"""
cognitive_indices.py

Symmetric composite indices: each region's left and right composite
z-scores are blended with an index-specific hemisphere rule and summed with
the region's weight.

Indices:
- Olfactory Function Index
- Language Composite Index (DKT + BA_exvivo Broca regions)
- Reading Fluency Index
- Empathy Index
- Executive Function Index
- Spatial Processing Index
- Fluid Intelligence Index (Structural)
- Parietal IQ Prediction Index
"""

from ...data.loader import get_morphometry_reference
from ...data.regions import Region
from ...config import DEFAULT_CONFIG
from ..funcs import z_to_percentile, round_half_up
from .scoring import RegionWeighting as W, weightings, region_z_pairs, make_detail
from .types import IndexInfo

VALUE_DIGITS = 2


# ---------------------------------------------------------------------------
# Index definitions
# ---------------------------------------------------------------------------

OLFACTORY_REGIONS = weightings(
    "olfactory",
    W(Region.ENTORHINAL, 0.60, (80, 10, 10)),
    W(Region.PARAHIPPOCAMPAL, 0.20, (80, 10, 10)),
    W(Region.MEDIAL_ORBITOFRONTAL, 0.20, (80, 10, 10)),
)

LANGUAGE_DKT_REGIONS = weightings(
    "language",
    W(Region.SUPERIOR_TEMPORAL, 0.25, (45, 30, 25), 0.7, 0.3),
    W(Region.PARS_OPERCULARIS, 0.15, (45, 30, 25), 0.7, 0.3),
    W(Region.PARS_TRIANGULARIS, 0.10, (45, 30, 25), 0.7, 0.3),
    W(Region.MIDDLE_TEMPORAL, 0.10, (45, 30, 25), 0.7, 0.3),
    W(Region.FUSIFORM, 0.10, (45, 30, 25), 0.7, 0.3),
)

LANGUAGE_BA_REGIONS = weightings(
    "language",
    W(Region.BA44, 0.15, (45, 30, 25), 0.8, 0.2, True, "BA44_exvivo (Broca)"),
    W(Region.BA45, 0.15, (45, 30, 25), 0.8, 0.2, True, "BA45_exvivo (Broca)"),
)

READING_REGIONS = weightings(
    "reading",
    W(Region.SUPERIOR_TEMPORAL, 0.40, (50, 30, 20), 0.75, 0.25),
    W(Region.SUPRAMARGINAL, 0.25, (50, 30, 20), 0.75, 0.25),
    W(Region.INFERIOR_PARIETAL, 0.20, (50, 30, 20), 0.75, 0.25),
    W(Region.FUSIFORM, 0.15, (50, 30, 20), 0.75, 0.25),
)

EMPATHY_REGIONS = weightings(
    "empathy",
    W(Region.ROSTRAL_ANTERIOR_CINGULATE, 0.45, (80, 10, 10)),
    W(Region.MEDIAL_ORBITOFRONTAL, 0.25, (80, 10, 10)),
    W(Region.INSULA, 0.20, (80, 10, 10)),
    W(Region.POSTERIOR_CINGULATE, 0.10, (80, 10, 10)),
)

EXECUTIVE_REGIONS = weightings(
    "executive",
    W(Region.SUPERIOR_FRONTAL, 0.40, (35, 25, 40)),
    W(Region.ROSTRAL_MIDDLE_FRONTAL, 0.30, (35, 25, 40)),
    W(Region.CAUDAL_MIDDLE_FRONTAL, 0.20, (35, 25, 40)),
    W(Region.PARS_OPERCULARIS, 0.10, (35, 25, 40)),
)

SPATIAL_REGIONS = weightings(
    "spatial",
    W(Region.INFERIOR_PARIETAL, 0.50, (20, 50, 30), 0.4, 0.6),
    W(Region.SUPERIOR_PARIETAL, 0.35, (20, 50, 30), 0.4, 0.6),
    W(Region.PRECUNEUS, 0.15, (20, 50, 30), 0.4, 0.6),
)

FLUID_INTELLIGENCE_REGIONS = weightings(
    "fluid_intelligence",
    W(Region.SUPERIOR_FRONTAL, 0.25, (30, 30, 40)),
    W(Region.INFERIOR_PARIETAL, 0.20, (30, 30, 40)),
    W(Region.SUPERIOR_TEMPORAL, 0.20, (30, 30, 40)),
    W(Region.ROSTRAL_MIDDLE_FRONTAL, 0.20, (30, 30, 40)),
    W(Region.INSULA, 0.15, (30, 30, 40)),
)

# Thickness carries most weight; per-region triples follow reported effect sizes
PARIETAL_IQ_REGIONS = weightings(
    "parietal_iq",
    W(Region.SUPRAMARGINAL, 0.25, (55, 25, 20)),
    W(Region.INFERIOR_PARIETAL, 0.25, (50, 28, 22)),
    W(Region.SUPERIOR_PARIETAL, 0.22, (52, 28, 20)),
    W(Region.PRECUNEUS, 0.18, (48, 30, 22)),
    W(Region.POSTERIOR_CINGULATE, 0.10, (45, 30, 25)),
)

# Reported thickness/IQ correlation per parietal region (labels only)
PARIETAL_IQ_R_VALUES = {
    Region.SUPRAMARGINAL: 0.43,
    Region.INFERIOR_PARIETAL: 0.40,
    Region.SUPERIOR_PARIETAL: 0.36,
    Region.PRECUNEUS: 0.35,
    Region.POSTERIOR_CINGULATE: 0.28,
}

IQ_MEAN = 100
IQ_SD = 15


def _region_labels(*groups):
    return tuple(
        f"{cfg.measured_region} ({cfg.weight:.2f})" for group in groups for cfg in group
    )


OLFACTORY_INFO = IndexInfo(
    key="olfactory",
    name="Olfactory Function Index",
    threshold="> +1.0 top 16%; > +1.5 top 7%",
    formula="Olfaction_z = Σ[weight × ((z_L + z_R)/2)]",
    references=("Saygin 2022 Neuroimage", "ENIGMA-Olfaction 2024"),
    regions=_region_labels(OLFACTORY_REGIONS),
    weights="Thickness 80 : Surface Area 10 : Volume 10",
)

LANGUAGE_INFO = IndexInfo(
    key="language",
    name="Language Composite Index",
    threshold="> +2.0 top 2.5%; > +2.4 top 0.7%",
    formula="Language_z = Σ[weight × (0.7~0.8×z_L + 0.2~0.3×z_R)] / Σweight",
    references=("Friederici 2022 Brain", "ENIGMA-Language 2024", "Amunts 1999 Brain"),
    regions=_region_labels(LANGUAGE_DKT_REGIONS, LANGUAGE_BA_REGIONS),
    weights="Thickness 45 : Surface Area 30 : Volume 25",
)

READING_INFO = IndexInfo(
    key="reading",
    name="Reading Fluency Index",
    threshold="> +2.0 top 2.5%",
    formula="Reading_z = Σ[weight × (0.75×z_L + 0.25×z_R)]",
    references=("Black 2022 Brain", "ABCD/ENIGMA-Reading 2024"),
    regions=_region_labels(READING_REGIONS),
    weights="Thickness 50 : Surface Area 30 : Volume 20",
)

EMPATHY_INFO = IndexInfo(
    key="empathy",
    name="Empathy Index",
    threshold="> +1.5 top 7%; > +1.6 top 5%",
    formula="Empathy_z = Σ[weight × ((z_L + z_R)/2)]",
    references=("Timmers 2018 Neurosci Biobehav Rev", "UKBB-EQ 2024"),
    regions=_region_labels(EMPATHY_REGIONS),
    weights="Thickness 80 : Surface Area 10 : Volume 10",
)

EXECUTIVE_INFO = IndexInfo(
    key="executive",
    name="Executive Function Index",
    threshold="> +1.8 top 4%; > +1.9 top 3%",
    formula="Executive_z = Σ[weight × ((z_L + z_R)/2)]",
    references=("Woolgar 2021 Neuropsychopharm", "ENIGMA-Cognition 2024"),
    regions=_region_labels(EXECUTIVE_REGIONS),
    weights="Thickness 35 : Surface Area 25 : Volume 40",
)

SPATIAL_INFO = IndexInfo(
    key="spatial",
    name="Spatial Processing Index",
    threshold="> +1.2 top 11%; > +1.5 top 7%",
    formula="Spatial_z = Σ[weight × (0.4×z_L + 0.6×z_R)]",
    references=("Ruthsatz 2023 Cortex", "Seghier 2022 Neuroimage"),
    regions=_region_labels(SPATIAL_REGIONS),
    weights="Thickness 20 : Surface Area 50 : Volume 30",
)

FLUID_INTELLIGENCE_INFO = IndexInfo(
    key="fluid_intelligence",
    name="Fluid Intelligence Index (Structural)",
    threshold="> +2.0 top 2.5%; > +2.1 top 1.8% (structural maximum estimate)",
    formula="gF_z = Σ[weight × ((z_L + z_R)/2)]",
    references=("Nave 2023 Sci Adv", "Pietschnig 2020 Cereb Cortex", "UKBB 2024"),
    regions=_region_labels(FLUID_INTELLIGENCE_REGIONS),
    weights="Thickness 30 : Surface Area 30 : Volume 40",
)

PARIETAL_IQ_INFO = IndexInfo(
    key="parietal_iq",
    name="Parietal IQ Prediction Index",
    threshold="IQ 130+ exceptional; 120-129 excellent; 110-119 above average; "
              "90-109 average; <90 below average",
    formula="IQ = 100 + z × 15 × r (r≈0.40, regression dilution corrected)",
    references=(
        "ABCD Study 2024 (n>10,000)",
        "UK Biobank GWAS 2025 (n>500,000)",
        "Pietschnig 2020 Cereb Cortex meta-analysis",
        "Longitudinal IQ-Brain Study 2025 (n=5,000, 11yr)",
        "Jung & Haier 2007 P-FIT theory",
    ),
    regions=tuple(
        f"{cfg.measured_region} ({cfg.weight * 100:.0f}%, r≈{PARIETAL_IQ_R_VALUES[cfg.region]})"
        for cfg in PARIETAL_IQ_REGIONS
    ),
    weights="Thickness ~50% : Surface Area ~28% : Volume ~22% (varies by region)",
)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def _blend_regions(left, right, configs, reference, per_side_details=False):
    """
    Sum weight × (left_share × z_L + right_share × z_R) over usable regions.

    Details report the share-weighted contributions, or weight × z per side
    when ``per_side_details`` is set.

    Returns
    -------
    total : float
    total_weight : float
        Sum of weights of the regions that contributed.
    details : list of RegionDetail
    """
    total = 0.0
    total_weight = 0.0
    details = []

    for cfg, z_left, z_right in region_z_pairs(left, right, configs, reference):
        contrib_left = cfg.weight * cfg.left_share * z_left
        contrib_right = cfg.weight * cfg.right_share * z_right
        total += contrib_left + contrib_right
        total_weight += cfg.weight
        if per_side_details:
            contrib_left, contrib_right = cfg.weight * z_left, cfg.weight * z_right
        details.append(make_detail(cfg, z_left, z_right, contrib_left, contrib_right))

    return total, total_weight, details


def _composite_index(info, data, configs, reference, per_side_details=False):
    if reference is None:
        reference = get_morphometry_reference()

    total, _, details = _blend_regions(
        data.left, data.right, configs, reference, per_side_details
    )
    if not details:
        return info.neutral()

    return info.result(
        value=round_half_up(total, VALUE_DIGITS),
        percentile=z_to_percentile(total),
        details=details,
    )


def calculate_olfactory_index(data, reference=None):
    """
    Olfactory Function Index: bilateral mean over medial temporal regions.

    Region details report weight × z for each side.
    """
    return _composite_index(
        OLFACTORY_INFO, data, OLFACTORY_REGIONS, reference, per_side_details=True
    )


def calculate_language_index(data, reference=None):
    """
    Language Composite Index.

    Combines left-weighted DKT language regions with the BA44/BA45 Broca
    subregions when subregion data is available. If the contributing weight
    falls below 1, the sum is renormalised by that weight.
    """
    if reference is None:
        reference = get_morphometry_reference()

    total, total_weight, details = _blend_regions(
        data.left, data.right, LANGUAGE_DKT_REGIONS, reference
    )

    if data.has_subregions:
        ba_total, ba_weight, ba_details = _blend_regions(
            data.left_sub, data.right_sub, LANGUAGE_BA_REGIONS, reference
        )
        total += ba_total
        total_weight += ba_weight
        details.extend(ba_details)

    if not details:
        return LANGUAGE_INFO.neutral()

    if 0 < total_weight < 1:
        total = total / total_weight

    return LANGUAGE_INFO.result(
        value=round_half_up(total, VALUE_DIGITS),
        percentile=z_to_percentile(total),
        details=details,
    )


def calculate_reading_index(data, reference=None):
    """Reading Fluency Index: left-weighted (0.75 / 0.25) temporo-parietal blend."""
    return _composite_index(READING_INFO, data, READING_REGIONS, reference)


def calculate_empathy_index(data, reference=None):
    """Empathy Index: bilateral mean over cingulate, orbitofrontal and insula."""
    return _composite_index(EMPATHY_INFO, data, EMPATHY_REGIONS, reference)


def calculate_executive_index(data, reference=None):
    """Executive Function Index: bilateral mean over prefrontal regions."""
    return _composite_index(EXECUTIVE_INFO, data, EXECUTIVE_REGIONS, reference)


def calculate_spatial_index(data, reference=None):
    """Spatial Processing Index: right-weighted (0.4 / 0.6) parietal blend."""
    return _composite_index(SPATIAL_INFO, data, SPATIAL_REGIONS, reference)


def calculate_fluid_intelligence_index(data, reference=None):
    """Fluid Intelligence Index (Structural): bilateral fronto-parietal mean."""
    return _composite_index(FLUID_INTELLIGENCE_INFO, data, FLUID_INTELLIGENCE_REGIONS, reference)


def calculate_parietal_iq_index(
    data,
    reference=None,
    correlation=DEFAULT_CONFIG["iq_correlation"],
    iq_min=DEFAULT_CONFIG["iq_min"],
    iq_max=DEFAULT_CONFIG["iq_max"],
):
    """
    Parietal IQ Prediction Index.

    The weighted bilateral parietal z-score is normalised by the contributing
    weight and mapped onto the IQ scale with a regression-dilution
    correction:

        IQ = 100 + z × 15 × r

    then clamped to [iq_min, iq_max]. ``value`` holds the IQ estimate and
    ``z_score`` the normalised z-score; the percentile is taken from z.

    Parameters
    ----------
    data : HemisphereDataset
    reference : Mapping, optional
        Defaults to the bundled morphometry norms.
    correlation : float
        Structure/IQ correlation used for the correction (default 0.40).
    iq_min, iq_max : float
        Clamp bounds for the reported IQ.

    Returns
    -------
    result : IndexResult
    """
    if reference is None:
        reference = get_morphometry_reference()

    total, total_weight, details = _blend_regions(
        data.left, data.right, PARIETAL_IQ_REGIONS, reference
    )
    if not details or total_weight <= 0:
        # Neutral z of 0 maps to the population mean IQ
        return PARIETAL_IQ_INFO.result(value=IQ_MEAN, percentile=50, details=(), z_score=0.0)

    z = total / total_weight
    predicted_iq = round_half_up(IQ_MEAN + z * IQ_SD * correlation)
    clamped_iq = max(iq_min, min(iq_max, predicted_iq))

    return PARIETAL_IQ_INFO.result(
        value=clamped_iq,
        percentile=z_to_percentile(z),
        details=details,
        z_score=round_half_up(z, VALUE_DIGITS),
    )
