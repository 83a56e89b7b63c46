"""
summary.py

Result composer: runs every index calculator over one dataset and derives
the overall score and descriptive tags shown in reports.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ...config import get_config
from ..funcs import round_half_up
from .cognitive_indices import (
    calculate_olfactory_index,
    calculate_language_index,
    calculate_reading_index,
    calculate_empathy_index,
    calculate_executive_index,
    calculate_spatial_index,
    calculate_fluid_intelligence_index,
    calculate_parietal_iq_index,
)
from .lateralization_indices import (
    calculate_handedness_index,
    calculate_dominant_eye_index,
    calculate_preferred_nostril_index,
    calculate_language_output_lateralization,
    calculate_language_input_lateralization,
    calculate_language_lateralization_index,
)
from .interpretations import attach_interpretations

logger = logging.getLogger(__name__)

COGNITIVE_KEYS = (
    "olfactory",
    "language",
    "reading",
    "empathy",
    "executive",
    "spatial",
    "fluid_intelligence",
    "parietal_iq",
)

LATERALIZATION_KEYS = (
    "handedness",
    "dominant_eye",
    "preferred_nostril",
    "language_output",
    "language_input",
    "language_lateralization",
)

INDEX_KEYS = COGNITIVE_KEYS + LATERALIZATION_KEYS

# Percentile weights of the ability indices in the overall score
OVERALL_SCORE_WEIGHTS = {
    "olfactory": 0.08,
    "language": 0.15,
    "reading": 0.12,
    "empathy": 0.12,
    "executive": 0.18,
    "spatial": 0.15,
    "fluid_intelligence": 0.20,
}

DEFAULT_OVERALL_SCORE = 75


@dataclass(frozen=True)
class AnalysisResult:
    """All index results of one subject, in calculation order."""
    indices: tuple

    def get(self, name):
        """Look up a result by key (``"handedness"``) or display name."""
        for result in self.indices:
            if result.key == name or result.name == name:
                return result
        return None

    def to_dict(self) -> dict:
        return {r.key: r.to_dict() for r in self.indices}


def run_analysis(dataset, config=None, interpreter=None) -> AnalysisResult:
    """
    Compute every index for one subject.

    Parameters
    ----------
    dataset : HemisphereDataset
    config : dict, optional
        Calibrated parameters (see brainstats.config). Defaults apply when None.
    interpreter : callable, optional
        (index_key, category, result) -> str used to fill ``interpretation``.
        Without one, interpretations are empty strings.

    Returns
    -------
    analysis : AnalysisResult
    """
    config = get_config(config)
    epsilon = config["ratio_epsilon"]

    results = (
        calculate_olfactory_index(dataset),
        calculate_language_index(dataset),
        calculate_reading_index(dataset),
        calculate_empathy_index(dataset),
        calculate_executive_index(dataset),
        calculate_spatial_index(dataset),
        calculate_fluid_intelligence_index(dataset),
        calculate_parietal_iq_index(
            dataset,
            correlation=config["iq_correlation"],
            iq_min=config["iq_min"],
            iq_max=config["iq_max"],
        ),
        calculate_handedness_index(dataset),
        calculate_dominant_eye_index(dataset),
        calculate_preferred_nostril_index(dataset),
        calculate_language_output_lateralization(dataset, epsilon=epsilon),
        calculate_language_input_lateralization(dataset, epsilon=epsilon),
        calculate_language_lateralization_index(
            dataset, epsilon=epsilon, output_share=config["language_output_share"]
        ),
    )

    if not dataset.has_subregions:
        logger.info("No BA_exvivo subregion data; subregion indices are neutral")

    return AnalysisResult(indices=attach_interpretations(results, interpreter))


def compute_overall_score(indices) -> int:
    """
    Overall score from the percentile-weighted mean of the ability indices.

    The weighted mean percentile is stretched piecewise so that the population
    median maps to 75 and the +1 SD percentile (84) maps to 90. Returns 75
    when none of the ability indices is present.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for result in indices:
        weight = OVERALL_SCORE_WEIGHTS.get(result.key)
        if weight is not None:
            weighted_sum += result.percentile * weight
            total_weight += weight

    if total_weight == 0:
        return DEFAULT_OVERALL_SCORE

    raw = weighted_sum / total_weight
    if raw >= 84:
        score = 90 + (raw - 84) * (10 / 16)
    elif raw >= 50:
        score = 75 + (raw - 50) * (15 / 34)
    elif raw >= 16:
        score = 60 + (raw - 16) * (15 / 34)
    else:
        score = 40 + raw * (20 / 16)

    return int(round_half_up(min(100, max(0, score))))


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class Tag(NamedTuple):
    key: str
    label: str


def _first_match(value, table):
    for lower, key, label in table:
        if value >= lower:
            return Tag(key, label)
    _, key, label = table[-1]
    return Tag(key, label)


_NEG_INF = float("-inf")

LATERALITY_TAG_THRESHOLDS = {
    "handedness": (
        (0.84, "right_handed", "Right-handed"),
        (0.52, "mild_right_handed", "Mildly right-handed"),
        (-0.52, "ambidextrous", "Ambidextrous"),
        (-0.84, "mild_left_handed", "Mildly left-handed"),
        (_NEG_INF, "left_handed", "Left-handed"),
    ),
    "dominant_eye": (
        (0.8, "right_eye", "Right-eye dominant"),
        (0.3, "mild_right_eye", "Mild right eye"),
        (-0.3, "balanced_eyes", "Balanced eyes"),
        (-0.8, "mild_left_eye", "Mild left eye"),
        (_NEG_INF, "left_eye", "Left-eye dominant"),
    ),
    "preferred_nostril": (
        (0.7, "right_nostril", "Right-nostril preference"),
        (0.3, "mild_right_nostril", "Mild right nostril"),
        (-0.3, "balanced_nostrils", "Balanced nostrils"),
        (-0.7, "mild_left_nostril", "Mild left nostril"),
        (_NEG_INF, "left_nostril", "Left-nostril preference"),
    ),
    "language_lateralization": (
        (0.20, "left_language", "Left-brain language"),
        (0.05, "mild_left_language", "Mildly left-brain language"),
        (-0.05, "bilateral_language", "Bilateral language"),
        (-0.15, "mild_right_language", "Mildly right-brain language"),
        (_NEG_INF, "right_language", "Right-brain language"),
    ),
}

ABILITY_TAG_LEVELS = (
    (84, "outstanding", "Outstanding"),
    (70, "strong", "Strong"),
    (30, "typical", "Typical"),
    (_NEG_INF, "developing", "Developing"),
)

ABILITY_LABELS = {
    "olfactory": "sense of smell",
    "language": "language",
    "reading": "reading",
    "empathy": "empathy",
    "executive": "executive function",
    "spatial": "spatial sense",
    "fluid_intelligence": "reasoning",
}

# Lower bounds in cm³ (volumes) or mm (thickness)
BRAIN_VOLUME_TAG_THRESHOLDS = {
    "brain_volume": (1350, 1200, 1050),
    "cortex_volume": (580, 520, 450),
    "white_matter_volume": (500, 450, 380),
    "left_mean_thickness": (2.7, 2.5, 2.3),
    "right_mean_thickness": (2.7, 2.5, 2.3),
}

_BRAIN_LEVELS = ("large", "above_average", "typical", "compact")


def laterality_tag(result) -> Optional[Tag]:
    """Tag for a lateralization result, or None for indices without tags."""
    table = LATERALITY_TAG_THRESHOLDS.get(result.key)
    if table is None:
        return None
    return _first_match(result.value, table)


def ability_tag(result) -> Optional[Tag]:
    """Tag for an ability index based on its percentile (84 / 70 / 30 cutoffs)."""
    ability = ABILITY_LABELS.get(result.key)
    if ability is None:
        return None
    level = _first_match(result.percentile, ABILITY_TAG_LEVELS)
    return Tag(f"{result.key}_{level.key}", f"{level.label} {ability}")


def brain_volume_tag(kind: str, value: float) -> Tag:
    """
    Tag for a whole-brain measure.

    ``value`` is in cm³ for volumes and mm for mean thickness.
    """
    cutoffs = BRAIN_VOLUME_TAG_THRESHOLDS[kind]
    for cutoff, level in zip(cutoffs, _BRAIN_LEVELS):
        if value >= cutoff:
            break
    else:
        level = _BRAIN_LEVELS[-1]
    return Tag(f"{kind}_{level}", level.replace("_", " ").capitalize())


def summarize(analysis: AnalysisResult, basic_info=None) -> dict:
    """
    Overall score and tag lists for one analysis.

    Volumes in ``basic_info`` are stored in mm³ and converted to cm³ for
    tagging; missing measures produce no tag.
    """
    laterality = []
    abilities = []
    for result in analysis.indices:
        tag = laterality_tag(result)
        if tag is not None:
            laterality.append({"index": result.key, **tag._asdict()})
        tag = ability_tag(result)
        if tag is not None:
            abilities.append({"index": result.key, **tag._asdict()})

    brain = []
    if basic_info is not None:
        for kind in BRAIN_VOLUME_TAG_THRESHOLDS:
            value = getattr(basic_info, kind)
            if value is None:
                continue
            if kind.endswith("_volume"):
                value = value / 1000
            brain.append({"measure": kind, "value": round_half_up(value, 2),
                          **brain_volume_tag(kind, value)._asdict()})

    return {
        "overall_score": compute_overall_score(analysis.indices),
        "laterality_tags": laterality,
        "ability_tags": abilities,
        "brain_tags": brain,
    }
