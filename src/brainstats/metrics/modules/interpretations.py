"""
interpretations.py

Post-processing stage that attaches human-readable text to IndexResults.

Calculators never produce text. classify() maps a result to a category key
through ordered per-index threshold tables; an interpreter callable turns
(index_key, category, result) into a string. The English interpreter is the
default text provider; callers can supply their own for other languages.
"""

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

UNAVAILABLE = "unavailable"

_INF = float("inf")

Interpreter = Callable[[str, str, object], Optional[str]]


def _ability_table(top, high):
    return (
        (top, "exceptional"),
        (high, "superior"),
        (0.5, "above_average"),
        (-0.5, "average"),
        (-1.0, "below_average"),
        (-_INF, "low"),
    )


# Ordered (lower_bound, category); the first bound <= value applies
CATEGORY_THRESHOLDS = {
    "olfactory": _ability_table(1.5, 1.0),
    "language": _ability_table(2.4, 2.0),
    "reading": _ability_table(2.0, 1.5),
    "empathy": _ability_table(1.6, 1.5),
    "executive": _ability_table(1.9, 1.8),
    "spatial": _ability_table(1.5, 1.2),
    "fluid_intelligence": _ability_table(2.1, 2.0),
    "parietal_iq": (
        (130, "exceptional"),
        (120, "excellent"),
        (110, "above_average"),
        (90, "average"),
        (-_INF, "below_average"),
    ),
    "handedness": (
        (1.28, "extreme_right"),
        (0.84, "strong_right"),
        (0.52, "moderate_right"),
        (-0.52, "ambidextrous"),
        (-0.84, "moderate_left"),
        (-_INF, "strong_left"),
    ),
    "dominant_eye": (
        (1.5, "extreme_right"),
        (0.8, "strong_right"),
        (0.3, "mild_right"),
        (-0.3, "balanced"),
        (-0.8, "mild_left"),
        (-_INF, "strong_left"),
    ),
    "preferred_nostril": (
        (0.7, "strong_right"),
        (0.3, "mild_right"),
        (-0.3, "balanced"),
        (-0.7, "mild_left"),
        (-_INF, "strong_left"),
    ),
    "language_output": (
        (0.25, "strong_left"),
        (0.10, "mild_left"),
        (-0.10, "bilateral"),
        (-0.25, "mild_right"),
        (-_INF, "strong_right"),
    ),
    "language_input": (
        (0.15, "strong_left"),
        (0.05, "mild_left"),
        (-0.05, "bilateral"),
        (-0.15, "mild_right"),
        (-_INF, "strong_right"),
    ),
    "language_lateralization": (
        (0.20, "strong_left"),
        (0.05, "mild_left"),
        (-0.05, "bilateral"),
        (-0.15, "mild_right"),
        (-_INF, "strong_right"),
    ),
}


def classify(result) -> str:
    """
    Map an IndexResult to a category key.

    Results computed from no regions (empty details) are ``unavailable``.
    Unknown index keys raise KeyError.
    """
    table = CATEGORY_THRESHOLDS[result.key]
    if not result.details:
        return UNAVAILABLE
    for lower, category in table:
        if result.value >= lower:
            return category
    return table[-1][1]


_ABILITY_TEXT = {
    "exceptional": "Exceptional structural profile for {name}, well above the reference population.",
    "superior": "Superior structural profile for {name}, in the top range of the reference population.",
    "above_average": "Above-average structural profile for {name}.",
    "average": "Structural profile for {name} within the typical range.",
    "below_average": "Below-average structural profile for {name}.",
    "low": "Structural profile for {name} well below the reference mean.",
}

ENGLISH_TEXT = {
    "parietal_iq": {
        "exceptional": "Predicted IQ {value:g}: exceptional (130+).",
        "excellent": "Predicted IQ {value:g}: excellent (120-129).",
        "above_average": "Predicted IQ {value:g}: above average (110-119).",
        "average": "Predicted IQ {value:g}: average (90-109).",
        "below_average": "Predicted IQ {value:g}: below average (<90).",
    },
    "handedness": {
        "extreme_right": "Extreme right-hand dominance; left motor cortex strongly enlarged.",
        "strong_right": "Strong right-hand dominance.",
        "moderate_right": "Moderate right-hand dominance.",
        "ambidextrous": "No clear hand preference (ambidextrous range).",
        "moderate_left": "Moderate left-hand dominance.",
        "strong_left": "Strong left-hand dominance; right motor cortex enlarged.",
    },
    "dominant_eye": {
        "extreme_right": "Extreme right-eye dominance.",
        "strong_right": "Strong right-eye dominance.",
        "mild_right": "Mild right-eye dominance.",
        "balanced": "Balanced ocular dominance.",
        "mild_left": "Mild left-eye dominance.",
        "strong_left": "Strong left-eye dominance.",
    },
    "preferred_nostril": {
        "strong_right": "Strong right-nostril preference.",
        "mild_right": "Mild right-nostril preference.",
        "balanced": "Balanced nostril use.",
        "mild_left": "Mild left-nostril preference.",
        "strong_left": "Strong left-nostril preference.",
    },
    "language_output": {
        "strong_left": "Strong left lateralization for language output (typical pattern). "
                       "Broca area is well-developed on the left.",
        "mild_left": "Mild left lateralization for language output.",
        "bilateral": "Bilateral language output; both hemispheres contribute to speech production.",
        "mild_right": "Mild right lateralization for language output (atypical pattern).",
        "strong_right": "Strong right lateralization for language output (rare).",
    },
    "language_input": {
        "strong_left": "Strong left lateralization for language comprehension (typical pattern).",
        "mild_left": "Mild left lateralization for language comprehension.",
        "bilateral": "Bilateral language comprehension.",
        "mild_right": "Mild right lateralization for language comprehension (less common).",
        "strong_right": "Strong right lateralization for language comprehension (atypical pattern).",
    },
    "language_lateralization": {
        "strong_left": "Typical left-hemisphere language dominance.",
        "mild_left": "Mild left-hemisphere language dominance.",
        "bilateral": "Bilateral language organisation.",
        "mild_right": "Mild right-hemisphere language dominance (atypical).",
        "strong_right": "Right-hemisphere language dominance (atypical).",
    },
}


def english_interpreter(index_key: str, category: str, result) -> str:
    """Default English text for a classified result."""
    if category == UNAVAILABLE:
        return f"Insufficient data to compute the {result.name}."
    texts = ENGLISH_TEXT.get(index_key, _ABILITY_TEXT)
    template = texts.get(category, "")
    return template.format(name=result.name.lower(), value=result.value)


def attach_interpretations(results: Iterable, interpreter: Optional[Interpreter] = None) -> tuple:
    """
    Return copies of ``results`` with ``interpretation`` filled in.

    Parameters
    ----------
    results : iterable of IndexResult
    interpreter : callable, optional
        (index_key, category, result) -> str. With no interpreter every
        interpretation is the empty string; an interpreter returning None
        also yields an empty string.

    Returns
    -------
    results : tuple of IndexResult
    """
    if interpreter is None:
        return tuple(replace(r, interpretation="") for r in results)

    interpreted = []
    for result in results:
        text = interpreter(result.key, classify(result), result)
        interpreted.append(replace(result, interpretation=text or ""))
    logger.debug("Attached interpretations to %d results", len(interpreted))
    return tuple(interpreted)
