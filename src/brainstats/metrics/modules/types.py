"""
types.py

Result records produced by the index calculators. Both are frozen; the
interpretation stage creates modified copies with dataclasses.replace().
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class RegionDetail:
    """Contribution of one region to one index."""
    region: str
    region_weight: float
    z_left: float
    z_right: float
    contrib_left: float
    contrib_right: float
    weights_used: str


@dataclass(frozen=True)
class IndexResult:
    """
    Output of one index calculator.

    ``value`` is the reported score. ``z_score`` is set when ``value`` has
    been transformed away from the underlying z-score (e.g. IQ scaling).
    """
    key: str
    name: str
    value: float
    percentile: int
    threshold: str
    formula: str
    references: tuple
    regions: tuple
    weights: str
    details: tuple = ()
    z_score: Optional[float] = None
    interpretation: str = ""

    def to_dict(self) -> dict:
        data = asdict(self)
        data["references"] = list(self.references)
        data["regions"] = list(self.regions)
        data["details"] = [asdict(d) for d in self.details]
        return data


@dataclass(frozen=True)
class IndexInfo:
    """Static descriptive text attached to every result of one index."""
    key: str
    name: str
    threshold: str
    formula: str
    references: tuple
    regions: tuple
    weights: str

    def result(self, value, percentile, details=(), z_score=None) -> IndexResult:
        return IndexResult(
            key=self.key,
            name=self.name,
            value=value,
            percentile=percentile,
            threshold=self.threshold,
            formula=self.formula,
            references=self.references,
            regions=self.regions,
            weights=self.weights,
            details=tuple(details),
            z_score=z_score,
        )

    def neutral(self) -> IndexResult:
        """Well-formed result for missing input: value 0, percentile 50."""
        return self.result(0.0, 50, (), z_score=None)
