"""
scoring.py

Per-region scoring shared by the cognitive and lateralization calculators.

A region contributes only when reference norms exist for it and both
hemispheres have a valid measurement whose composite z-score is finite.
Anything else is treated as "region unavailable" and skipped, never
zero-filled.
"""

import logging
import math
from typing import NamedTuple, Optional

from ...config import check_metric_weights
from ..funcs import composite_z_score, round_half_up
from .types import RegionDetail

logger = logging.getLogger(__name__)

DETAIL_DIGITS = 3


class RegionWeighting(NamedTuple):
    """
    Scoring configuration of one region within one index.

    metric_weights are percent weights (thickness, surface area, volume) or,
    for folding-aware indices, (thickness, surface area, folding index).
    ``source`` names the region whose measurements are used when it differs
    from ``region`` (proxy regions).
    """
    region: str
    weight: float
    metric_weights: tuple
    left_share: float = 0.5
    right_share: float = 0.5
    subregion: bool = False
    label: Optional[str] = None
    source: Optional[str] = None

    @property
    def measured_region(self) -> str:
        return str(self.source or self.region)

    @property
    def display_name(self) -> str:
        return self.label or str(self.region)


def weightings(index_name, *configs):
    """Validate every metric-weight triple of an index definition."""
    for cfg in configs:
        check_metric_weights(f"{index_name}/{cfg.display_name}", cfg.metric_weights)
    return configs


def format_weights(weights) -> str:
    return ":".join(f"{w:g}" for w in weights)


def lookup(mapping, region):
    """Return a usable measurement for region, or None."""
    if mapping is None:
        return None
    measurement = mapping.get(str(region))
    if measurement is None or not measurement.is_valid:
        return None
    return measurement


def region_z_pairs(left, right, configs, reference, z_fn=None):
    """
    Yield (config, z_left, z_right) for every usable region.

    Parameters
    ----------
    left, right : Mapping or None
        Region name -> RegionMeasurement for each hemisphere.
    configs : sequence of RegionWeighting
    reference : Mapping
        Region name -> metric -> ReferenceEntry.
    z_fn : callable, optional
        (measurement, reference_entry, config) -> z. Defaults to the
        thickness / area / volume composite.
    """
    if z_fn is None:
        def z_fn(measurement, ref, cfg):
            return composite_z_score(measurement, ref, cfg.metric_weights)

    for cfg in configs:
        name = cfg.measured_region
        ref = reference.get(name)
        lh = lookup(left, name)
        rh = lookup(right, name)
        if ref is None or lh is None or rh is None:
            continue

        z_left = z_fn(lh, ref, cfg)
        z_right = z_fn(rh, ref, cfg)
        if not (math.isfinite(z_left) and math.isfinite(z_right)):
            logger.debug("Skipping %s: non-finite composite z-score", name)
            continue

        yield cfg, z_left, z_right


def make_detail(cfg, z_left, z_right, contrib_left, contrib_right):
    return RegionDetail(
        region=cfg.display_name,
        region_weight=cfg.weight,
        z_left=round_half_up(z_left, DETAIL_DIGITS),
        z_right=round_half_up(z_right, DETAIL_DIGITS),
        contrib_left=round_half_up(contrib_left, DETAIL_DIGITS),
        contrib_right=round_half_up(contrib_right, DETAIL_DIGITS),
        weights_used=format_weights(cfg.metric_weights),
    )
