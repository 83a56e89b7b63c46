"""
Reference population tables for brainstats.

Two tables are bundled with the package (via importlib.resources):
- morphometry: thickness / surface area / volume norms for DKT regions and
  BA_exvivo subregions
- curvature: mean curvature / folding index norms for BA_exvivo subregions

Tables are validated when loaded and exposed as read-only mappings. Every
entry must carry a finite mean and a strictly positive, finite std; anything
else is a data-integrity fault and raises ReferenceDataError.
"""

import json
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

MORPHOMETRY_TABLE = "morphometry_male.json"
CURVATURE_TABLE = "curvature_ba.json"

MORPHOMETRY_METRICS = ("thickness", "surf_area", "volume")
CURVATURE_METRICS = ("mean_curvature", "folding_index")


class ReferenceDataError(ValueError):
    """Raised when a reference table is malformed or has invalid norms."""
    pass


@dataclass(frozen=True)
class ReferenceEntry:
    """Population mean and standard deviation of one metric in one region."""
    mean: float
    std: float


ReferenceTable = Mapping[str, Mapping[str, ReferenceEntry]]


def validate_reference_table(raw: dict, required_metrics: tuple, source: str = "") -> ReferenceTable:
    """
    Validate a raw reference table and freeze it.

    Parameters
    ----------
    raw : dict
        Parsed JSON document with a ``regions`` mapping of
        region -> metric -> {"mean", "std"}.
    required_metrics : tuple of str
        Metrics every region must define.
    source : str
        Name used in error messages.

    Returns
    -------
    table : Mapping
        Read-only mapping region -> metric -> ReferenceEntry.
    """
    regions = raw.get("regions")
    if not isinstance(regions, dict) or not regions:
        raise ReferenceDataError(f"{source}: missing or empty 'regions' table")

    frozen = {}
    for region, metrics in regions.items():
        entries = {}
        for metric in required_metrics:
            if metric not in metrics:
                raise ReferenceDataError(f"{source}: {region} has no '{metric}' entry")
            try:
                mean = float(metrics[metric]["mean"])
                std = float(metrics[metric]["std"])
            except (KeyError, TypeError, ValueError) as e:
                raise ReferenceDataError(
                    f"{source}: {region}.{metric} is not a {{mean, std}} pair"
                ) from e
            if not math.isfinite(mean):
                raise ReferenceDataError(f"{source}: {region}.{metric} mean is not finite")
            if not (math.isfinite(std) and std > 0):
                raise ReferenceDataError(
                    f"{source}: {region}.{metric} std must be positive, got {std}"
                )
            entries[metric] = ReferenceEntry(mean=mean, std=std)
        frozen[region] = MappingProxyType(entries)

    return MappingProxyType(frozen)


def read_reference_table(path: str | Path, required_metrics: tuple) -> ReferenceTable:
    """Load and validate a reference table from a JSON file on disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Reference table not found: {path}")
    with open(path, "r") as f:
        raw = json.load(f)
    return validate_reference_table(raw, required_metrics, source=path.name)


def _load_bundled(filename: str, required_metrics: tuple) -> ReferenceTable:
    resource = files("brainstats.data") / "reference" / filename
    raw = json.loads(resource.read_text(encoding="utf-8"))
    table = validate_reference_table(raw, required_metrics, source=filename)
    logger.info("Loaded reference table %s (%d regions)", filename, len(table))
    return table


@lru_cache(maxsize=None)
def get_morphometry_reference() -> ReferenceTable:
    """Thickness / surface area / volume norms, loaded once per process."""
    return _load_bundled(MORPHOMETRY_TABLE, MORPHOMETRY_METRICS)


@lru_cache(maxsize=None)
def get_curvature_reference() -> ReferenceTable:
    """Curvature norms for BA_exvivo subregions, loaded once per process."""
    return _load_bundled(CURVATURE_TABLE, CURVATURE_METRICS)
