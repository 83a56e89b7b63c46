"""
dataset.py

Assemble per-hemisphere measurement mappings into the dataset consumed by the
index calculators.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .discover import find_stats_files, StatsNotFoundError, REQUIRED_FILE_TYPES
from .parse_stats import load_stats_file, RegionMeasurement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HemisphereDataset:
    """
    Standard-region measurements for both hemispheres, plus optional
    BA_exvivo subregion measurements.

    A region present on one side need not be present on the other.
    """
    left: Mapping[str, RegionMeasurement]
    right: Mapping[str, RegionMeasurement]
    left_sub: Optional[Mapping[str, RegionMeasurement]] = None
    right_sub: Optional[Mapping[str, RegionMeasurement]] = None

    @property
    def has_subregions(self) -> bool:
        return self.left_sub is not None and self.right_sub is not None


@dataclass(frozen=True)
class BasicInfo:
    """Whole-brain measures from aseg/aparc headers. Volumes in mm³."""
    etiv: Optional[float] = None
    brain_volume: Optional[float] = None
    cortex_volume: Optional[float] = None
    white_matter_volume: Optional[float] = None
    left_mean_thickness: Optional[float] = None
    right_mean_thickness: Optional[float] = None


def build_basic_info(aseg=None, lh_aparc=None, rh_aparc=None) -> BasicInfo:
    """Collect whole-brain measures from parsed StatsReports (any may be None)."""
    aseg_measures = aseg.measures if aseg is not None else {}
    return BasicInfo(
        etiv=aseg_measures.get("eTIV"),
        brain_volume=aseg_measures.get("BrainSegVol"),
        cortex_volume=aseg_measures.get("CortexVol"),
        white_matter_volume=aseg_measures.get("CerebralWhiteMatterVol"),
        left_mean_thickness=lh_aparc.measures.get("MeanThickness") if lh_aparc else None,
        right_mean_thickness=rh_aparc.measures.get("MeanThickness") if rh_aparc else None,
    )


def load_from_files(files: Mapping[str, Path]) -> tuple:
    """
    Load a dataset from an explicit file-type -> path mapping.

    Returns
    -------
    dataset : HemisphereDataset
    basic_info : BasicInfo
    subject_name : str or None
        From the ``# subjectname`` header of the left DKT file.
    """
    missing = [k for k in REQUIRED_FILE_TYPES if k not in files]
    if missing:
        raise StatsNotFoundError(f"Missing required stats file(s): {', '.join(missing)}")

    reports = {key: load_stats_file(path) for key, path in files.items()}

    left_sub = right_sub = None
    if "lh_ba" in reports and "rh_ba" in reports:
        left_sub = reports["lh_ba"].measurements
        right_sub = reports["rh_ba"].measurements
    elif "lh_ba" in reports or "rh_ba" in reports:
        logger.warning("Only one BA_exvivo hemisphere provided; subregion indices will be neutral")

    dataset = HemisphereDataset(
        left=reports["lh_dkt"].measurements,
        right=reports["rh_dkt"].measurements,
        left_sub=left_sub,
        right_sub=right_sub,
    )
    basic_info = build_basic_info(
        reports.get("aseg"), reports.get("lh_aparc"), reports.get("rh_aparc")
    )
    return dataset, basic_info, reports["lh_dkt"].subject_name


def load_hemisphere_dataset(stats_dir: str | Path) -> tuple:
    """
    Load all recognised stats files from a FreeSurfer ``stats/`` directory.

    See load_from_files() for the returned tuple.
    """
    files = find_stats_files(Path(stats_dir))
    logger.info("Found stats files in %s: %s", stats_dir, ", ".join(sorted(files)))
    return load_from_files(files)
