"""
parse_stats.py

Parsing of FreeSurfer morphometry stats reports.

Two table layouts are supported, selected by the ``# ColHeaders`` line:
- 6 columns (aparc / DKT atlas):
  StructName NumVert SurfArea GrayVol ThickAvg ThickStd
- 10 columns (BA_exvivo):
  StructName NumVert SurfArea GrayVol ThickAvg ThickStd
  MeanCurv GausCurv FoldInd CurvInd

Header ``# Measure`` lines and the ``# subjectname`` line are parsed
separately for the surrounding report.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

HEADER_MARKER = "ColHeaders"
CURVATURE_MARKERS = ("MeanCurv", "CurvInd")

MIN_ROW_TOKENS = 5
EXTENDED_ROW_TOKENS = 10

# Column positions within a data row
COL_NAME = 0
COL_SURF_AREA = 2
COL_VOLUME = 3
COL_THICKNESS = 4
COL_MEAN_CURV = 6
COL_GAUS_CURV = 7
COL_FOLD_IND = 8
COL_CURV_IND = 9

_SUBJECT_RE = re.compile(r"^#\s*subjectname\s+(.+)$", re.MULTILINE)


@dataclass(frozen=True)
class RegionMeasurement:
    """
    Morphometry of one region in one hemisphere.

    Curvature fields are None when the report has no curvature columns.
    A None curvature field means "not measured", never zero curvature.
    """
    thickness: float
    surf_area: float
    volume: float
    mean_curvature: Optional[float] = None
    gaussian_curvature: Optional[float] = None
    folding_index: Optional[float] = None
    curvature_index: Optional[float] = None

    @property
    def is_valid(self) -> bool:
        """False if any of thickness, surface area or volume failed to parse."""
        return all(math.isfinite(v) for v in (self.thickness, self.surf_area, self.volume))

    @property
    def has_curvature(self) -> bool:
        return all(
            v is not None
            for v in (self.mean_curvature, self.gaussian_curvature,
                      self.folding_index, self.curvature_index)
        )


@dataclass(frozen=True)
class StatsReport:
    """A parsed stats file: region table plus header measures."""
    measurements: dict
    measures: dict = field(default_factory=dict)
    subject_name: Optional[str] = None
    source: Optional[Path] = None


def _to_float(token: str) -> float:
    """Parse a numeric token, returning NaN for anything unparseable."""
    try:
        return float(token)
    except ValueError:
        return float("nan")


def parse_stats(content: str) -> dict[str, RegionMeasurement]:
    """
    Parse the region table of a stats report.

    Parameters
    ----------
    content : str
        Full text of the report.

    Returns
    -------
    measurements : dict
        Region name -> RegionMeasurement. A repeated region name replaces
        the earlier row. Rows with fewer than 5 tokens are dropped.
    """
    data = {}
    in_table = False
    extended = False
    dropped = 0

    for line in content.splitlines():
        if HEADER_MARKER in line:
            in_table = True
            extended = any(marker in line for marker in CURVATURE_MARKERS)
            continue
        if not in_table or not line.strip() or line.startswith("#"):
            continue

        parts = line.split()
        if len(parts) < MIN_ROW_TOKENS:
            dropped += 1
            continue

        region = parts[COL_NAME]
        values = {
            "surf_area": _to_float(parts[COL_SURF_AREA]),
            "volume": _to_float(parts[COL_VOLUME]),
            "thickness": _to_float(parts[COL_THICKNESS]),
        }
        if extended and len(parts) >= EXTENDED_ROW_TOKENS:
            values.update({
                "mean_curvature": _to_float(parts[COL_MEAN_CURV]),
                "gaussian_curvature": _to_float(parts[COL_GAUS_CURV]),
                "folding_index": _to_float(parts[COL_FOLD_IND]),
                "curvature_index": _to_float(parts[COL_CURV_IND]),
            })

        unparseable = [k for k, v in values.items() if math.isnan(v)]
        if unparseable:
            logger.warning("Region %s: unparseable value(s) in %s", region, ", ".join(unparseable))

        data[region] = RegionMeasurement(**values)

    if dropped:
        logger.debug("Dropped %d malformed row(s)", dropped)

    return data


def parse_measures(content: str) -> dict[str, float]:
    """
    Parse ``# Measure`` header lines.

    Lines look like::

        # Measure BrainSeg, BrainSegVol, Brain Segmentation Volume, 1187463.0, mm^3

    Returns a dict keyed by the second field (e.g. ``BrainSegVol``).
    """
    measures = {}
    for line in content.splitlines():
        if not line.startswith("# Measure"):
            continue
        parts = [p.strip() for p in line.split(",")]
        if len(parts) < 4:
            continue
        value = _to_float(parts[3])
        if math.isfinite(value):
            measures[parts[1]] = value
    return measures


def extract_subject_name(content: str) -> str | None:
    """Return the value of the ``# subjectname`` header line, if any."""
    match = _SUBJECT_RE.search(content)
    return match.group(1).strip() if match else None


def load_stats_file(path: str | Path) -> StatsReport:
    """
    Read and parse a stats file.

    Parameters
    ----------
    path : str or Path
        Path to a FreeSurfer ``*.stats`` file.

    Returns
    -------
    report : StatsReport
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Stats file not found: {path}")

    content = path.read_text(encoding="utf-8", errors="replace")
    report = StatsReport(
        measurements=parse_stats(content),
        measures=parse_measures(content),
        subject_name=extract_subject_name(content),
        source=path,
    )
    logger.debug("Parsed %s: %d regions", path.name, len(report.measurements))
    return report
