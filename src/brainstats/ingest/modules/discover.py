import re
import logging
from pathlib import Path
from typing import List, Dict, Optional

logger = logging.getLogger(__name__)


class StatsNotFoundError(FileNotFoundError):
    """Raised when a required stats file is missing."""
    pass


# FreeSurfer stats file names, matched against the end of the file name
FILE_TYPES = (
    ("lh_dkt", re.compile(r"lh\.aparc\.DKTatlas\.stats$", re.IGNORECASE)),
    ("rh_dkt", re.compile(r"rh\.aparc\.DKTatlas\.stats$", re.IGNORECASE)),
    ("lh_aparc", re.compile(r"lh\.aparc\.stats$", re.IGNORECASE)),
    ("rh_aparc", re.compile(r"rh\.aparc\.stats$", re.IGNORECASE)),
    ("lh_ba", re.compile(r"lh\.BA_exvivo\.stats$", re.IGNORECASE)),
    ("rh_ba", re.compile(r"rh\.BA_exvivo\.stats$", re.IGNORECASE)),
    ("aseg", re.compile(r"aseg\.stats$", re.IGNORECASE)),
)

REQUIRED_FILE_TYPES = ("lh_dkt", "rh_dkt")


def detect_file_type(file_name: str) -> Optional[str]:
    """Identify a stats file from its name; None if unrecognised."""
    for key, pattern in FILE_TYPES:
        if pattern.search(file_name):
            return key
    return None


def find_stats_files(stats_dir: Path) -> Dict[str, Path]:
    """
    Map recognised stats files in a directory to their file type key.

    If several files match the same type, the first in sorted order wins.
    """
    stats_dir = Path(stats_dir)
    if not stats_dir.is_dir():
        raise StatsNotFoundError(f"Stats directory not found: {stats_dir}")

    found = {}
    for path in sorted(stats_dir.iterdir()):
        if not path.is_file():
            continue
        key = detect_file_type(path.name)
        if key and key not in found:
            found[key] = path
    return found


def discover_subjects(
    subjects_dir: Path,
    include_subjects: Optional[List[str]] = None,
    exclude_subjects: Optional[List[str]] = None
) -> List[Dict]:
    """
    Auto-discover FreeSurfer subjects with usable stats.

    A subject is a directory holding a ``stats/`` folder with both DKT
    atlas files.

    Returns:
        List of dicts with 'id' and 'stats_dir'
    """
    subjects = []
    root = Path(subjects_dir)

    if not root.is_dir():
        raise ValueError(f"Subjects directory not found: {subjects_dir}")

    for sub_dir in sorted(root.iterdir()):
        if not sub_dir.is_dir():
            continue

        sub_id = sub_dir.name

        if include_subjects:
            if not any(re.match(p, sub_id) for p in include_subjects):
                continue
        if exclude_subjects:
            if any(re.match(p, sub_id) for p in exclude_subjects):
                continue

        stats_dir = sub_dir / "stats"
        if not stats_dir.is_dir():
            logger.debug("Skipping %s: no stats directory", sub_id)
            continue

        found = find_stats_files(stats_dir)
        missing = [k for k in REQUIRED_FILE_TYPES if k not in found]
        if missing:
            logger.warning("Skipping %s: missing %s", sub_id, ", ".join(missing))
            continue

        subjects.append({"id": sub_id, "stats_dir": stats_dir})

    return subjects
