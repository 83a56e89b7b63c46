"""
Provenance written into every subject report: runtime versions and the
digests of the reference tables the scores were computed against.
"""

import hashlib
import sys
from importlib.metadata import version, PackageNotFoundError
from importlib.resources import files

from ..data.loader import MORPHOMETRY_TABLE, CURVATURE_TABLE

TRACKED_DEPENDENCIES = ("numpy", "matplotlib", "jinja2")


def get_dependency_versions() -> dict:
    """Installed versions of the runtime dependencies ("not installed" when missing)."""
    versions = {}
    for name in TRACKED_DEPENDENCIES:
        try:
            versions[name] = version(name)
        except PackageNotFoundError:
            versions[name] = "not installed"
    return versions


def get_reference_digests() -> dict:
    """SHA-256 of each bundled reference table, keyed by file name."""
    reference_dir = files("brainstats.data") / "reference"
    return {
        name: hashlib.sha256((reference_dir / name).read_bytes()).hexdigest()
        for name in (MORPHOMETRY_TABLE, CURVATURE_TABLE)
    }


def get_provenance_dict() -> dict:
    return {
        "python_version": sys.version.split()[0],
        "dependencies": get_dependency_versions(),
        "reference_tables": get_reference_digests(),
    }
