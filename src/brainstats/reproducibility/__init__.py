"""
Reproducibility infrastructure for brainstats.

Records the software environment alongside every report.
"""

from .provenance import get_provenance_dict, get_dependency_versions, get_reference_digests

__all__ = [
    "get_provenance_dict",
    "get_dependency_versions",
    "get_reference_digests",
]
