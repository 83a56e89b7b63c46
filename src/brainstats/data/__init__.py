"""
Reference data for brainstats.

Bundled reference population tables are loaded through importlib.resources
and validated on first access.
"""

from .loader import (
    ReferenceDataError,
    ReferenceEntry,
    get_morphometry_reference,
    get_curvature_reference,
    read_reference_table,
    validate_reference_table,
)
from .regions import Region, PROXY_REGIONS

__all__ = [
    "ReferenceDataError",
    "ReferenceEntry",
    "get_morphometry_reference",
    "get_curvature_reference",
    "read_reference_table",
    "validate_reference_table",
    "Region",
    "PROXY_REGIONS",
]
