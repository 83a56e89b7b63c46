"""
Ingest Module

Reading FreeSurfer stats reports into hemisphere datasets.

Structure:
- modules/parse_stats: Region table, header measures, subject name
- modules/discover: File type detection and subject discovery
- modules/dataset: HemisphereDataset assembly
"""

from .modules.parse_stats import (
    RegionMeasurement,
    StatsReport,
    parse_stats,
    parse_measures,
    extract_subject_name,
    load_stats_file,
)

from .modules.discover import (
    StatsNotFoundError,
    detect_file_type,
    find_stats_files,
    discover_subjects,
)

from .modules.dataset import (
    HemisphereDataset,
    BasicInfo,
    build_basic_info,
    load_from_files,
    load_hemisphere_dataset,
)

__all__ = [
    # Parsing
    'RegionMeasurement',
    'StatsReport',
    'parse_stats',
    'parse_measures',
    'extract_subject_name',
    'load_stats_file',

    # Discovery
    'StatsNotFoundError',
    'detect_file_type',
    'find_stats_files',
    'discover_subjects',

    # Dataset
    'HemisphereDataset',
    'BasicInfo',
    'build_basic_info',
    'load_from_files',
    'load_hemisphere_dataset',
]
