"""
Batch processing package for brainstats.

Runs the analysis over every FreeSurfer subject found in a subjects
directory and aggregates the results.
"""

from .batch import run_batch, BatchConfig, SubjectSpec, SubjectResult, ErrorCategory
from .modules.report import generate_batch_reports

__all__ = [
    "run_batch",
    "BatchConfig",
    "SubjectSpec",
    "SubjectResult",
    "ErrorCategory",
    "generate_batch_reports",
]
