"""
Index computation modules.

This package contains the components of brain index analysis:
- cognitive_indices: Symmetric composite indices
- lateralization_indices: Left/right difference indices
- interpretations: Text attached after scoring
- summary: Run all indices, overall score and tags
- visualizations: Generate all plots and figures
- reports: JSON / CSV / HTML output
"""

from .types import IndexResult, RegionDetail
from .summary import run_analysis, AnalysisResult, summarize
from .interpretations import attach_interpretations, english_interpreter
from .visualizations import plot_index_percentiles, plot_lateralization

__all__ = [
    # Records
    'IndexResult',
    'RegionDetail',

    # Composition
    'run_analysis',
    'AnalysisResult',
    'summarize',

    # Interpretation
    'attach_interpretations',
    'english_interpreter',

    # Visualizations
    'plot_index_percentiles',
    'plot_lateralization',
]
