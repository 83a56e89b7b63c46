"""
Brain Index Metrics Module

Population-referenced cognitive and lateralization indices computed from
FreeSurfer morphometry.

Structure:
- funcs: z-scores, composite scores, percentile conversion
- modules/cognitive_indices: Symmetric composite indices
- modules/lateralization_indices: Left/right difference indices
- modules/summary: Run all indices, overall score and tags
- modules/visualizations: Generate all plots
- modules/reports: JSON / CSV / HTML reports
"""

from ..data.loader import get_morphometry_reference, get_curvature_reference

from .funcs import (
    z_score,
    composite_z_score,
    z_to_percentile,
    banded_percentile,
    normalized_ratio,
    round_half_up,
)

from .modules.types import IndexResult, RegionDetail

from .modules.cognitive_indices import (
    calculate_olfactory_index,
    calculate_language_index,
    calculate_reading_index,
    calculate_empathy_index,
    calculate_executive_index,
    calculate_spatial_index,
    calculate_fluid_intelligence_index,
    calculate_parietal_iq_index,
)

from .modules.lateralization_indices import (
    calculate_handedness_index,
    calculate_dominant_eye_index,
    calculate_preferred_nostril_index,
    calculate_language_output_lateralization,
    calculate_language_input_lateralization,
    calculate_language_lateralization_index,
)

from .modules.interpretations import (
    classify,
    english_interpreter,
    attach_interpretations,
)

from .modules.summary import (
    run_analysis,
    AnalysisResult,
    compute_overall_score,
    laterality_tag,
    ability_tag,
    brain_volume_tag,
    summarize,
)

from .modules.visualizations import (
    plot_index_percentiles,
    plot_lateralization,
    plot_region_contributions,
)

from .modules.reports import (
    save_json_report,
    save_csv_summary,
    save_html_report,
    generate_complete_report,
)

# Invalid bundled norms are fatal at import, never at scoring time
get_morphometry_reference()
get_curvature_reference()

__all__ = [
    # Primitives
    'z_score',
    'composite_z_score',
    'z_to_percentile',
    'banded_percentile',
    'normalized_ratio',
    'round_half_up',

    # Records
    'IndexResult',
    'RegionDetail',

    # Cognitive indices
    'calculate_olfactory_index',
    'calculate_language_index',
    'calculate_reading_index',
    'calculate_empathy_index',
    'calculate_executive_index',
    'calculate_spatial_index',
    'calculate_fluid_intelligence_index',
    'calculate_parietal_iq_index',

    # Lateralization indices
    'calculate_handedness_index',
    'calculate_dominant_eye_index',
    'calculate_preferred_nostril_index',
    'calculate_language_output_lateralization',
    'calculate_language_input_lateralization',
    'calculate_language_lateralization_index',

    # Interpretation
    'classify',
    'english_interpreter',
    'attach_interpretations',

    # Composition
    'run_analysis',
    'AnalysisResult',
    'compute_overall_score',
    'laterality_tag',
    'ability_tag',
    'brain_volume_tag',
    'summarize',

    # Visualizations
    'plot_index_percentiles',
    'plot_lateralization',
    'plot_region_contributions',

    # Reports
    'save_json_report',
    'save_csv_summary',
    'save_html_report',
    'generate_complete_report',
]
