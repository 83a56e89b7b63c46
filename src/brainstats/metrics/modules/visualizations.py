"""
visualizations.py

Static figures for brain index reports.

This module provides:
- Percentile bar chart of the cognitive indices
- Lateralization bar chart (signed left/right values per index)
- Per-region left/right z-score chart for one index
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path

from .summary import COGNITIVE_KEYS, LATERALIZATION_KEYS


def plot_index_percentiles(analysis, output_dir, subject_id):
    """
    Plot the percentile of every cognitive index as a horizontal bar chart.

    Parameters
    ----------
    analysis : AnalysisResult
        Output from run_analysis()
    output_dir : str or Path
        Output directory for saving figure
    subject_id : str
        Subject identifier for filename

    Returns
    -------
    fig_path : Path
        Path to saved figure
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = [analysis.get(key) for key in COGNITIVE_KEYS]
    results = [r for r in results if r is not None]

    names = [r.name for r in results]
    percentiles = np.array([r.percentile for r in results], dtype=float)
    # Highlight indices above the +1 SD percentile
    colors = ['#7B1FA2' if p >= 84 else '#2196F3' if p >= 50 else '#FF9800' for p in percentiles]

    fig, ax = plt.subplots(figsize=(10, 0.6 * len(names) + 1.5))
    y_pos = np.arange(len(names))
    bars = ax.barh(y_pos, percentiles, color=colors, alpha=0.8, edgecolor='black')

    for bar, p in zip(bars, percentiles):
        ax.text(bar.get_width() + 1, bar.get_y() + bar.get_height() / 2,
                f'{p:.0f}', va='center', fontsize=10, fontweight='bold')

    ax.axvline(50, color='black', linewidth=1)
    ax.axvline(84, color='gray', linestyle='--', alpha=0.5)
    ax.axvline(16, color='gray', linestyle='--', alpha=0.5)
    ax.set_yticks(y_pos)
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_xlim(0, 105)
    ax.set_xlabel('Percentile', fontsize=12)
    ax.set_title(f'Cognitive Index Percentiles - {subject_id}', fontsize=14, fontweight='bold')
    ax.grid(True, axis='x', alpha=0.3)

    plt.tight_layout()

    fig_path = output_dir / f"{subject_id}_index_percentiles.png"
    plt.savefig(fig_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    print(f"✓ Percentile chart saved: {fig_path}")
    return fig_path


def plot_lateralization(analysis, output_dir, subject_id):
    """
    Plot signed lateralization values.

    Positive bars mean left > right except for the nostril index, whose sign
    convention is reversed (positive = right nostril).

    Parameters
    ----------
    analysis : AnalysisResult
        Output from run_analysis()
    output_dir : str or Path
        Output directory for saving figure
    subject_id : str
        Subject identifier for filename

    Returns
    -------
    fig_path : Path
        Path to saved figure
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = [analysis.get(key) for key in LATERALIZATION_KEYS]
    results = [r for r in results if r is not None]

    names = [r.name.replace(' Index', '') for r in results]
    values = [r.value for r in results]
    colors = ['#2196F3' if v > 0 else '#F44336' for v in values]

    fig, ax = plt.subplots(figsize=(10, 0.6 * len(names) + 1.5))
    ax.barh(names, values, color=colors, alpha=0.7, edgecolor='black')
    ax.axvline(0, color='black', linewidth=1)
    ax.set_xlabel('Lateralization value', fontsize=12)
    ax.set_title(f'Lateralization - {subject_id}', fontsize=14, fontweight='bold')
    ax.invert_yaxis()
    ax.grid(True, axis='x', alpha=0.3)
    ax.text(0.98, 0.02, 'Left > Right', transform=ax.transAxes,
            ha='right', fontsize=9, color='blue')
    ax.text(0.02, 0.02, 'Right > Left', transform=ax.transAxes,
            ha='left', fontsize=9, color='red')

    plt.tight_layout()

    fig_path = output_dir / f"{subject_id}_lateralization.png"
    plt.savefig(fig_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    print(f"✓ Lateralization chart saved: {fig_path}")
    return fig_path


def plot_region_contributions(result, output_dir, subject_id):
    """
    Plot left and right composite z-scores of the regions behind one index.

    Returns None when the index has no region details.
    """
    if not result.details:
        return None

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    regions = [d.region for d in result.details]
    z_left = [d.z_left for d in result.details]
    z_right = [d.z_right for d in result.details]

    x = np.arange(len(regions))
    width = 0.38

    fig, ax = plt.subplots(figsize=(max(6, 1.4 * len(regions)), 5))
    ax.bar(x - width / 2, z_left, width, label='Left', color='#2196F3', alpha=0.7, edgecolor='black')
    ax.bar(x + width / 2, z_right, width, label='Right', color='#F44336', alpha=0.7, edgecolor='black')
    ax.axhline(0, color='black', linewidth=1)
    ax.set_xticks(x)
    ax.set_xticklabels(regions, rotation=30, ha='right')
    ax.set_ylabel('Composite z-score', fontsize=12)
    ax.set_title(f'{result.name} - {subject_id}', fontsize=14, fontweight='bold')
    ax.legend(loc='best', fontsize=10)
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    fig_path = output_dir / f"{subject_id}_{result.key}_regions.png"
    plt.savefig(fig_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return fig_path
