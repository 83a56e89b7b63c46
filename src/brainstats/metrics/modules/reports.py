"""
reports.py

Report generation functions for brain index analyses.

This module generates:
- JSON reports (complete machine-readable data)
- CSV summaries (one row of index values for group analysis)
- HTML reports (human-readable summary with embedded figures)
"""

import json
import csv
import base64
import logging
from dataclasses import asdict
from pathlib import Path
from datetime import datetime

from jinja2 import Environment, FileSystemLoader

from brainstats import __version__
from ...reproducibility import get_provenance_dict
from .summary import summarize, COGNITIVE_KEYS, LATERALIZATION_KEYS

logger = logging.getLogger(__name__)

# Module-level template environment
_TEMPLATE_DIR = Path(__file__).parent / "templates"
_jinja_env = Environment(loader=FileSystemLoader(_TEMPLATE_DIR), autoescape=True)

# Indices whose value is a normalised ratio rather than a z-score
RATIO_INDEX_KEYS = ("language_output", "language_input", "language_lateralization")


def _embed_image(path):
    """Embed image as base64 data URI.

    Parameters
    ----------
    path : str or Path or None
        Path to image file

    Returns
    -------
    str or None
        Base64 data URI or None if path invalid
    """
    if path is None:
        return None
    path = Path(path)
    if not path.exists():
        return None
    with open(path, 'rb') as f:
        data = base64.b64encode(f.read()).decode('utf-8')
    ext = path.suffix.lower()
    mime = 'image/png' if ext == '.png' else 'image/jpeg'
    return f'data:{mime};base64,{data}'


def index_z(result):
    """z-score behind a result, or None for ratio indices without one."""
    if result.z_score is not None:
        return result.z_score
    if result.key in RATIO_INDEX_KEYS:
        return None
    return result.value


def _basic_info_dict(basic_info):
    return asdict(basic_info) if basic_info is not None else {}


def save_json_report(analysis, output_dir, subject_id, basic_info=None, summary=None):
    """
    Save the complete analysis as JSON.

    Parameters
    ----------
    analysis : AnalysisResult
        Output from run_analysis()
    output_dir : str or Path
        Output directory
    subject_id : str
        Subject identifier
    basic_info : BasicInfo, optional
        Whole-brain measures from aseg/aparc headers
    summary : dict, optional
        Output from summarize(); computed when omitted

    Returns
    -------
    json_path : Path
        Path to saved JSON file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if summary is None:
        summary = summarize(analysis, basic_info)

    report = {
        'subject_id': subject_id,
        'processing_date': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        'brainstats_version': __version__,
        'provenance': get_provenance_dict(),
        'basic_info': _basic_info_dict(basic_info),
        'summary': summary,
        'indices': [r.to_dict() for r in analysis.indices],
    }

    json_path = output_dir / f"{subject_id}_brain_indices.json"
    with open(json_path, 'w') as f:
        json.dump(report, f, indent=2, ensure_ascii=False)

    print(f"✓ JSON report saved: {json_path}")
    return json_path


def summary_row(analysis, subject_id):
    """Flat dict with value / percentile / z columns for every index."""
    data = {
        'subject_id': subject_id,
        'processing_date': datetime.now().strftime("%Y-%m-%d"),
    }
    for result in analysis.indices:
        z = index_z(result)
        data[f'{result.key}_value'] = result.value
        data[f'{result.key}_percentile'] = result.percentile
        data[f'{result.key}_z'] = '' if z is None else z
    return data


def save_csv_summary(analysis, output_dir, subject_id):
    """
    Save index values as a one-row CSV table.

    Parameters
    ----------
    analysis : AnalysisResult
        Output from run_analysis()
    output_dir : str or Path
        Output directory
    subject_id : str
        Subject identifier

    Returns
    -------
    csv_path : Path
        Path to saved CSV file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    data = summary_row(analysis, subject_id)

    csv_path = output_dir / f"{subject_id}_indices_summary.csv"
    with open(csv_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=data.keys())
        writer.writeheader()
        writer.writerow(data)

    print(f"✓ CSV summary saved: {csv_path}")
    return csv_path


def _index_rows(analysis, keys):
    rows = []
    for key in keys:
        result = analysis.get(key)
        if result is None:
            continue
        rows.append({
            'key': result.key,
            'name': result.name,
            'value': result.value,
            'percentile': result.percentile,
            'z': index_z(result),
            'interpretation': result.interpretation,
            'threshold': result.threshold,
            'formula': result.formula,
            'weights': result.weights,
            'references': result.references,
            'details': result.details,
            'available': bool(result.details),
        })
    return rows


def save_html_report(
    analysis,
    visualization_paths,
    output_dir,
    subject_id,
    basic_info=None,
    summary=None,
    version=None,
):
    """
    Generate HTML report using Jinja2 template.

    Parameters
    ----------
    analysis : AnalysisResult
        Output from run_analysis()
    visualization_paths : dict
        Paths to generated figures ('percentiles', 'lateralization', and
        'regions' mapping index keys to region charts)
    output_dir : str or Path
        Output directory
    subject_id : str
        Subject identifier
    basic_info : BasicInfo, optional
        Whole-brain measures
    summary : dict, optional
        Output from summarize(); computed when omitted
    version : str, optional
        brainstats version (defaults to package version)

    Returns
    -------
    html_path : Path
        Path to saved HTML file
    """
    if version is None:
        version = __version__
    if summary is None:
        summary = summarize(analysis, basic_info)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    viz = {
        'percentiles': _embed_image(visualization_paths.get('percentiles')),
        'lateralization': _embed_image(visualization_paths.get('lateralization')),
        'regions': {
            key: _embed_image(path)
            for key, path in visualization_paths.get('regions', {}).items()
        },
    }

    template = _jinja_env.get_template("report.html.j2")
    css = (_TEMPLATE_DIR / "report.css").read_text()

    html_content = template.render(
        subject_id=subject_id,
        date=datetime.now().strftime("%Y-%m-%d"),
        version=version,
        css=css,
        summary=summary,
        cognitive=_index_rows(analysis, COGNITIVE_KEYS),
        lateralization=_index_rows(analysis, LATERALIZATION_KEYS),
        viz=viz,
    )

    html_path = output_dir / f"{subject_id}_report.html"
    html_path.write_text(html_content, encoding="utf-8")

    print(f"✓ HTML report saved: {html_path}")
    return html_path


def generate_complete_report(analysis, output_dir, subject_id, basic_info=None, html=True):
    """
    Generate all report formats: JSON, CSV and optionally HTML with figures.

    Returns
    -------
    report_paths : dict
        Dictionary of all generated report file paths
    """
    from .visualizations import (
        plot_index_percentiles,
        plot_lateralization,
        plot_region_contributions,
    )

    output_dir = Path(output_dir)
    summary = summarize(analysis, basic_info)

    report_paths = {
        'json': save_json_report(analysis, output_dir, subject_id, basic_info, summary),
        'csv': save_csv_summary(analysis, output_dir, subject_id),
    }

    if html:
        viz_dir = output_dir / "visualizations"
        viz_paths = {
            'percentiles': plot_index_percentiles(analysis, viz_dir, subject_id),
            'lateralization': plot_lateralization(analysis, viz_dir, subject_id),
            'regions': {},
        }
        for result in analysis.indices:
            fig_path = plot_region_contributions(result, viz_dir, subject_id)
            if fig_path is not None:
                viz_paths['regions'][result.key] = fig_path
        report_paths['html'] = save_html_report(
            analysis, viz_paths, output_dir, subject_id, basic_info, summary
        )
        report_paths['visualizations'] = viz_paths

    logger.info("Reports for %s written to %s", subject_id, output_dir)
    return report_paths
