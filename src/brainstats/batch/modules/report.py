import csv
import json
import logging
from pathlib import Path
from typing import List, Dict, Any, Optional
from datetime import datetime

import numpy as np

from ...metrics.modules.summary import INDEX_KEYS

STATUS_HEADERS = [
    "subject_id", "status", "error_category", "duration_seconds", "error",
]

METRICS_HEADERS = STATUS_HEADERS + [
    f"{key}_{field}" for key in INDEX_KEYS for field in ("value", "percentile")
]

logger = logging.getLogger(__name__)


def generate_batch_reports(results: List[Any], output_dir: Path):
    """
    Orchestrates the generation of all batch-level reports.

    Args:
        results: List of SubjectResult objects
        output_dir: Path to the batch output root
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    index_values = {r.subject_id: load_subject_indices(r, output_dir) for r in results}
    write_batch_metrics_csv(results, index_values, output_dir)
    write_batch_summary_json(results, index_values, output_dir)


def load_subject_indices(result: Any, output_dir: Path) -> Optional[Dict[str, Dict]]:
    """
    Read index values from a subject's JSON report.

    Returns None for failed subjects or when the report cannot be read.
    Skipped subjects completed in an earlier run still have a report.
    """
    if result.status == "failed":
        return None

    report_file = output_dir / result.subject_id / f"{result.subject_id}_brain_indices.json"
    if not report_file.exists():
        logger.warning(f"No report found for {result.subject_id}: {report_file}")
        return None

    try:
        with open(report_file, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read indices for {result.subject_id}: {e}")
        return None

    return {idx["key"]: idx for idx in data.get("indices", [])}


def write_batch_metrics_csv(results: List[Any], index_values: Dict[str, Optional[Dict]], output_dir: Path):
    """
    Writes a CSV aggregate of all subject indices.
    Index cells are empty for failed subjects.
    """
    csv_path = output_dir / "batch_metrics.csv"

    rows = []
    for res in results:
        row = {
            "subject_id": res.subject_id,
            "status": res.status,
            "error_category": res.error_category or "",
            "duration_seconds": round(res.duration_seconds, 1),
            "error": res.error or ""
        }

        indices = index_values.get(res.subject_id)
        if indices:
            for key in INDEX_KEYS:
                if key in indices:
                    row[f"{key}_value"] = indices[key]["value"]
                    row[f"{key}_percentile"] = indices[key]["percentile"]

        rows.append(row)

    with open(csv_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=METRICS_HEADERS, restval="")
        writer.writeheader()
        writer.writerows(rows)
    logger.info(f"✓ Batch metrics CSV: {csv_path}")
    return csv_path


def index_statistics(index_values: Dict[str, Optional[Dict]]) -> Dict[str, Dict]:
    """Per-index mean / std / n of values across subjects with reports."""
    stats = {}
    for key in INDEX_KEYS:
        values = np.array([
            indices[key]["value"]
            for indices in index_values.values()
            if indices and key in indices
        ], dtype=float)
        if values.size == 0:
            continue
        stats[key] = {
            "n": int(values.size),
            "mean": float(np.mean(values)),
            "std": float(np.std(values)),
            "min": float(np.min(values)),
            "max": float(np.max(values)),
        }
    return stats


def write_batch_summary_json(results: List[Any], index_values: Dict[str, Optional[Dict]], output_dir: Path):
    """
    Writes a versioned JSON summary of the entire batch run.
    Contains summary counters, index statistics and individual status records.
    """
    summary_path = output_dir / "batch_summary.json"

    counts = {
        "total": len(results),
        "success": sum(1 for r in results if r.status == "success"),
        "failed": sum(1 for r in results if r.status == "failed"),
        "skipped": sum(1 for r in results if r.status == "skipped")
    }

    summary = {
        "schema_version": "1.0.0",
        "generated_at": datetime.now().isoformat(),
        "summary": counts,
        "index_statistics": index_statistics(index_values),
        "results": [
            {
                "subject_id": r.subject_id,
                "status": r.status,
                "error_category": r.error_category,
                "duration_seconds": round(r.duration_seconds, 1),
                "error": r.error,
                "log_path": str(r.log_path) if r.log_path else None,
            } for r in results
        ]
    }

    with open(summary_path, 'w') as f:
        json.dump(summary, f, indent=2)
    logger.info(f"✓ Batch summary JSON: {summary_path}")
    return summary_path
