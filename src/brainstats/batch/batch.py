import json
import time
import hashlib
import logging
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Literal, Dict, Any
from datetime import datetime

from brainstats import __version__
from ..config import ConfigError, get_config
from ..data.loader import ReferenceDataError
from ..ingest import load_hemisphere_dataset, StatsNotFoundError
from ..metrics.modules.summary import run_analysis
from ..metrics.modules.interpretations import english_interpreter
from ..metrics.modules.reports import generate_complete_report
from .modules.logging_setup import setup_subject_logger, close_subject_logger

logger = logging.getLogger(__name__)

DONE_MARKER = "_done.json"


# Error Categories
class ErrorCategory:
    INPUT_MISSING = "INPUT_MISSING"
    VALIDATION = "VALIDATION"
    PIPELINE_FAILED = "PIPELINE_FAILED"
    SYSTEM = "SYSTEM"


@dataclass
class SubjectSpec:
    """A single subject to process."""
    subject_id: str
    stats_dir: Path


@dataclass
class BatchConfig:
    """Configuration for the entire batch run."""
    out: Path
    force: bool = False
    html: bool = False
    interpretation: bool = True
    # Overrides of brainstats.config.DEFAULT_CONFIG
    analysis: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SubjectResult:
    """Result of a single subject processing attempt."""
    subject_id: str
    status: Literal["success", "failed", "skipped"]
    error_category: Optional[str] = None
    duration_seconds: float = 0.0
    error: Optional[str] = None
    log_path: Optional[Path] = None
    outputs: Optional[Dict[str, str]] = None


def compute_config_hash(config: BatchConfig) -> str:
    """
    Computes a stable hash of the batch configuration.
    Used to detect if settings have changed since a previous run.
    """
    data = asdict(config)
    # Settings that do not change the produced numbers
    excluded = {'out', 'force'}
    filtered = {k: v for k, v in data.items() if k not in excluded}
    filtered['analysis'] = get_config(config.analysis)
    filtered['version'] = __version__

    config_json = json.dumps(filtered, sort_keys=True, default=str)
    return hashlib.sha256(config_json.encode('utf-8')).hexdigest()


def is_subject_completed(output_dir: Path, expected_hash: str) -> bool:
    """Checks if a subject has already been successfully completed with the same config."""
    done_file = output_dir / DONE_MARKER
    if not done_file.exists():
        return False

    try:
        with open(done_file, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable marker {done_file}: {e}")
        return False
    return data.get("config_hash") == expected_hash


def write_done_marker(output_dir: Path, done_marker: Dict[str, Any]) -> None:
    """Write _done.json via a temporary file so a partial marker is never read."""
    done_file = output_dir / DONE_MARKER
    tmp_done = output_dir / f"{DONE_MARKER}.tmp"

    with open(tmp_done, 'w') as f:
        json.dump(done_marker, f, indent=2)

    tmp_done.replace(done_file)


def categorize_error(exc: BaseException) -> str:
    """Map an exception raised while processing a subject to an error category."""
    if isinstance(exc, StatsNotFoundError):
        return ErrorCategory.INPUT_MISSING
    if isinstance(exc, (ConfigError, ReferenceDataError)):
        return ErrorCategory.VALIDATION
    if isinstance(exc, OSError):
        return ErrorCategory.SYSTEM
    return ErrorCategory.PIPELINE_FAILED


def process_subject(subject: SubjectSpec, config: BatchConfig, log_path: Path, verbose: bool = False) -> SubjectResult:
    """
    Load, analyse and report one subject.

    Exceptions are captured into a failed SubjectResult so one bad subject
    does not stop the batch.
    """
    subj_logger = setup_subject_logger(subject.subject_id, log_path, verbose=verbose)
    output_dir = config.out / subject.subject_id
    start_time = time.time()

    try:
        subj_logger.info("Loading stats", extra={"stats_dir": str(subject.stats_dir)})
        dataset, basic_info, subject_name = load_hemisphere_dataset(subject.stats_dir)
        if subject_name and subject_name != subject.subject_id:
            subj_logger.info(f"Stats header names subject '{subject_name}'")

        interpreter = english_interpreter if config.interpretation else None
        analysis = run_analysis(dataset, config.analysis, interpreter)
        subj_logger.info(
            "Computed indices",
            extra={"indices": {r.key: r.value for r in analysis.indices}},
        )

        paths = generate_complete_report(
            analysis, output_dir, subject.subject_id, basic_info, html=config.html
        )
        outputs = {k: str(v) for k, v in paths.items() if k != 'visualizations'}

        duration = time.time() - start_time
        subj_logger.info("Completed", extra={"duration_seconds": round(duration, 3)})
        return SubjectResult(
            subject_id=subject.subject_id,
            status="success",
            duration_seconds=duration,
            log_path=log_path,
            outputs=outputs,
        )

    except Exception as e:
        category = categorize_error(e)
        subj_logger.error(f"Processing failed: {e}", exc_info=True, extra={"error_category": category})
        return SubjectResult(
            subject_id=subject.subject_id,
            status="failed",
            error_category=category,
            error=str(e),
            duration_seconds=time.time() - start_time,
            log_path=log_path,
        )

    finally:
        close_subject_logger(subj_logger)


def run_batch(
    subjects: List[SubjectSpec],
    config: BatchConfig,
    verbose: bool = False
) -> List[SubjectResult]:
    """
    Main batch processing orchestrator.
    Handles resume logic and completion markers.
    """
    config_hash = compute_config_hash(config)
    results = []

    logger.info(f"Starting batch processing for {len(subjects)} subjects")
    logger.info(f"Output directory: {config.out}")
    if verbose:
        logger.info(f"Config hash: {config_hash[:8]}")

    for subj_spec in subjects:
        final_dir = config.out / subj_spec.subject_id

        if not config.force and is_subject_completed(final_dir, config_hash):
            if verbose:
                logger.info(f"Skipping {subj_spec.subject_id}: Already completed")
            results.append(SubjectResult(
                subject_id=subj_spec.subject_id,
                status="skipped"
            ))
            continue

        # A rerun invalidates any previous marker until it succeeds again
        (final_dir / DONE_MARKER).unlink(missing_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = final_dir / "logs" / f"{subj_spec.subject_id}_{timestamp}.log"

        res = process_subject(subj_spec, config, log_path, verbose=verbose)

        if res.status == "success":
            logger.info(f"✓ {subj_spec.subject_id}: Success in {res.duration_seconds:.1f}s")
            write_done_marker(final_dir, {
                "brainstats_version": __version__,
                "config_hash": config_hash,
                "completed_at": datetime.now().isoformat(),
                "duration_seconds": res.duration_seconds,
                "outputs": res.outputs or {},
            })
        else:
            logger.error(f"✗ {subj_spec.subject_id}: Failed ({res.error_category})")

        results.append(res)

    return results
