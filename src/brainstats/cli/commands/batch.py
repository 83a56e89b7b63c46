import argparse
import logging
import sys
from typing import List

from brainstats.config import ConfigError
from ...batch.batch import BatchConfig, run_batch, SubjectSpec
from ...batch.modules.report import generate_batch_reports
from ...ingest import discover_subjects
from ..utils import load_analysis_config

logger = logging.getLogger(__name__)


def cmd_batch(args: argparse.Namespace) -> bool:
    """
    CLI handler for the 'batch' command.
    """
    verbose = getattr(args, 'verbose', False)

    try:
        analysis_config = load_analysis_config(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    # 1. Prepare Subjects List
    logger.info(f"Auto-discovering subjects in: {args.subjects_dir}")
    try:
        discovered = discover_subjects(
            args.subjects_dir,
            include_subjects=getattr(args, 'include', None),
            exclude_subjects=getattr(args, 'exclude', None)
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    subjects: List[SubjectSpec] = [
        SubjectSpec(subject_id=item['id'], stats_dir=item['stats_dir'])
        for item in discovered
    ]

    if not subjects:
        print("Error: No subjects found to process.")
        sys.exit(1)

    # 2. Setup Batch Configuration
    config = BatchConfig(
        out=args.out,
        force=args.force,
        html=args.html,
        interpretation=not args.no_interpretation,
        analysis=analysis_config,
    )

    # 3. Execute Batch
    print(f"\nStarting batch processing for {len(subjects)} subjects...")
    results = run_batch(subjects, config, verbose=verbose)

    # 4. Generate Reports
    print("\nGenerating final batch reports...")
    generate_batch_reports(results, config.out)

    # 5. Summary
    success = sum(1 for r in results if r.status == "success")
    failed = sum(1 for r in results if r.status == "failed")
    skipped = sum(1 for r in results if r.status == "skipped")

    print("\n" + "="*40)
    print("BATCH PROCESSING COMPLETE")
    print("="*40)
    print(f"Total:      {len(results)}")
    print(f"Success:    {success}")
    print(f"Failed:     {failed}")
    print(f"Skipped:    {skipped}")
    print(f"\nMain metrics: {config.out / 'batch_metrics.csv'}")
    print("="*40)

    return failed == 0
