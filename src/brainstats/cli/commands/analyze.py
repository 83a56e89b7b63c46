import argparse
from pathlib import Path

from brainstats.config import ConfigError
from brainstats.data.loader import ReferenceDataError
from brainstats.ingest import (
    load_hemisphere_dataset,
    load_from_files,
    StatsNotFoundError,
)
from brainstats.metrics import (
    run_analysis,
    english_interpreter,
    summarize,
    generate_complete_report,
)
from ..utils import load_analysis_config, print_analysis_summary

# Stats file type keys, also the argparse dest of each file flag
FILE_ARGUMENTS = ("lh_dkt", "rh_dkt", "lh_ba", "rh_ba", "aseg", "lh_aparc", "rh_aparc")


def collect_stats_files(args: argparse.Namespace) -> dict:
    """Map the explicitly given stats files to their file type keys."""
    files = {}
    for key in FILE_ARGUMENTS:
        path = getattr(args, key, None)
        if path is not None:
            files[key] = Path(path)
    return files


def cmd_analyze(args: argparse.Namespace) -> dict | None:
    """
    Compute brain indices for one subject and write reports.
    """
    try:
        config = load_analysis_config(args)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return None

    if args.stats_dir:
        print(f"Loading stats directory: {args.stats_dir}")
        try:
            dataset, basic_info, subject_name = load_hemisphere_dataset(args.stats_dir)
        except (StatsNotFoundError, OSError) as e:
            print(f"Error: {e}")
            return None
    else:
        files = collect_stats_files(args)
        if "lh_dkt" not in files or "rh_dkt" not in files:
            print("Error: Provide --stats-dir or both --lh-dkt and --rh-dkt")
            return None
        for key, path in files.items():
            if not path.exists():
                print(f"Error: {key} stats file not found: {path}")
                return None
        try:
            dataset, basic_info, subject_name = load_from_files(files)
        except OSError as e:
            print(f"Error: {e}")
            return None

    subject_id = args.subject_id or subject_name or "subject"
    print(f"  Subject: {subject_id}")
    print(f"  Regions: {len(dataset.left)} (left), {len(dataset.right)} (right)")
    if dataset.has_subregions:
        print("  ✓ BA_exvivo subregions available")
    else:
        print("  ⚠️ No BA_exvivo subregions; handedness and Broca indices will be neutral")

    interpreter = None if args.no_interpretation else english_interpreter
    try:
        analysis = run_analysis(dataset, config, interpreter)
    except (ConfigError, ReferenceDataError) as e:
        print(f"Error: {e}")
        return None

    summary = summarize(analysis, basic_info)
    print_analysis_summary(analysis, summary)

    report_paths = generate_complete_report(
        analysis, args.out, subject_id, basic_info, html=args.html
    )

    print(f"\n✓ Reports written to {args.out}")
    return report_paths
