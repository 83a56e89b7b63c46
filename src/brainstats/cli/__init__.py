from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from .utils import add_common_arguments, configure_logging
from .commands.check import cmd_check
from .commands.analyze import cmd_analyze
from .commands.batch import cmd_batch


def main() -> None:
    """Entrypoint for the brainstats CLI."""
    parser = argparse.ArgumentParser(
        prog="brainstats",
        description="Population-referenced brain indices from FreeSurfer morphometry."
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command")

    # -------------------------------------------------------------------------
    # check subtool
    # -------------------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Check dependencies and validate bundled reference tables"
    )
    p_check.set_defaults(func=cmd_check)

    # -------------------------------------------------------------------------
    # analyze subtool
    # -------------------------------------------------------------------------
    p_analyze = subparsers.add_parser(
        "analyze",
        help="Compute brain indices for one subject"
    )
    p_analyze.add_argument(
        "--stats-dir",
        type=Path,
        default=None,
        help="FreeSurfer subject stats/ directory (files are detected by name)"
    )
    p_analyze.add_argument(
        "--lh-dkt",
        type=Path,
        help="Left hemisphere lh.aparc.DKTatlas.stats"
    )
    p_analyze.add_argument(
        "--rh-dkt",
        type=Path,
        help="Right hemisphere rh.aparc.DKTatlas.stats"
    )
    p_analyze.add_argument(
        "--lh-ba",
        type=Path,
        help="Left hemisphere lh.BA_exvivo.stats (optional)"
    )
    p_analyze.add_argument(
        "--rh-ba",
        type=Path,
        help="Right hemisphere rh.BA_exvivo.stats (optional)"
    )
    p_analyze.add_argument(
        "--aseg",
        type=Path,
        help="aseg.stats for whole-brain volumes (optional)"
    )
    p_analyze.add_argument(
        "--lh-aparc",
        type=Path,
        help="lh.aparc.stats for left mean thickness (optional)"
    )
    p_analyze.add_argument(
        "--rh-aparc",
        type=Path,
        help="rh.aparc.stats for right mean thickness (optional)"
    )
    add_common_arguments(p_analyze)
    p_analyze.add_argument(
        "--subject-id",
        type=str,
        default=None,
        help="Subject identifier for output naming (default: from stats header)"
    )
    p_analyze.add_argument(
        "--html",
        action="store_true",
        help="Also write an HTML report with figures"
    )
    p_analyze.add_argument(
        "--no-interpretation",
        action="store_true",
        help="Leave interpretation text empty"
    )
    p_analyze.set_defaults(func=cmd_analyze)

    # -------------------------------------------------------------------------
    # batch subtool
    # -------------------------------------------------------------------------
    p_batch = subparsers.add_parser(
        "batch",
        help="Analyze every subject in a FreeSurfer SUBJECTS_DIR"
    )
    p_batch.add_argument(
        "--subjects-dir",
        type=Path,
        required=True,
        help="Directory containing one folder per subject, each with stats/"
    )
    add_common_arguments(p_batch)
    p_batch.add_argument(
        "--include",
        nargs="+",
        default=None,
        help="Regex patterns of subject IDs to include"
    )
    p_batch.add_argument(
        "--exclude",
        nargs="+",
        default=None,
        help="Regex patterns of subject IDs to exclude"
    )
    p_batch.add_argument(
        "--force",
        action="store_true",
        help="Reprocess subjects that already completed with the same settings"
    )
    p_batch.add_argument(
        "--html",
        action="store_true",
        help="Also write HTML reports"
    )
    p_batch.add_argument(
        "--no-interpretation",
        action="store_true",
        help="Leave interpretation text empty"
    )
    p_batch.set_defaults(func=cmd_batch)

    # -------------------------------------------------------------------------
    # Parse and execute
    # -------------------------------------------------------------------------
    args = parser.parse_args()

    if hasattr(args, "func"):
        configure_logging(getattr(args, "verbose", False))
        result = args.func(args)
        if result is None or result is False:
            sys.exit(1)
    else:
        parser.print_help()
