from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ..config import get_config, load_config_file


def add_common_arguments(p: argparse.ArgumentParser) -> None:
    """Add arguments shared by analyze and batch."""
    p.add_argument(
        "--out",
        type=Path,
        required=True,
        help="Output directory for reports."
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [brainstats] table of parameter overrides."
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Print detailed processing information"
    )


def configure_logging(verbose: bool) -> None:
    """Route brainstats log records to stderr; DEBUG when verbose."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("brainstats").setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_analysis_config(args: argparse.Namespace) -> dict:
    """Calibrated parameters from --config, or the defaults."""
    config_path = getattr(args, "config", None)
    if config_path:
        return load_config_file(config_path)
    return get_config()


def print_analysis_summary(analysis, summary: dict) -> None:
    """Print index values as a console table."""
    print("\n" + "=" * 60)
    print("BRAIN INDICES")
    print("=" * 60)
    print(f"  {'Index':<42} {'Value':>8} {'Pct':>5}")
    for result in analysis.indices:
        marker = " " if result.details else "-"
        print(f"{marker} {result.name:<42} {result.value:>8g} {result.percentile:>5}")
    print("-" * 60)
    print(f"  Overall score: {summary['overall_score']}")
    tags = [t["label"] for t in summary["laterality_tags"] + summary["ability_tags"]]
    if tags:
        print(f"  Tags: {', '.join(tags)}")
    print("=" * 60)
