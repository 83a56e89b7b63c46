import argparse
import sys
from pathlib import Path

from brainstats import __version__
from brainstats.data.loader import (
    ReferenceDataError,
    get_morphometry_reference,
    get_curvature_reference,
)
from brainstats.reproducibility.provenance import TRACKED_DEPENDENCIES


def _check_dependency(package_name: str) -> bool:
    """
    Check if a dependency is available and print status.

    Returns True if available, False otherwise.
    """
    try:
        module = __import__(package_name)
        version = getattr(module, "__version__", "unknown")
        print(f"✓ {package_name}: {version}")
        return True
    except ImportError:
        print(f"✗ {package_name}: NOT FOUND")
        return False


def _discover_brainstats_modules() -> list[str]:
    """Discover all brainstats subpackages (directories with __init__.py)."""
    package_path = Path(__file__).parent.parent.parent
    modules = []

    for item in package_path.iterdir():
        if item.is_dir() and (item / "__init__.py").exists():
            if item.name not in ("cli", "__pycache__"):
                modules.append(item.name)

    return sorted(modules)


def _check_brainstats_modules() -> bool:
    """Check if all discovered brainstats modules can be imported."""
    all_ok = True

    for module_name in _discover_brainstats_modules():
        try:
            __import__(f"brainstats.{module_name}")
            print(f"✓ brainstats.{module_name}: available")
        except (ImportError, ReferenceDataError) as e:
            print(f"✗ brainstats.{module_name}: NOT AVAILABLE ({e})")
            all_ok = False

    return all_ok


def _check_reference_tables() -> bool:
    """Load and validate the bundled reference tables."""
    all_ok = True
    for label, loader in (
        ("morphometry", get_morphometry_reference),
        ("curvature", get_curvature_reference),
    ):
        try:
            table = loader()
            print(f"✓ {label} reference: {len(table)} regions")
        except (ReferenceDataError, OSError) as e:
            print(f"✗ {label} reference: INVALID ({e})")
            all_ok = False
    return all_ok


def cmd_check(args: argparse.Namespace) -> bool:
    """Runs environment checks. Returns True if all checks pass."""
    print("=" * 60)
    print("ENVIRONMENT CHECK")
    print("=" * 60)
    print(f"  Python:     {sys.version.split()[0]}")
    print(f"  brainstats: {__version__}")
    print()

    all_ok = True
    for package_name in TRACKED_DEPENDENCIES:
        if not _check_dependency(package_name):
            all_ok = False

    print()
    all_ok = _check_reference_tables() and all_ok

    print()
    all_ok = _check_brainstats_modules() and all_ok

    print()

    if all_ok:
        print("  ✓ All dependencies, reference tables and modules available")
    else:
        print("  ✗ Some checks failed - reinstall with: pip install -e .")

    return all_ok
