"""
Configuration for brainstats.

Holds the calibrated parameters used by the index calculators. Defaults can be
overridden programmatically or from the ``[brainstats]`` table of a TOML file.
"""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised for invalid configuration values or index definitions."""
    pass


# ---------------------------------------------------------------------------
# Calibrated parameters
# ---------------------------------------------------------------------------

DEFAULT_CONFIG = {
    # Regression-dilution correction for the parietal IQ estimate. This is a
    # literature estimate of the parietal thickness/IQ correlation, not a
    # derived constant.
    "iq_correlation": 0.40,
    "iq_min": 70,
    "iq_max": 145,
    # Denominator guard for normalised left/right ratios
    "ratio_epsilon": 0.001,
    # Output share in the combined language lateralization index
    "language_output_share": 0.6,
}


def get_config(overrides: dict | None = None) -> dict:
    """Return configuration, optionally overriding defaults."""
    config = DEFAULT_CONFIG.copy()
    if overrides:
        unknown = set(overrides) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        config.update(overrides)
    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    """Check value ranges of a configuration dict."""
    if not 0 < config["iq_correlation"] <= 1:
        raise ConfigError(
            f"iq_correlation must be in (0, 1], got {config['iq_correlation']}"
        )
    if config["iq_min"] >= config["iq_max"]:
        raise ConfigError(
            f"iq_min ({config['iq_min']}) must be below iq_max ({config['iq_max']})"
        )
    if config["ratio_epsilon"] <= 0:
        raise ConfigError("ratio_epsilon must be positive")
    if not 0 <= config["language_output_share"] <= 1:
        raise ConfigError("language_output_share must be in [0, 1]")


def load_config_file(path: str | Path) -> dict:
    """
    Load configuration overrides from a TOML file.

    Parameters
    ----------
    path : str or Path
        TOML file with a ``[brainstats]`` table.

    Returns
    -------
    config : dict
        Defaults updated with the file's overrides.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    overrides = data.get("brainstats", {})
    logger.info("Loaded %d config override(s) from %s", len(overrides), path)
    return get_config(overrides)


def check_metric_weights(name: str, weights: tuple) -> tuple:
    """
    Validate a metric-weight triple given in percent.

    Triples are divided by 100 before use, so they must sum to 100.
    """
    if len(weights) != 3:
        raise ConfigError(f"{name}: expected 3 metric weights, got {len(weights)}")
    if abs(sum(weights) - 100) > 1e-9:
        raise ConfigError(f"{name}: metric weights {weights} do not sum to 100")
    return weights
