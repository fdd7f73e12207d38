"""
CLI utilities for logging setup and option loading.
"""

import json
import sys
from pathlib import Path

from loguru import logger

from .errors import InputReadError
from .pipeline import CompilerOptions


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr: DEBUG when verbose, warnings and errors otherwise."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING", format="<level>{level: <8}</level> {message}")


def load_options(config_path: str | None, overrides: dict) -> CompilerOptions:
    """
    Build compiler options from an optional JSON config file and CLI flags.

    Args:
        config_path: Path to a JSON file of options, or None
        overrides: Flag values; None means "not given on the command line"

    Returns:
        CompilerOptions with flags applied on top of the config file
    """
    config: dict = {}
    if config_path is not None:
        try:
            config = json.loads(Path(config_path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise InputReadError(f'Unable to read config file "{config_path}": {e}') from e
        if not isinstance(config, dict):
            raise InputReadError(f'Config file "{config_path}" must contain a JSON object')

    # Custom rules are Python callables and cannot come from a JSON file
    config.pop("normalizer_rules", None)
    config.pop("normalizerRules", None)

    options = CompilerOptions.from_dict(config)
    for key, value in overrides.items():
        if value is not None:
            setattr(options, key, value)
    return options
