"""
YAML helpers for chart tuning files
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def load_yaml(filepath: str | Path) -> dict[str, Any]:
    """
    Read a YAML mapping

    Args:
        filepath: Path to the YAML file

    Returns:
        Top-level mapping ({} for an empty file)

    Raises:
        FileNotFoundError: If the file is missing
        yaml.YAMLError: If the YAML does not parse
        ValueError: If the document is not a mapping (e.g. a bare list)

    Example:
        >>> load_yaml("config/chart.yaml")["viewport"]["min_span"]
        5
    """
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {filepath}")

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{filepath}: expected a mapping, got {type(data).__name__}")
    return data


def load_yaml_safe(filepath: str | Path) -> dict[str, Any]:
    """
    Read a YAML mapping, falling back to {} so settings use built-in defaults

    Example:
        >>> load_yaml_safe("config/missing.yaml")
        {}
    """
    try:
        return load_yaml(filepath)
    except FileNotFoundError:
        logger.debug(f"No config at {filepath}, using defaults")
    except (yaml.YAMLError, ValueError) as e:
        logger.warning(f"⚠️ Ignoring unreadable config {filepath}: {e}")
    return {}
