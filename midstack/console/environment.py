from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from midstack.exceptions import EnvironmentLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def parse_environment(value: str) -> Any:
    """Parses an environment given inline on the command line as JSON."""
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise EnvironmentLoadError(f"Invalid JSON environment: {e}") from e


def read_environment(path: str | Path) -> Any:
    """Reads an environment from a JSON or YAML file, chosen by its suffix."""
    path = Path(path)
    if not path.is_file():
        raise EnvironmentLoadError(f"Environment file not found: {path}")

    logger.debug(f"Reading environment from {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EnvironmentLoadError(f"Could not read environment file {path}: {e}") from e

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise EnvironmentLoadError(f"Invalid YAML in {path}: {e}") from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise EnvironmentLoadError(f"Invalid JSON in {path}: {e}") from e


def load_environment(value: str | None = None, path: str | Path | None = None) -> Any:
    """
    Loads the environment for a run. Passing both an inline value and a file
    is an error; passing neither gives ``None``.
    """
    if value is not None and path is not None:
        raise EnvironmentLoadError("Use either an inline environment or a file, not both.")
    if value is not None:
        return parse_environment(value)
    if path is not None:
        return read_environment(path)
    return None
