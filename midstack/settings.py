"""
Settings for the midstack command line.

Read, in increasing order of precedence, from the user settings file
(``config.toml`` in the platform config directory), the ``[tool.midstack]``
table of the nearest ``pyproject.toml`` and ``MIDSTACK_*`` environment
variables::

    [tool.midstack]
    runner = "myapp.stack:TimedRunner"
    log-level = "info"
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import toml
from platformdirs import user_config_path
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from midstack.__version__ import APP_NAME
from midstack.exceptions import SettingsError
from midstack.utils.helpers import import_callable

logger = logging.getLogger(__name__)

ENV_PREFIX = "MIDSTACK_"
PYPROJECT_FILE_NAME = "pyproject.toml"
PYPROJECT_TABLE = "tool.midstack"
USER_SETTINGS_FILE_NAME = "config.toml"


def user_settings_file(environ: Mapping[str, str] | None = None) -> Path:
    """``MIDSTACK_CONFIG_DIR`` replaces the platform config directory."""
    environ = os.environ if environ is None else environ
    config_dir = environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    if config_dir:
        return Path(config_dir).expanduser() / USER_SETTINGS_FILE_NAME
    return user_config_path(APP_NAME, appauthor=False) / USER_SETTINGS_FILE_NAME


def find_pyproject(start: Path | None = None) -> Path | None:
    """Returns the nearest pyproject.toml in ``start`` (default: cwd) or its parents."""
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / PYPROJECT_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def read_settings_table(path: Path, table: str | None = None) -> dict[str, Any]:
    """
    Reads a table of a TOML file.

    Args:
        path: The TOML file. A missing file gives an empty table.
        table: Dotted key of the table, e.g. ``tool.midstack``. Without it the
            whole document is returned.

    Raises:
        SettingsError: If the file cannot be read or parsed.
    """
    if not path.is_file():
        logger.debug(f"Settings file not found: {path}")
        return {}

    try:
        data: Any = toml.load(path)
    except toml.TomlDecodeError as e:
        raise SettingsError(f"Error decoding TOML file {path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Could not read settings file {path}: {e}") from e

    for key in table.split(".") if table else ():
        data = data.get(key, {}) if isinstance(data, dict) else {}

    if not isinstance(data, dict):
        logger.warning(
            f"Ignoring '{table}' in {path}: expected a table, found {type(data).__name__}"
        )
        return {}
    return data


class Settings(BaseModel):
    """
    Attributes:
        runner: Import path of the runner class stacks are compiled with.
            ``None`` keeps the builder's default.
        log_level: Console log level when no verbosity flag is given.
        sources: Files the settings were read from, lowest precedence first.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    runner: str | None = None
    log_level: int = Field(default=logging.WARNING, alias="log-level")
    sources: tuple[Path, ...] = ()

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if value.isdigit():
            return int(value)
        level = logging.getLevelName(value.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def runner_class(self) -> Callable | None:
        return import_callable(self.runner) if self.runner else None

    @classmethod
    def load(
        cls, cwd: Path | None = None, environ: Mapping[str, str] | None = None
    ) -> Settings:
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        sources: list[Path] = []

        for path, table in (
            (user_settings_file(environ), None),
            (find_pyproject(cwd), PYPROJECT_TABLE),
        ):
            if path is None:
                continue
            data = read_settings_table(path, table)
            if data:
                logger.debug(f"Loading settings from {path}")
                values.update(data)
                sources.append(path)

        for name in ("runner", "log-level"):
            env_value = environ.get(ENV_PREFIX + name.upper().replace("-", "_"))
            if env_value is not None:
                values[name] = env_value

        try:
            return cls.model_validate({**values, "sources": tuple(sources)})
        except ValidationError as e:
            raise SettingsError(f"Invalid midstack settings: {e}") from e
