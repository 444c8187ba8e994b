"""Typed configuration loading.

The config file is a JSON document. Only ``env`` is recognized: a mapping of
environment variables passed to hooks and npm. Other keys are ignored, and a
missing file is an empty configuration.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ConfigError
from .result import Err, Ok, Result
from .structured import as_str_dict, get_str_map

if TYPE_CHECKING:
    from shelf.output.console import ConsoleProtocol

__all__ = ["Config", "load_config", "DEFAULT_CONFIG_NAME"]

DEFAULT_CONFIG_NAME = "shelf.json"


def _empty_env() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    env: Mapping[str, str] = field(default_factory=_empty_env)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed JSON.

        Raises:
            ValueError: ``env`` is present but is not a string mapping.
        """
        if "env" not in data:
            return cls()
        env = get_str_map(data, "env")
        if env is None:
            raise ValueError('"env" must be an object of string values')
        return cls(env=env)

    def as_dict(self) -> dict[str, object]:
        return {"env": dict(self.env)}


def _display_path(path: Path) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:
        return str(path)


def load_config(
    path: Path,
    console: ConsoleProtocol | None = None,
) -> Result[Config, ConfigError]:
    """Load configuration from a JSON file.

    Args:
        path: Config file path; may not exist
        console: When given, the loaded config is printed

    Returns:
        Ok(Config) on success (empty when the file is absent),
        Err(ConfigError) wrapping the reason with the source path
    """
    if not path.exists():
        return Ok(Config())

    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return Err(ConfigError(path=path, reason=f"Invalid JSON: {e}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(path=path, reason=str(e)))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError(path=path, reason="Config root must be a JSON object"))

    try:
        config = Config.from_dict(data)
    except ValueError as e:
        return Err(ConfigError(path=path, reason=str(e)))

    if console is not None:
        console.info(
            f"Loaded config from `{_display_path(path)}`:\n"
            f"{json.dumps(config.as_dict(), indent=4)}"
        )
    return Ok(config)
