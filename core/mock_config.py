"""Mock generation configuration.

Settings are resolved once per run from a JSON (or YAML) mapping and stay
immutable afterwards, so one ``MockConfig`` may be shared by every engine
instance of a multi-file run.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GENMOCK_CONFIG"
DEFAULT_CONFIG_DIR_NAME = "genmock"
DEFAULT_CONFIG_FILE_NAME = "genmock.json"


class GmockStyle(str, Enum):
    """Mock-macro dialect emitted into generated headers."""

    OLD = "old"
    NEW = "new"


@dataclass(frozen=True)
class MockConfig:
    """Immutable per-run settings.

    Attributes:
        tab: Indentation unit, a string of ``tab_length`` spaces.
        singleton_path: Include path of the singleton base header.
        singleton_class: Fully qualified singleton base class template name.
        gmock_style: Mock-macro dialect.
    """

    tab: str
    singleton_path: str
    singleton_class: str
    gmock_style: GmockStyle = GmockStyle.NEW

    @property
    def tab_length(self) -> int:
        return len(self.tab)

    @classmethod
    def from_mapping(cls, payload: Any) -> "MockConfig":
        """Validate a raw configuration mapping.

        Raises:
            ConfigurationError: If a required key is absent or has the wrong shape.
        """
        if not isinstance(payload, dict):
            raise ConfigurationError(
                f"Configuration must be an object, got {type(payload).__name__}"
            )

        tab_length = _require(payload, "tab_length")
        if isinstance(tab_length, bool) or not isinstance(tab_length, int) or tab_length <= 0:
            raise ConfigurationError(
                f"tab_length must be a positive integer, got {tab_length!r}"
            )

        singleton_path = _require(payload, "singleton_path")
        if not isinstance(singleton_path, str):
            raise ConfigurationError("singleton_path must be a string")

        singleton_class = _require(payload, "singleton_class")
        if not isinstance(singleton_class, str) or not singleton_class.strip():
            raise ConfigurationError("singleton_class must be a non-empty string")

        return cls(
            tab=" " * tab_length,
            singleton_path=singleton_path,
            singleton_class=singleton_class.strip(),
            gmock_style=_resolve_style(payload.get("style")),
        )


def _require(payload: dict[str, Any], key: str) -> Any:
    if key not in payload or payload[key] is None:
        raise ConfigurationError(f"Missing required configuration key '{key}'")
    return payload[key]


def _resolve_style(raw: Any) -> GmockStyle:
    if raw is None:
        return GmockStyle.NEW
    for style in GmockStyle:
        if raw == style.value:
            return style
    logger.warning("Unrecognized style %r; using '%s'", raw, GmockStyle.NEW.value)
    return GmockStyle.NEW


def default_config_path() -> Path:
    """Return ``<user config dir>/genmock/genmock.json``."""
    config_home = os.getenv("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / DEFAULT_CONFIG_DIR_NAME / DEFAULT_CONFIG_FILE_NAME


def resolve_config_path(explicit: Optional[str] = None) -> Path:
    """Resolve the config file from the CLI value, ``GENMOCK_CONFIG`` or the default."""
    if explicit:
        return Path(explicit)
    from_env = os.getenv(CONFIG_ENV_VAR)
    if from_env and from_env.strip():
        return Path(from_env.strip())
    return default_config_path()


def load_mock_config(path: str | Path) -> MockConfig:
    """Load and validate a configuration file.

    ``.json`` files are read with :mod:`json`, everything else with
    ``yaml.safe_load``.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file not found: {config_path}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Can't read config file {config_path}: {exc}") from exc

    try:
        if config_path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse config file {config_path}: {exc}") from exc

    config = MockConfig.from_mapping(payload)
    logger.debug(
        "Loaded config from %s: tab_length=%d, singleton_class=%s, style=%s",
        config_path,
        config.tab_length,
        config.singleton_class,
        config.gmock_style.value,
    )
    return config
