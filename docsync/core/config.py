# docsync/core/config.py
"""
Configuration loading for docsync.

Usage:
    from docsync.core.config import load_config, ConfigError

    config = load_config("docsync.yaml")          # -> SyncConfig
    config = load_config(overrides={"max_workers": 8})

Reading (YAML) and validation (pydantic) are separate steps so the CLI can
merge command-line overrides into the raw mapping before validating.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from docsync.config.schema import SyncConfig
from docsync.core.exceptions import DocsyncError
from docsync.core.paths import DocsyncPaths
from docsync.logging.logger import get_logger

logger = get_logger(__name__)


class ConfigError(DocsyncError):
    """A config file could not be used. Carries the offending file in .path."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message if path is None else f"{message} (file: {path})")


class ConfigNotFoundError(ConfigError):
    """No file at the given path."""


class ConfigParseError(ConfigError):
    """Unreadable file, invalid YAML, or a root that is not a mapping."""


class ConfigValidationError(ConfigError):
    """The mapping does not satisfy SyncConfig."""


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a config file into a raw mapping (an empty file gives {}).

    Raises:
        ConfigNotFoundError, ConfigParseError
    """
    p = Path(path)
    if not p.is_file():
        if p.exists():
            raise ConfigParseError("Config path is not a file", path=p)
        raise ConfigNotFoundError("Config file not found", path=p)

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Cannot read config: {e}", path=p) from e
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML: {e}", path=p) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"Expected a mapping at the top level, got {type(data).__name__}", path=p)

    logger.debug(f"Read config from {p}")
    return data


def validate_config(data: Dict[str, Any], path: Optional[Path] = None) -> SyncConfig:
    """Validate a raw mapping against SyncConfig."""
    try:
        return SyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}", path=path) from e


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SyncConfig:
    """
    Load and validate a configuration file.

    Args:
        path: Config file. Defaults to {workspace}/config.yaml.
        overrides: Merged over the file contents before validation; None
            values are ignored.
    """
    resolved = Path(path) if path is not None else DocsyncPaths.config()
    data = load_yaml(resolved)
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return validate_config(data, resolved)


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "load_yaml",
    "validate_config",
    "load_config",
]
