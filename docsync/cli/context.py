# docsync/cli/context.py
"""Builds a SyncConfig from the config file plus command-line overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from docsync.config.schema import SyncConfig
from docsync.core.config import ConfigError, load_config, validate_config
from docsync.core.paths import DocsyncPaths
from docsync.logging.logger import get_logger
from docsync.logging.tags import CLI

from .ui import ui

logger = get_logger(__name__)


def build_config(
    source: Optional[Path] = None,
    output: Optional[Path] = None,
    config_path: Optional[Path] = None,
    state_path: Optional[Path] = None,
    workers: Optional[int] = None,
) -> SyncConfig:
    """
    Resolve the effective configuration or exit with a readable message.

    An explicit --config must exist. Without one, {workspace}/config.yaml is
    used when present; otherwise SOURCE and OUTPUT are required.
    """
    overrides: Dict[str, Any] = {
        "source_dir": source,
        "output_dir": output,
        "state_path": state_path,
        "max_workers": workers,
    }

    try:
        if config_path is not None:
            return load_config(config_path, overrides=overrides)
        default_path = DocsyncPaths.config()
        if default_path.exists():
            return load_config(default_path, overrides=overrides)
        if source is None or output is None:
            ui.error("SOURCE and OUTPUT are required when no config file is present.")
            raise typer.Exit(2)
        return validate_config({k: v for k, v in overrides.items() if v is not None})
    except ConfigError as e:
        logger.debug(f"{CLI} Config error: {e}")
        ui.error(str(e))
        raise typer.Exit(2)


__all__ = ["build_config"]
