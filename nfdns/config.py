"""Runtime settings.

Values are resolved from built-in defaults, then an optional ``nfdns.yaml``
file (or the file named by ``NFDNS_CONFIG``), then environment variables.
CLI options override all of these.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_FILE = "nfdns.yaml"
DEFAULT_REGISTRY_DIR = ".nfdns_registry"


@dataclass
class Settings:
    """Settings shared by the CLI and library entry points."""

    registry_dir: str = DEFAULT_REGISTRY_DIR
    log_level: str = "WARNING"


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """Build settings from file and environment."""
    settings = Settings()

    path = Path(config_path or os.environ.get("NFDNS_CONFIG", DEFAULT_CONFIG_FILE))
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        if data.get("registry_dir"):
            settings.registry_dir = str(data["registry_dir"])
        if data.get("log_level"):
            settings.log_level = str(data["log_level"])

    settings.registry_dir = os.environ.get("NFDNS_REGISTRY_DIR", settings.registry_dir)
    settings.log_level = os.environ.get("NFDNS_LOG_LEVEL", settings.log_level).upper()
    return settings
