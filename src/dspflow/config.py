"""Client configuration — never raises, degrades gracefully to defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from dspflow.core.models import ProcessingParams
from dspflow.remote.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path("~/.config/dspflow").expanduser()
_CONFIG_FILE = _CONFIG_DIR / "config.yaml"
_ENV_API_URL = "DSPFLOW_API_URL"


@dataclass(frozen=True)
class ClientConfig:
    """Where the processing service lives and how long to wait for it."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = DEFAULT_TIMEOUT
    plot_timeout: float | None = None
    defaults: ProcessingParams = field(default_factory=ProcessingParams)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "plot_timeout": self.plot_timeout,
            "defaults": self.defaults.to_dict(),
        }


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def _from_mapping(data: dict[str, Any]) -> ClientConfig:
    config = ClientConfig()
    if "base_url" in data:
        config = replace(config, base_url=str(data["base_url"]))
    if "timeout" in data:
        config = replace(config, timeout=_optional_float(data["timeout"]))
    if "plot_timeout" in data:
        config = replace(config, plot_timeout=_optional_float(data["plot_timeout"]))
    if "defaults" in data:
        config = replace(config, defaults=ProcessingParams(**data["defaults"]))
    return config


def load_config(path: Path | None = None) -> ClientConfig:
    """Load the client configuration.

    Reads ``~/.config/dspflow/config.yaml`` (or ``path``) when present, then
    applies the DSPFLOW_API_URL environment override. Any problem with the
    file is logged and the defaults are used instead.
    """
    config_file = path or _CONFIG_FILE
    config = ClientConfig()
    try:
        if config_file.exists():
            data = yaml.safe_load(config_file.read_text())
            if isinstance(data, dict):
                config = _from_mapping(data)
            elif data is not None:
                logger.warning("Ignoring config %s: expected a mapping", config_file)
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        logger.warning("Failed to load config %s: %s", config_file, e)
        config = ClientConfig()

    env_url = os.environ.get(_ENV_API_URL)
    if env_url:
        config = replace(config, base_url=env_url)
    return config
