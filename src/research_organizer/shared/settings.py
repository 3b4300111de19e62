"""
Settings - runtime configuration for Research Organizer.

Resolution order (first non-empty wins):
    explicit keyword arguments > environment variables > YAML file > defaults

The YAML file is optional and is located through ``RESEARCH_ORGANIZER_CONFIG``::

    ieee_api_key: "..."
    semantic_scholar_api_key: ""
    google_api_key: ""
    google_engine_id: ""
    workspace_dir: ~/research
    search_delay: 1.0
    top_k: 10
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RESEARCH_ORGANIZER_CONFIG"
DEFAULT_WORKSPACE_DIR = str(Path.home() / ".research-organizer")

# setting name -> environment variable
ENV_VARS: dict[str, str] = {
    "ieee_api_key": "IEEE_API_KEY",
    "semantic_scholar_api_key": "SEMANTIC_SCHOLAR_API_KEY",
    "google_api_key": "GOOGLE_SEARCH_API_KEY",
    "google_engine_id": "GOOGLE_SEARCH_ENGINE_ID",
    "workspace_dir": "RESEARCH_ORGANIZER_WORKSPACE",
    "search_delay": "RESEARCH_ORGANIZER_SEARCH_DELAY",
    "top_k": "RESEARCH_ORGANIZER_TOP_K",
    "http_timeout": "RESEARCH_ORGANIZER_HTTP_TIMEOUT",
}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Credentials are blank strings when unset."""

    ieee_api_key: str = ""
    semantic_scholar_api_key: str = ""
    google_api_key: str = ""
    google_engine_id: str = ""
    workspace_dir: str = DEFAULT_WORKSPACE_DIR
    search_delay: float = 1.0
    top_k: int = 10
    http_timeout: float = 30.0

    @classmethod
    def load(
        cls,
        config_file: str | Path | None = None,
        environ: dict[str, str] | None = None,
        **overrides: Any,
    ) -> Settings:
        """
        Build settings from overrides, environment and an optional YAML file.

        Args:
            config_file: YAML file path. Defaults to $RESEARCH_ORGANIZER_CONFIG.
            environ: Environment mapping (defaults to ``os.environ``).
            **overrides: Explicit values; ``None`` means "not given".

        Raises:
            ConfigurationError: Unknown keys, unreadable file or bad numbers.
        """
        env = os.environ if environ is None else environ
        known = {f.name for f in fields(cls)}

        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        path = config_file or env.get(CONFIG_ENV_VAR, "").strip() or None
        values: dict[str, Any] = _read_yaml(Path(path).expanduser()) if path else {}

        bad = set(values) - known
        if bad:
            raise ConfigurationError(f"Unknown settings in {path}: {', '.join(sorted(bad))}")

        for name, var in ENV_VARS.items():
            raw = env.get(var, "").strip()
            if raw:
                values[name] = raw

        for name, value in overrides.items():
            if value is not None:
                values[name] = value

        return cls(**_coerce(values))

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        """Serializable view; credentials are masked unless ``redact=False``."""
        data = asdict(self)
        if redact:
            for key in ("ieee_api_key", "semantic_scholar_api_key", "google_api_key"):
                data[key] = "***" if data[key] else ""
        return data


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    logger.info(f"Loaded settings from {path}")
    return dict(data)


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    """Convert raw values to the declared field types."""
    out: dict[str, Any] = {}
    for name, value in values.items():
        try:
            if name in ("search_delay", "http_timeout"):
                out[name] = float(value)
                if out[name] < 0:
                    raise ValueError("must not be negative")
            elif name == "top_k":
                out[name] = int(value)
                if out[name] < 1:
                    raise ValueError("must be at least 1")
            elif name == "workspace_dir":
                out[name] = str(Path(str(value)).expanduser())
            else:
                out[name] = "" if value is None else str(value).strip()
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {name}: {value!r} ({e})") from e
    return out
