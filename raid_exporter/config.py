"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``RAID_EXPORTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and the export coordinator receive an ``AppConfig`` (or one of its
sections) — never raw dicts or env var lookups scattered through the codebase.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

VALID_EXTRACTOR_SOURCES = frozenset({"dump", "fixture"})

# ── Sub-config models ─────────────────────────────────────────────────────────


class SerializerSettings(BaseModel):
    """How exported documents are serialized.

    Passed explicitly to the writer on every call; there is no process-wide
    serializer state.
    """

    model_config = ConfigDict(frozen=True)

    indent: int = 2

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"indent must be >= 0, got {v}.")
        return v


class ExportConfig(BaseModel):
    """Output directory and serializer settings.

    The TOML [export] section is flat (``indent`` sits next to
    ``output_dir``); ``_build_app_config`` nests it under ``serializer``.
    """

    model_config = ConfigDict(frozen=True)

    output_dir: str = "./export"
    serializer: SerializerSettings = SerializerSettings()


class ExtractorConfig(BaseModel):
    """Where the account snapshot comes from.

    ``source = "dump"`` reads the JSON dump written by the process inspector
    at ``dump_path``; ``source = "fixture"`` uses built-in sample data.
    """

    model_config = ConfigDict(frozen=True)

    source: str = "dump"
    dump_path: str = "data/raid_dump.json"

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if v not in VALID_EXTRACTOR_SOURCES:
            raise ValueError(
                f"Unknown extractor source '{v}'. Must be one of {sorted(VALID_EXTRACTOR_SOURCES)}."
            )
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "logs/raid_exporter.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    export: ExportConfig = ExportConfig()
    extractor: ExtractorConfig = ExtractorConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; if that default file is
            absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicitly given ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        default_path = root / "config" / "default.toml"
        if default_path.exists():
            raw = _read_toml(default_path)
            config_dir = default_path.parent
        else:
            logger.debug("No %s found; using built-in defaults.", default_path)
            config_dir = None
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        raw = _read_toml(config_path)
        config_dir = config_path.parent

    # Also merge local.toml if present (gitignored local overrides)
    if config_dir is not None:
        local_config_path = config_dir / "local.toml"
        if local_config_path.exists():
            raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply RAID_EXPORTER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply RAID_EXPORTER_* env vars to the raw config dict.

    Supported overrides:
      RAID_EXPORTER_OUTPUT_DIR  → raw["export"]["output_dir"]
      RAID_EXPORTER_DUMP_PATH   → raw["extractor"]["dump_path"]
      RAID_EXPORTER_LOG_LEVEL   → raw["logging"]["level"]
      RAID_EXPORTER_DEBUG       → raw["debug"]
    """
    if output_dir := os.environ.get("RAID_EXPORTER_OUTPUT_DIR"):
        raw.setdefault("export", {})["output_dir"] = output_dir

    if dump_path := os.environ.get("RAID_EXPORTER_DUMP_PATH"):
        raw.setdefault("extractor", {})["dump_path"] = dump_path

    if log_level := os.environ.get("RAID_EXPORTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("RAID_EXPORTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    export_raw = dict(raw.get("export", {}))
    if "indent" in export_raw:
        export_raw["serializer"] = {"indent": export_raw.pop("indent")}

    return AppConfig(
        export=ExportConfig(**export_raw),
        extractor=ExtractorConfig(**raw.get("extractor", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
