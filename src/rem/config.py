"""rem configuration loader.

Priority (high → low):
  1. CLI flags               (handled at the call site, not here)
  2. Environment variables   (REM_DB, REM_LOG_LEVEL)
  3. ~/.config/rem/config.yaml
  4. Hardcoded defaults

This file configures the tool itself (where the database lives, how loud it
is). History settings such as ``history_limit`` live inside the database.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_CONFIG_DIR: Path = Path.home() / ".config" / "rem"
_CONFIG_PATH: Path = _CONFIG_DIR / "config.yaml"
DEFAULT_DB_NAME: str = "rem.db"

ENV_DB = "REM_DB"
ENV_LOG_LEVEL = "REM_LOG_LEVEL"

_LOG_LEVELS: frozenset[str] = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["database", "logging"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class DatabaseCfg:
    """Database location (config.yaml: database:)."""

    path: str | None = None


@dataclass
class LoggingCfg:
    """Log verbosity (config.yaml: logging:)."""

    level: str = "WARNING"


@dataclass
class RemConfig:
    """Root configuration object, built by load_config()."""

    database: DatabaseCfg = field(default_factory=DatabaseCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _validate_level(level: str, source: str) -> str:
    normalized = level.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{level}' in {source}.\n"
            f"  Use one of: {', '.join(sorted(_LOG_LEVELS))}"
        )
    return normalized


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _section(data: dict[str, Any], name: str, source: Path) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' in '{source}' must be a mapping.")
    return value


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def _cfg_from_dict(data: dict[str, Any], source: Path) -> RemConfig:
    """Build a *RemConfig* from a raw YAML dict."""
    cfg = RemConfig()

    if "database" in data:
        d = _section(data, "database", source)
        raw_path = d.get("path")
        cfg.database = DatabaseCfg(path=str(raw_path) if raw_path else None)

    if "logging" in data:
        lg = _section(data, "logging", source)
        cfg.logging = LoggingCfg(
            level=_validate_level(str(lg.get("level", cfg.logging.level)), str(source)),
        )

    return cfg


def _apply_env_overrides(cfg: RemConfig) -> RemConfig:
    """Apply REM_* environment variable overrides."""
    if db := os.environ.get(ENV_DB):
        cfg.database.path = db
    if level := os.environ.get(ENV_LOG_LEVEL):
        cfg.logging.level = _validate_level(level, ENV_LOG_LEVEL)
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: Path | None = None) -> RemConfig:
    """Load and return a merged *RemConfig*.

    Args:
        config_path: Override the config file path (for testing).

    Returns:
        *RemConfig* with env var overrides applied.

    Raises:
        ConfigError: If the YAML is malformed or holds an invalid value.
    """
    path = config_path if config_path is not None else _CONFIG_PATH

    raw: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file '{path}' must contain a mapping.")
        _warn_unknown_keys(loaded, path)
        raw = loaded

    return _apply_env_overrides(_cfg_from_dict(raw, path))


def default_db_path() -> Path:
    """Platform default: ``~/.config/rem/rem.db``."""
    return _CONFIG_DIR / DEFAULT_DB_NAME


def resolve_db_path(explicit: Path | str | None = None, cfg: RemConfig | None = None) -> Path:
    """Pick the database file: explicit path, then REM_DB / config file, then default."""
    if explicit:
        return Path(explicit).expanduser()
    if cfg is None:
        cfg = load_config()
    if cfg.database.path:
        return Path(cfg.database.path).expanduser()
    return default_db_path()
