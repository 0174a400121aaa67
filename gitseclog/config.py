"""
Configuration loading for the audit hook.

Options live in an optional YAML file. A missing file means defaults; the
file is never created implicitly (use `gitseclog config --write`).
Keys are matched case-insensitively, so files written for the legacy
upper-case layout (DEBUG, SYSLOG, LOGFILE, ENVFIELDS, ...) load unchanged.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from logging.handlers import SysLogHandler
from pathlib import Path
from typing import Any, TypeVar

import yaml

from .event_types import (
    DEFAULT_CONTEXT_FIELDS,
    DEFAULT_EVENT_FIELDS,
    ContextField,
    EventField,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("/etc/gitseclog/gitseclog.yaml")
CONFIG_ENV_VAR = "GITSECLOG_CONFIG"
DEFAULT_FACILITY = "local5"

# Legacy key -> attribute name
_KEY_ALIASES = {
    "envfields": "context_fields",
    "eventfields": "event_fields",
    "context_fields": "context_fields",
    "event_fields": "event_fields",
    "debug": "debug",
    "syslog": "syslog",
    "facility": "facility",
    "logfile": "logfile",
    "delimiter": "delimiter",
    "empty": "empty",
}

F = TypeVar("F", ContextField, EventField)


class ConfigError(Exception):
    """Raised when a config file exists but cannot be used."""


@dataclass(frozen=True)
class SeclogConfig:
    debug: bool = False
    syslog: bool = True
    facility: str = DEFAULT_FACILITY
    logfile: Path | None = None
    context_fields: tuple[ContextField, ...] = field(default=DEFAULT_CONTEXT_FIELDS)
    event_fields: tuple[EventField, ...] = field(default=DEFAULT_EVENT_FIELDS)
    delimiter: str = ","
    empty: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a YAML-serializable dict."""
        return {
            "debug": self.debug,
            "syslog": self.syslog,
            "facility": self.facility,
            "logfile": str(self.logfile) if self.logfile else None,
            "context_fields": [f.value for f in self.context_fields],
            "event_fields": [f.value for f in self.event_fields],
            "delimiter": self.delimiter,
            "empty": self.empty,
        }


def resolve_config_path(option: Path | None = None, env: dict[str, str] | None = None) -> Path:
    """--config option, then $GITSECLOG_CONFIG, then the system default."""
    if option is not None:
        return option
    env = os.environ if env is None else env
    from_env = env.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _coerce_fields(raw: Any, enum_cls: type[F], default: tuple[F, ...], key: str) -> tuple[F, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        logger.warning("%s must be a list of field names; using defaults", key)
        return default

    fields: list[F] = []
    for name in raw:
        try:
            fields.append(enum_cls(str(name).strip().upper()))
        except ValueError:
            logger.warning("ignoring unknown %s entry: %s", key, name)
    if not fields:
        logger.warning("%s has no usable entries; using defaults", key)
        return default
    return tuple(fields)


def _coerce_facility(raw: Any) -> str:
    facility = str(raw).strip().lower()
    if facility not in SysLogHandler.facility_names:
        logger.warning("unknown syslog facility %r; using %s", raw, DEFAULT_FACILITY)
        return DEFAULT_FACILITY
    return facility


def config_from_dict(data: dict[str, Any]) -> SeclogConfig:
    """Build a validated config from a raw mapping, defaults for the rest."""
    config = SeclogConfig()
    updates: dict[str, Any] = {}

    for raw_key, value in data.items():
        attr = _KEY_ALIASES.get(str(raw_key).strip().lower())
        if attr is None:
            logger.warning("ignoring unknown config key: %s", raw_key)
            continue

        if attr in ("debug", "syslog"):
            updates[attr] = _coerce_bool(value)
        elif attr == "facility":
            updates[attr] = _coerce_facility(value)
        elif attr == "logfile":
            updates[attr] = Path(str(value)) if value else None
        elif attr == "context_fields":
            updates[attr] = _coerce_fields(value, ContextField, DEFAULT_CONTEXT_FIELDS, str(raw_key))
        elif attr == "event_fields":
            updates[attr] = _coerce_fields(value, EventField, DEFAULT_EVENT_FIELDS, str(raw_key))
        elif attr in ("delimiter", "empty"):
            updates[attr] = "" if value is None else str(value)

    if updates.get("delimiter") == "":
        logger.warning("delimiter cannot be empty; using ','")
        updates["delimiter"] = ","

    return replace(config, **updates)


def load_config(path: Path | None) -> SeclogConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file path; None or a missing file means defaults

    Returns:
        The effective configuration

    Raises:
        ConfigError: The file exists but is unreadable, invalid YAML,
            or not a mapping
    """
    if path is None or not path.is_file():
        return SeclogConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Can't load {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of options")

    config = config_from_dict(data)
    logger.debug("loaded %s", path)
    return config


def dump_config(config: SeclogConfig, path: Path) -> None:
    """Write a config as YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
