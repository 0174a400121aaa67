from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from gitseclog.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    ConfigError,
    SeclogConfig,
    config_from_dict,
    dump_config,
    load_config,
    resolve_config_path,
)
from gitseclog.event_types import (
    DEFAULT_CONTEXT_FIELDS,
    DEFAULT_EVENT_FIELDS,
    ContextField,
    EventField,
)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")
    assert config == SeclogConfig()
    assert config.syslog is True
    assert config.debug is False
    assert config.logfile is None
    assert config.facility == "local5"
    assert config.context_fields == DEFAULT_CONTEXT_FIELDS
    assert config.event_fields == DEFAULT_EVENT_FIELDS
    assert config.delimiter == ","
    assert config.empty == ""
    assert not (tmp_path / "absent.yaml").exists()


def test_none_path_gives_defaults() -> None:
    assert load_config(None) == SeclogConfig()


def test_legacy_uppercase_keys(tmp_path: Path) -> None:
    path = tmp_path / "seclog.yaml"
    path.write_text(
        "\n".join(
            [
                "DEBUG: 1",
                "SYSLOG: 0",
                "FACILITY: local3",
                "LOGFILE: /var/git/logs/git-seclog.log",
                "ENVFIELDS: [TIME, user, CLIENT_IP]",
                "EVENTFIELDS: [ACTION, FILE]",
                "DELIMITER: ';'",
                "EMPTY: '-'",
                "",
            ]
        ),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.debug is True
    assert config.syslog is False
    assert config.facility == "local3"
    assert config.logfile == Path("/var/git/logs/git-seclog.log")
    assert config.context_fields == (ContextField.TIME, ContextField.USER, ContextField.CLIENT_IP)
    assert config.event_fields == (EventField.ACTION, EventField.FILE)
    assert config.delimiter == ";"
    assert config.empty == "-"


def test_unknown_field_names_are_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="gitseclog"):
        config = config_from_dict({"context_fields": ["USER", "SHOE_SIZE"]})
    assert config.context_fields == (ContextField.USER,)
    assert "SHOE_SIZE" in caplog.text


def test_all_unknown_field_names_fall_back_to_defaults() -> None:
    config = config_from_dict({"event_fields": ["nope"], "context_fields": "bogus"})
    assert config.event_fields == DEFAULT_EVENT_FIELDS
    assert config.context_fields == DEFAULT_CONTEXT_FIELDS


def test_unknown_facility_falls_back() -> None:
    assert config_from_dict({"facility": "local99"}).facility == "local5"
    assert config_from_dict({"facility": "AUTHPRIV"}).facility == "authpriv"


def test_empty_delimiter_rejected() -> None:
    assert config_from_dict({"delimiter": ""}).delimiter == ","


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("debug: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == SeclogConfig()


def test_dump_then_load_preserves_values(tmp_path: Path) -> None:
    config = config_from_dict({"logfile": "/tmp/x.log", "empty": "-", "event_fields": ["FILE"]})
    path = tmp_path / "nested" / "gitseclog.yaml"
    dump_config(config, path)
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["event_fields"] == ["FILE"]
    assert load_config(path) == config


def test_resolve_config_path_order(tmp_path: Path) -> None:
    explicit = tmp_path / "explicit.yaml"
    from_env = tmp_path / "env.yaml"
    assert resolve_config_path(explicit, env={CONFIG_ENV_VAR: str(from_env)}) == explicit
    assert resolve_config_path(None, env={CONFIG_ENV_VAR: str(from_env)}) == from_env
    assert resolve_config_path(None, env={}) == DEFAULT_CONFIG_PATH
