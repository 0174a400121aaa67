"""Pytest configuration and fixtures."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from gitseclog.classifier import RevRange
from gitseclog.event_types import SessionContext

OLD_REV = "1" * 40
NEW_REV = "1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b"


class FakeRepository:
    """In-memory RevisionControl keyed by revision and range string."""

    def __init__(
        self,
        metadata: dict[str, tuple[str, str]] | None = None,
        diffs: dict[str, list[tuple[str, str]]] | None = None,
    ):
        self.metadata = metadata or {}
        self.diffs = diffs or {}
        self.calls: list[tuple[str, str]] = []

    def commit_metadata(self, rev: str) -> tuple[str, str]:
        self.calls.append(("commit_metadata", rev))
        return self.metadata.get(rev, ("", ""))

    def diff_name_status(self, rev_range: RevRange) -> list[tuple[str, str]]:
        self.calls.append(("diff_name_status", str(rev_range)))
        return list(self.diffs.get(str(rev_range), []))


class CapturingHandler(logging.Handler):
    """Collects records in place of a syslog socket."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> list[str]:
        return [r.getMessage() for r in self.records]


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Repository where NEW_REV was authored by Alice and adds readme.md."""
    return FakeRepository(
        metadata={NEW_REV: ("Alice", "1a2b3c4")},
        diffs={
            NEW_REV: [("A", "readme.md")],
            f"{OLD_REV}..{NEW_REV}": [("A", "foo.txt"), ("M", "bar.txt"), ("D", "baz.txt")],
        },
    )


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(
        time="2013-05-01 12:00:00",
        user="git",
        client_ip="10.0.0.5",
        repo_path="/var/git/project.git",
        host="scm01",
    )


@pytest.fixture
def capturing_handler() -> CapturingHandler:
    return CapturingHandler()


@pytest.fixture
def config_file(tmp_path: Path):
    """Write a YAML config with syslog off and a log file under tmp_path."""

    def _write(**overrides: object) -> Path:
        lines = [
            "syslog: false",
            f"logfile: {tmp_path / 'seclog.log'}",
        ]
        for key, value in overrides.items():
            lines.append(f"{key}: {value}")
        path = tmp_path / "gitseclog.yaml"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
