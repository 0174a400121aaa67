"""
Output sinks for audit records.

FileSink appends to a shared log file under an exclusive advisory lock held
until close, which serializes concurrent pushes writing the same file.
SyslogSink hands records to a stdlib SysLogHandler at NOTICE severity.
"""

from __future__ import annotations

import fcntl
import logging
import os
from logging.handlers import SYSLOG_UDP_PORT, SysLogHandler
from pathlib import Path
from typing import TextIO

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

AUDIT_LOGGER_NAME = "gitseclog.audit"
SYSLOG_IDENT = "gitseclog"


class SinkOpenError(OSError):
    """Raised when the audit log file cannot be opened or locked."""


class NoticeSysLogHandler(SysLogHandler):
    """SysLogHandler that maps the NOTICE level to syslog `notice`."""

    priority_map = {**SysLogHandler.priority_map, "NOTICE": "notice"}


def default_syslog_address() -> str | tuple[str, int]:
    """Local syslog socket when present, UDP to localhost otherwise."""
    for candidate in ("/dev/log", "/var/run/syslog"):
        if os.path.exists(candidate):
            return candidate
    return ("localhost", SYSLOG_UDP_PORT)


def make_syslog_handler(
    facility: str,
    address: str | tuple[str, int] | None = None,
    level: int = logging.DEBUG,
) -> SysLogHandler:
    """Create a syslog handler tagged `gitseclog[pid]:` for the given facility."""
    handler = NoticeSysLogHandler(
        address=address if address is not None else default_syslog_address(),
        facility=SysLogHandler.facility_names[facility],
    )
    handler.ident = f"{SYSLOG_IDENT}[{os.getpid()}]: "
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


class FileSink:
    """Append-only log file guarded by fcntl.flock(LOCK_EX)."""

    def __init__(self, path: Path):
        self.path = path
        self._fh: TextIO | None = None

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self) -> None:
        """Open in append mode and block until the exclusive lock is held."""
        if self._fh is not None:
            return
        try:
            fh = self.path.open("a", encoding="utf-8")
        except OSError as e:
            raise SinkOpenError(f"Can't open {self.path}: {e.strerror or e}") from e
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
        except OSError as e:
            fh.close()
            raise SinkOpenError(f"Can't lock {self.path}: {e.strerror or e}") from e
        self._fh = fh

    def write(self, line: str) -> None:
        if self._fh is None:
            return
        self._fh.write(line + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            fcntl.flock(self._fh.fileno(), fcntl.LOCK_UN)
        finally:
            self._fh.close()
            self._fh = None


class SyslogSink:
    """Sends audit records to syslog through a dedicated logger."""

    def __init__(self, handler: logging.Handler, logger_name: str = AUDIT_LOGGER_NAME):
        self.handler = handler
        self.logger = logging.getLogger(logger_name)
        self.logger.propagate = False
        self.logger.setLevel(NOTICE)
        self.logger.addHandler(handler)
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    def write(self, message: str) -> None:
        if not self._open or not message:
            return
        self.logger.log(NOTICE, message)

    def close(self) -> None:
        if not self._open:
            return
        self.logger.removeHandler(self.handler)
        self.handler.close()
        self._open = False
