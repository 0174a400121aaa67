"""
Log emitter: dispatches formatted records to the configured sinks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from logging.handlers import SysLogHandler

from .config import SeclogConfig
from .event_types import Event, SessionContext
from .formatter import RecordFormatter
from .sinks import FileSink, SyslogSink, make_syslog_handler

logger = logging.getLogger(__name__)


class LogEmitter:
    """Writes each event as one record to every open sink.

    With no sink open, emit() does nothing.
    """

    def __init__(
        self,
        formatter: RecordFormatter,
        file_sink: FileSink | None = None,
        syslog_sink: SyslogSink | None = None,
    ):
        self.formatter = formatter
        self.file_sink = file_sink
        self.syslog_sink = syslog_sink

    @property
    def is_open(self) -> bool:
        return any(s is not None and s.is_open for s in (self.file_sink, self.syslog_sink))

    def emit(self, session: SessionContext, events: Iterable[Event]) -> None:
        if not self.is_open:
            return
        for event in events:
            logger.debug("event %s", event.to_dict())
            if self.file_sink is not None and self.file_sink.is_open:
                self.file_sink.write(self.formatter.render_line(session, event))
            if self.syslog_sink is not None and self.syslog_sink.is_open:
                self.syslog_sink.write(self.formatter.render_syslog(session, event))

    def close(self) -> None:
        if self.file_sink is not None:
            self.file_sink.close()
        if self.syslog_sink is not None:
            self.syslog_sink.close()

    def __enter__(self) -> "LogEmitter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_emitter(
    config: SeclogConfig,
    syslog_handler: SysLogHandler | None = None,
) -> LogEmitter:
    """
    Open the sinks named by the config.

    Args:
        config: Effective configuration
        syslog_handler: Handler to use for audit records (created from
            config.facility when omitted)

    Returns:
        A LogEmitter; it may have no open sinks

    Raises:
        SinkOpenError: The log file could not be opened or locked
    """
    formatter = RecordFormatter.from_config(config)

    syslog_sink: SyslogSink | None = None
    if config.syslog:
        try:
            handler = syslog_handler or make_syslog_handler(config.facility)
        except OSError as e:
            logger.warning("syslog unavailable: %s", e)
        else:
            syslog_sink = SyslogSink(handler)

    file_sink: FileSink | None = None
    if config.logfile:
        file_sink = FileSink(config.logfile)
        try:
            file_sink.open()
        except Exception:
            if syslog_sink is not None:
                syslog_sink.close()
            raise
        logger.debug("open %s", config.logfile)

    return LogEmitter(formatter, file_sink=file_sink, syslog_sink=syslog_sink)
