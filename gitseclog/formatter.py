"""
Record formatter.

A record is the session prefix followed by the event fields, all joined by
one delimiter. Missing values become the empty placeholder so that every
record has the same number of fields.

Values come from the push (paths, author names, ref names) and are
percent-encoded where they contain `%`, CR, LF or a delimiter character, so
one event is always one line with a fixed number of fields.
"""

from __future__ import annotations

from collections.abc import Sequence

from .config import SeclogConfig
from .event_types import (
    DEFAULT_CONTEXT_FIELDS,
    DEFAULT_EVENT_FIELDS,
    ContextField,
    Event,
    EventField,
    SessionContext,
)


class RecordFormatter:
    """Renders SessionContext + Event into delimited log lines."""

    def __init__(
        self,
        context_fields: Sequence[ContextField] = DEFAULT_CONTEXT_FIELDS,
        event_fields: Sequence[EventField] = DEFAULT_EVENT_FIELDS,
        delimiter: str = ",",
        empty: str = "",
    ):
        self.context_fields = tuple(context_fields)
        self.event_fields = tuple(event_fields)
        self.delimiter = delimiter
        self.empty = empty

    @classmethod
    def from_config(cls, config: SeclogConfig) -> "RecordFormatter":
        return cls(
            context_fields=config.context_fields,
            event_fields=config.event_fields,
            delimiter=config.delimiter,
            empty=config.empty,
        )

    def escape(self, value: str) -> str:
        """Percent-encode `%`, CR, LF and the delimiter's characters."""
        special = dict.fromkeys("%\r\n" + self.delimiter)
        return "".join(f"%{ord(ch):02X}" if ch in special else ch for ch in value)

    def _or_empty(self, value: str | None) -> str:
        return self.empty if value is None or value == "" else self.escape(value)

    def context_values(self, session: SessionContext, include_time: bool = True) -> list[str]:
        return [
            self._or_empty(session.value(f))
            for f in self.context_fields
            if include_time or f is not ContextField.TIME
        ]

    def event_values(self, event: Event) -> list[str]:
        return [self._or_empty(event.value(f)) for f in self.event_fields]

    def render_event(self, event: Event) -> str:
        return self.delimiter.join(self.event_values(event))

    def render_line(self, session: SessionContext, event: Event) -> str:
        """Full record for the file sink, TIME included."""
        return self.delimiter.join(self.context_values(session) + self.event_values(event))

    def render_syslog(self, session: SessionContext, event: Event) -> str:
        """Record for syslog, which timestamps messages itself."""
        return self.delimiter.join(
            self.context_values(session, include_time=False) + self.event_values(event)
        )

    @property
    def field_count(self) -> int:
        return len(self.context_fields) + len(self.event_fields)
