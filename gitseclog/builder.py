"""Event builder: ref classification plus diff output -> ordered events."""

from __future__ import annotations

from .classifier import Classification
from .event_types import Action, Event, RefKind, RefUpdate
from .git import DiffResult, map_change_kind


def build(
    ref_update: RefUpdate,
    classification: Classification,
    diff_result: DiffResult,
) -> list[Event]:
    """Translate one ref update into events.

    The ref-level event (if any) comes first, followed by one file-level
    event per diff change in diff order. Deletions produce only REMOVED.
    """
    if classification.kind is RefKind.DELETED:
        return [Event(action=Action.REMOVED, file=ref_update.ref_name)]

    events: list[Event] = []
    if classification.kind is RefKind.CREATED:
        events.append(Event(action=Action.CREATED, file=ref_update.ref_name))

    for code, path in diff_result.changes:
        events.append(
            Event(
                action=map_change_kind(code),
                file=path,
                commit=diff_result.short_commit,
                author=diff_result.author,
            )
        )
    return events


class EventBuilder:
    """Accumulates events for the current invocation until drained."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def add(
        self,
        ref_update: RefUpdate,
        classification: Classification,
        diff_result: DiffResult,
    ) -> list[Event]:
        """Build events for a ref update and buffer them. Returns the new events."""
        events = build(ref_update, classification, diff_result)
        self._events.extend(events)
        return events

    def drain(self) -> list[Event]:
        """Return buffered events and clear the buffer."""
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)
