from __future__ import annotations

from gitseclog.builder import EventBuilder, build
from gitseclog.classifier import classify
from gitseclog.event_types import Action, Event, EventField, RefUpdate
from gitseclog.git import DiffResult

OLD_REV = "1" * 40
NEW_REV = "1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b"
NULL_REV = "0" * 40

DIFF = DiffResult(
    author="Alice",
    short_commit="1a2b3c4",
    changes=(("A", "foo.txt"), ("M", "bar.txt"), ("D", "baz.txt")),
)


def _build(old_rev: str, new_rev: str, diff: DiffResult = DIFF) -> list[Event]:
    update = RefUpdate(old_rev=old_rev, new_rev=new_rev, ref_name="refs/heads/main")
    return build(update, classify(old_rev, new_rev), diff)


def test_created_ref_event_comes_first() -> None:
    events = _build(NULL_REV, NEW_REV, DiffResult("Alice", "1a2b3c4", (("A", "readme.md"),)))
    assert events == [
        Event(action=Action.CREATED, file="refs/heads/main"),
        Event(action=Action.ADDED, file="readme.md", commit="1a2b3c4", author="Alice"),
    ]


def test_created_has_exactly_one_ref_event() -> None:
    events = _build(NULL_REV, NEW_REV)
    ref_events = [e for e in events if e.action is Action.CREATED]
    assert len(ref_events) == 1
    assert ref_events[0].file == "refs/heads/main"
    assert ref_events[0].commit == ""
    assert ref_events[0].author == ""


def test_deleted_produces_only_removed() -> None:
    events = _build(OLD_REV, NULL_REV)
    assert events == [Event(action=Action.REMOVED, file="refs/heads/main")]


def test_updated_maps_each_change_in_order() -> None:
    events = _build(OLD_REV, NEW_REV)
    assert [e.action for e in events] == [Action.ADDED, Action.MODIFIED, Action.DELETED]
    assert [e.file for e in events] == ["foo.txt", "bar.txt", "baz.txt"]
    assert {(e.commit, e.author) for e in events} == {("1a2b3c4", "Alice")}


def test_updated_with_no_changes_is_empty() -> None:
    assert _build(OLD_REV, NEW_REV, DiffResult()) == []


def test_unknown_change_code_passes_through() -> None:
    events = _build(OLD_REV, NEW_REV, DiffResult("Alice", "1a2b3c4", (("T", "link"),)))
    assert events[0].action == "T"
    assert events[0].value(EventField.ACTION) == "T"


def test_event_builder_drain_clears_buffer() -> None:
    builder = EventBuilder()
    first = RefUpdate(NULL_REV, NEW_REV, "refs/heads/main")
    builder.add(first, classify(NULL_REV, NEW_REV), DIFF)
    assert len(builder) == 4

    drained = builder.drain()
    assert len(drained) == 4
    assert len(builder) == 0
    assert builder.drain() == []

    second = RefUpdate(OLD_REV, NULL_REV, "refs/heads/old")
    builder.add(second, classify(OLD_REV, NULL_REV), DiffResult())
    assert builder.drain() == [Event(action=Action.REMOVED, file="refs/heads/old")]
