"""
post-receive main loop.

Git calls the hook once per push, after the refs are updated, and writes
one `<old_rev> <new_rev> <ref_name>` line per updated ref to stdin. The
hook cannot change the outcome of the push; its exit code is advisory.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .builder import EventBuilder
from .classifier import classify, parse_ref_line
from .emitter import LogEmitter
from .event_types import Event, RefKind, RefUpdate, SessionContext
from .git import DiffResult, RevisionControl, extract

logger = logging.getLogger(__name__)


def check_ref_update(
    ref_update: RefUpdate,
    vcs: RevisionControl,
    builder: EventBuilder,
) -> list[Event]:
    """Classify one ref update, diff it unless deleted, and buffer its events."""
    logger.debug(
        "check: old_rev=%s new_rev=%s ref=%s",
        ref_update.old_rev,
        ref_update.new_rev,
        ref_update.ref_name,
    )
    classification = classify(ref_update.old_rev, ref_update.new_rev)
    if classification.kind is RefKind.DELETED:
        diff_result = DiffResult()
    else:
        diff_result = extract(classification.range, vcs)
    return builder.add(ref_update, classification, diff_result)


def run_hook(
    lines: Iterable[str],
    session: SessionContext,
    vcs: RevisionControl,
    emitter: LogEmitter,
) -> int:
    """
    Process post-receive input and emit audit records.

    Each ref update is flushed to the sinks before the next line is read.
    Malformed lines are reported and skipped.

    Returns:
        Process exit code (always 0; post-receive cannot reject a push)
    """
    builder = EventBuilder()
    for lineno, line in enumerate(lines, start=1):
        try:
            ref_update = parse_ref_line(line)
        except ValueError as e:
            logger.warning("skipping input line %d: %s", lineno, e)
            continue
        if ref_update is None:
            continue

        check_ref_update(ref_update, vcs, builder)
        emitter.emit(session, builder.drain())
    return 0
