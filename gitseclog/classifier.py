"""
Revision classifier.

Decides whether a ref update created, deleted or moved a ref and which
comparison range describes the change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .event_types import RefKind, RefUpdate

_NULL_REV = re.compile(r"^0+$")


def is_null_rev(rev: str) -> bool:
    """True for git's all-zero object id (SHA-1 or SHA-256 length)."""
    return bool(_NULL_REV.match(rev))


@dataclass(frozen=True)
class RevRange:
    """A comparison range. `base` is None when there is no prior state."""

    tip: str
    base: str | None = None

    def __str__(self) -> str:
        if self.base is None:
            return self.tip
        return f"{self.base}..{self.tip}"


@dataclass(frozen=True)
class Classification:
    kind: RefKind
    range: RevRange


def classify(old_rev: str, new_rev: str) -> Classification:
    """Classify an (old_rev, new_rev) pair.

    - old_rev null: CREATED, range is new_rev alone (diffed from the empty tree)
    - new_rev null: DELETED, range is old_rev alone (never diffed)
    - otherwise: UPDATED, range is old_rev..new_rev
    """
    old_null = is_null_rev(old_rev)
    new_null = is_null_rev(new_rev)
    if old_null and new_null:
        raise ValueError("old_rev and new_rev cannot both be null")

    if old_null:
        return Classification(RefKind.CREATED, RevRange(tip=new_rev))
    if new_null:
        return Classification(RefKind.DELETED, RevRange(tip=old_rev))
    return Classification(RefKind.UPDATED, RevRange(tip=new_rev, base=old_rev))


def parse_ref_line(line: str) -> RefUpdate | None:
    """Parse one line of post-receive input.

    Returns None for blank lines. Raises ValueError for malformed lines.
    """
    parts = line.split()
    if not parts:
        return None
    if len(parts) != 3:
        raise ValueError(f"expected '<old_rev> <new_rev> <ref_name>', got {line.strip()!r}")

    old_rev, new_rev, ref_name = parts
    if is_null_rev(old_rev) and is_null_rev(new_rev):
        raise ValueError(f"both revisions are null for {ref_name}")
    return RefUpdate(old_rev=old_rev, new_rev=new_rev, ref_name=ref_name)
