"""
Canonical types for push auditing.

A push is reported by git as a list of ref updates. Each ref update is
translated into events; each event is rendered, together with the session
context of the push, into one log record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """What happened to a ref or a file.

    - CREATED: A ref (branch or tag) was created
    - REMOVED: A ref was deleted
    - ADDED: A file was added in the pushed range
    - MODIFIED: A file was modified in the pushed range
    - DELETED: A file was deleted in the pushed range
    """
    CREATED = "CREATED"
    REMOVED = "REMOVED"
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"

    def __str__(self) -> str:
        return self.value


class RefKind(str, Enum):
    """Classification of a single ref update."""
    CREATED = "created"
    DELETED = "deleted"
    UPDATED = "updated"


class ContextField(str, Enum):
    """Session fields that can prefix every log record."""
    TIME = "TIME"
    USER = "USER"
    CLIENT_IP = "CLIENT_IP"
    REPO = "REPO"
    HOST = "HOST"


class EventField(str, Enum):
    """Event fields that follow the session prefix in a log record."""
    COMMIT = "COMMIT"
    AUTHOR = "AUTHOR"
    ACTION = "ACTION"
    FILE = "FILE"


DEFAULT_CONTEXT_FIELDS: tuple[ContextField, ...] = (
    ContextField.TIME,
    ContextField.USER,
    ContextField.CLIENT_IP,
    ContextField.REPO,
)

DEFAULT_EVENT_FIELDS: tuple[EventField, ...] = (
    EventField.COMMIT,
    EventField.AUTHOR,
    EventField.ACTION,
    EventField.FILE,
)


@dataclass(frozen=True)
class SessionContext:
    """Who pushed, from where, to which repository.

    Captured once per hook invocation and shared by every record it emits.
    Fields are None when the environment does not provide them.
    """

    time: str
    user: str | None = None
    client_ip: str | None = None
    repo_path: str | None = None
    host: str | None = None

    def value(self, field: ContextField) -> str | None:
        return {
            ContextField.TIME: self.time,
            ContextField.USER: self.user,
            ContextField.CLIENT_IP: self.client_ip,
            ContextField.REPO: self.repo_path,
            ContextField.HOST: self.host,
        }[field]


@dataclass(frozen=True)
class RefUpdate:
    """One `<old_rev> <new_rev> <ref_name>` line of post-receive input."""

    old_rev: str
    new_rev: str
    ref_name: str


@dataclass(frozen=True)
class Event:
    """A single audit event.

    Ref-level events (CREATED/REMOVED) carry the ref name as `file` and
    leave `commit` and `author` empty. `action` is a raw status code string
    when git reports a change kind that has no Action member.
    """

    action: Action | str
    file: str
    commit: str = ""
    author: str = ""

    def value(self, field: EventField) -> str:
        return {
            EventField.COMMIT: self.commit,
            EventField.AUTHOR: self.author,
            EventField.ACTION: str(self.action),
            EventField.FILE: self.file,
        }[field]

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict."""
        return {
            "action": str(self.action),
            "file": self.file,
            "commit": self.commit,
            "author": self.author,
        }
