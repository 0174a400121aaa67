"""
Diff extraction for pushed revision ranges.

The git binary is reached only through the RevisionControl protocol, so
the core can run against a fake in tests. Every git failure degrades to an
empty result: deletions legitimately produce no diff, and a partial audit
record is preferable to a failed hook.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .classifier import RevRange, is_null_rev
from .event_types import Action

logger = logging.getLogger(__name__)

# Object id of the empty tree in SHA-1 repositories.
EMPTY_TREE_SHA1 = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_CHANGE_KINDS: dict[str, Action] = {
    "A": Action.ADDED,
    "D": Action.DELETED,
    "M": Action.MODIFIED,
}


class RevisionControl(Protocol):
    """Queries the diff extractor needs from the repository."""

    def commit_metadata(self, rev: str) -> tuple[str, str]:
        """Return (author name, short commit id), empty strings on failure."""
        ...

    def diff_name_status(self, rev_range: RevRange) -> list[tuple[str, str]]:
        """Return ordered (status code, path) pairs, empty on failure."""
        ...


class GitCli:
    """RevisionControl backed by the git command line."""

    def __init__(self, git_dir: Path | str | None = None, git: str = "git", timeout: float | None = None):
        self.git_dir = Path(git_dir) if git_dir is not None else None
        self.git = git
        self.timeout = timeout
        self._empty_tree: str | None = None

    def _run(self, *args: str, stdin: str | None = None) -> str | None:
        cmd = [self.git]
        if self.git_dir is not None:
            cmd.append(f"--git-dir={self.git_dir}")
        cmd.extend(args)
        logger.debug("running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("git failed to run: %s", e)
            return None
        if result.returncode != 0:
            logger.debug("git exited %d: %s", result.returncode, result.stderr.strip())
            return None
        return result.stdout

    def empty_tree(self) -> str:
        """Object id of the empty tree in this repository's hash format."""
        if self._empty_tree is None:
            out = self._run("hash-object", "-t", "tree", "--stdin", stdin="")
            self._empty_tree = out.strip() if out and out.strip() else EMPTY_TREE_SHA1
        return self._empty_tree

    def commit_metadata(self, rev: str) -> tuple[str, str]:
        # Peel annotated tags; `show <tag>` would print the tag message too.
        out = self._run("show", "-s", "--format=%an%x00%h", f"{rev}^{{commit}}")
        if not out:
            return "", ""
        author, _, short = out.strip().partition("\0")
        return author.strip(), short.strip()

    def diff_name_status(self, rev_range: RevRange) -> list[tuple[str, str]]:
        base = rev_range.base if rev_range.base is not None else self.empty_tree()
        out = self._run("diff", "--name-status", "--no-renames", "-z", base, rev_range.tip)
        if not out:
            return []
        return parse_name_status(out)


def parse_name_status(output: str) -> list[tuple[str, str]]:
    """Parse `git diff --name-status -z` output into (code, path) pairs.

    Paths are verbatim, so they may contain newlines or the record
    delimiter; the formatter escapes them.
    """
    tokens = output.split("\0")
    if tokens and tokens[-1] == "":
        tokens.pop()
    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens) - 1, 2)]


def map_change_kind(code: str) -> Action | str:
    """Map a git status letter to an Action; unknown codes pass through raw."""
    return _CHANGE_KINDS.get(code, code)


@dataclass(frozen=True)
class DiffResult:
    """File-level changes for one comparison range."""

    author: str = ""
    short_commit: str = ""
    changes: tuple[tuple[str, str], ...] = field(default_factory=tuple)


def extract(rev_range: RevRange, vcs: RevisionControl) -> DiffResult:
    """Resolve metadata from the range tip and list the changed files.

    A null tip (pure deletion) yields an empty result without querying git.
    """
    if is_null_rev(rev_range.tip):
        return DiffResult()

    author, short_commit = vcs.commit_metadata(rev_range.tip)
    changes = vcs.diff_name_status(rev_range)
    for code, path in changes:
        logger.debug("diff %s: %s\t%s", rev_range, code, path)
    return DiffResult(author=author, short_commit=short_commit, changes=tuple(changes))
