"""
Session context loader.

The hook runs inside the environment of the push: sshd sets SSH_CLIENT and
USER, smart-HTTP servers set REMOTE_ADDR and REMOTE_USER, git sets GIT_DIR.
"""

from __future__ import annotations

import os
import time
from collections.abc import Mapping
from pathlib import Path

from .event_types import SessionContext

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _first(env: Mapping[str, str], *keys: str) -> str | None:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _client_ip(env: Mapping[str, str]) -> str | None:
    ssh_client = env.get("SSH_CLIENT", "").split()
    if ssh_client:
        return ssh_client[0]
    return env.get("REMOTE_ADDR") or None


def load_session(env: Mapping[str, str] | None = None, now: float | None = None) -> SessionContext:
    """Read the session context once from the environment.

    Args:
        env: Environment mapping (defaults to os.environ)
        now: Epoch seconds to use as the push time (defaults to time.time())

    Returns:
        A SessionContext with absent fields left as None
    """
    env = os.environ if env is None else env
    stamp = time.strftime(TIME_FORMAT, time.localtime(time.time() if now is None else now))

    git_dir = env.get("GIT_DIR")
    repo_path = str(Path(git_dir).resolve()) if git_dir else None

    return SessionContext(
        time=stamp,
        user=_first(env, "USER", "REMOTE_USER"),
        client_ip=_client_ip(env),
        repo_path=repo_path,
        host=env.get("HOST") or None,
    )
