"""post-receive command - audit one push."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..config import ConfigError, load_config
from ..diagnostics import configure_diagnostics
from ..emitter import open_emitter
from ..git import GitCli, RevisionControl
from ..hook import run_hook
from ..session import load_session
from ..sinks import SinkOpenError, make_syslog_handler

logger = logging.getLogger("gitseclog")


def run_post_receive(
    config_path: Path | None,
    lines: Iterable[str],
    *,
    env: Mapping[str, str] | None = None,
    vcs: RevisionControl | None = None,
) -> int:
    """
    Load config, open the sinks and audit the ref updates in `lines`.

    Args:
        config_path: YAML config file (missing file means defaults)
        lines: post-receive input lines
        env: Environment of the push (defaults to os.environ)
        vcs: Revision-control collaborator (defaults to git on GIT_DIR)

    Returns:
        Exit code: 0 on completion, 1 on a fatal config or log file error
    """
    env = os.environ if env is None else env
    configure_diagnostics()

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    diag_syslog = None
    if config.syslog:
        try:
            diag_syslog = make_syslog_handler(
                config.facility,
                level=logging.DEBUG if config.debug else logging.INFO,
            )
        except OSError as e:
            logger.warning("syslog unavailable: %s", e)
    configure_diagnostics(debug=config.debug, syslog_handler=diag_syslog)

    try:
        session = load_session(env)
        logger.debug("session %s", session)

        try:
            emitter = open_emitter(config)
        except SinkOpenError as e:
            logger.error("%s", e)
            return 1

        if vcs is None:
            vcs = GitCli(session.repo_path)

        with emitter:
            exit_code = run_hook(lines, session, vcs, emitter)

        logger.debug("exit code = %d", exit_code)
        return exit_code
    finally:
        if diag_syslog is not None:
            logging.getLogger("gitseclog").removeHandler(diag_syslog)
            diag_syslog.close()
