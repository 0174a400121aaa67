"""
Diagnostic output for the hook.

Messages go to stderr through rich and, when syslog is enabled, to syslog
at their own severity. Debug tracing is opt-in.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "gitseclog"


def configure_diagnostics(
    debug: bool = False,
    syslog_handler: logging.Handler | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """(Re)configure the `gitseclog` logger.

    Replaces any handlers installed by a previous call, so it can be called
    once before the config is loaded and again after.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler is not syslog_handler:
            handler.close()

    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    stderr_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    logger.addHandler(stderr_handler)

    if syslog_handler is not None:
        logger.addHandler(syslog_handler)

    return logger
