"""Logging setup for the CLI.

Gerrit runs hooks detached from any terminal, so the operator-facing record
of a dispatch is syslog. The rich handler on stderr is for interactive runs
and for Gerrit's own hook log, which captures stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
import os

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

SYSLOG_FORMAT = "solanohook[%(process)d]: %(levelname)s %(name)s: %(message)s"


def configure_logging(syslog: bool = True, syslog_address: str = "/dev/log", verbose: bool = False) -> None:
    """Install stderr (and optionally syslog) handlers on the root logger.

    Safe to call more than once: handlers from a previous call are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_solanohook", False):
            root.removeHandler(handler)
            handler.close()

    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)

    console_handler = RichHandler(console=Console(stderr=True), show_path=False)
    console_handler._solanohook = True
    root.addHandler(console_handler)

    if not syslog:
        return
    if not os.path.exists(syslog_address):
        logger.warning("Syslog socket %s not found; logging to stderr only.", syslog_address)
        return
    syslog_handler = logging.handlers.SysLogHandler(address=syslog_address)
    syslog_handler.setFormatter(logging.Formatter(SYSLOG_FORMAT))
    syslog_handler._solanohook = True
    root.addHandler(syslog_handler)
