"""Logging setup for the prlabel CLI.

Inside a GitHub Actions job, records are written as workflow commands so they
show up as annotations on the run. Anywhere else rich renders them.
"""

from __future__ import annotations

import logging
import os
import sys

from rich.logging import RichHandler


def _command_for(levelno: int) -> str | None:
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warning"
    if levelno >= logging.INFO:
        return None  # plain output line
    return "debug"


def _escape(data: str) -> str:
    return data.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GitHubActionsHandler(logging.Handler):
    """Writes log records as ``::debug::``/``::warning::``/``::error::`` commands.

    The runner parses workflow commands from stdout, which is looked up on
    every emit rather than captured once.
    """

    def __init__(self, stream=None):
        super().__init__()
        self._stream = stream
        self.setFormatter(logging.Formatter("%(message)s"))

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _command_for(record.levelno)
        if command is None:
            return message
        return f"::{command}::{_escape(message)}"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = self._stream or sys.stdout
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def setup_logging(verbose: bool = False) -> logging.Handler:
    """Attach one handler to the ``prlabel_core``/``prlabel_cli`` loggers.

    Debug records are always emitted under Actions: the runner hides
    ``::debug::`` lines unless step debugging is turned on.
    """
    if in_github_actions():
        handler: logging.Handler = GitHubActionsHandler()
        level = logging.DEBUG
    else:
        handler = RichHandler(show_path=False, markup=False)
        level = logging.DEBUG if verbose else logging.INFO

    for name in ("prlabel_core", "prlabel_cli"):
        log = logging.getLogger(name)
        log.handlers = [handler]
        log.setLevel(level)
        log.propagate = False
    return handler
