# henshell/plugins/connection/entrypoint.py
from __future__ import annotations

import logging
import sqlite3

from henshell.commands import ExecResult, command
from henshell.db import MEMORY_URL, SQLSession

log = logging.getLogger(__name__)


def close_session(context) -> None:
    """Close and forget the current session, if any."""
    session = context.session
    context.session = None
    if session is not None:
        session.close()


# ---------- connect ----------
@command(
    name="connect",
    description="Open a session to a SQLite database file.",
    example="connect ~/data/app.db",
    category="connection",
    pass_context=True,
)
def connect(context, url: str = MEMORY_URL) -> ExecResult:
    try:
        session = SQLSession(url)
    except sqlite3.Error as exc:
        log.error("cannot connect to '%s': %s", url, exc)
        return ExecResult.EXEC_FAILED
    close_session(context)
    context.session = session
    return ExecResult.SUCCESS


# ---------- disconnect ----------
@command(
    name="disconnect",
    description="Close the current session.",
    category="connection",
    needs_session=True,
    pass_context=True,
)
def disconnect(context) -> ExecResult:
    url = context.session.url
    close_session(context)
    log.info("session '%s' closed.", url)
    return ExecResult.SUCCESS


COMMANDS = [connect, disconnect]
