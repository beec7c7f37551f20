#!/usr/bin/env python3
# henshell/db/session.py
from __future__ import annotations
"""
SQLite session used by the shell.

A session wraps one connection; the shell holds at most one current session
and hands it to every dispatched command.
"""

import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

MEMORY_URL = ":memory:"


class SQLSession:
    """One open database connection plus some bookkeeping."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.connect_time = time.time()
        self.statement_count = 0
        target = url if url == MEMORY_URL else str(Path(url).expanduser())
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(target)
        # explicit commit/rollback commands
        self._conn.isolation_level = "DEFERRED"
        log.info("connected to '%s' (SQLite %s)", url, sqlite3.sqlite_version)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("session is closed")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    @property
    def database_info(self) -> str:
        return f"SQLite {sqlite3.sqlite_version}"

    def uptime(self) -> float:
        return time.time() - self.connect_time

    def execute(self, sql: str, params: Sequence[Any] = ()) -> Tuple[List[str], List[tuple], int]:
        """
        Run one statement; returns (column names, rows, affected row count).
        Rows are empty for statements without a result set.
        """
        cursor = self.connection.execute(sql, params)
        try:
            self.statement_count += 1
            if cursor.description is None:
                return [], [], cursor.rowcount
            columns = [col[0] for col in cursor.description]
            return columns, cursor.fetchall(), cursor.rowcount
        finally:
            cursor.close()

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def table_names(self) -> List[str]:
        rows = self.connection.execute(
            "SELECT name FROM sqlite_master WHERE type IN ('table', 'view') ORDER BY name"
        ).fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            log.debug("closed session '%s'", self.url)
