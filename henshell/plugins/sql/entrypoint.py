# henshell/plugins/sql/entrypoint.py
from __future__ import annotations

import logging
import re
import sqlite3
import time
from typing import Any, Iterable, Optional

from henshell.commands import Command, ExecResult
from henshell.ui import print_line, print_table

log = logging.getLogger(__name__)

# words after which a table name is expected
_TABLE_KEYWORDS = {"from", "join", "into", "update", "table", "exists"}

_TRIGGER = re.compile(r"^\s*create\s+(temp\s+|temporary\s+)?trigger\b", re.IGNORECASE)
_TRIGGER_END = re.compile(r"\bend\s*;\s*$", re.IGNORECASE)


class SQLCommand(Command):
    """
    Everything that is not a shell command goes to the database.

    Bound to the well known statement keywords and to the "" wildcard, so
    any unclaimed input ends up here. A statement is complete when it ends
    with ';' or a line holding only '/'; commit and rollback complete on
    newline.
    """

    command_names = (
        "",
        "select", "insert", "update", "delete", "replace", "with",
        "create", "drop", "alter", "pragma", "explain", "analyze", "vacuum",
        "begin", "commit", "rollback",
    )
    category = "sql"

    def participate_in_completion(self) -> bool:
        return False

    def requires_valid_session(self, name: str) -> bool:
        return True

    # ---------- statement boundaries ----------

    def is_complete(self, text: str) -> bool:
        stripped = text.strip()
        if not stripped:
            return True
        if stripped.lower() in ("commit", "rollback", "commit;", "rollback;"):
            return True
        if stripped.splitlines()[-1].strip() == "/":
            return True
        if not stripped.endswith(";"):
            return False
        if _TRIGGER.match(stripped):
            # statements inside the trigger body end with ';' as well
            return bool(_TRIGGER_END.search(stripped))
        return True

    @staticmethod
    def statement_text(name: str, params: str) -> str:
        statement = (name + params).strip()
        lines = statement.splitlines()
        if lines and lines[-1].strip() == "/":
            statement = "\n".join(lines[:-1]).strip()
        return statement.rstrip(";").strip()

    # ---------- execution ----------

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        statement = self.statement_text(name, params)
        if not statement:
            return ExecResult.SUCCESS

        lowered = statement.lower()
        started = time.monotonic()
        try:
            if lowered == "commit":
                session.commit()
                self._report("commit complete.")
                return ExecResult.SUCCESS
            if lowered == "rollback":
                session.rollback()
                self._report("rollback complete.")
                return ExecResult.SUCCESS
            columns, rows, rowcount = session.execute(statement)
        except sqlite3.Error as exc:
            log.error("%s", exc)
            return ExecResult.EXEC_FAILED
        elapsed = time.monotonic() - started

        if columns:
            print_table(rows, headers=columns)
            self._report(f"{len(rows)} row(s) in result ({elapsed:.3f} sec)")
        elif rowcount >= 0:
            self._report(f"affected {rowcount} row(s) ({elapsed:.3f} sec)")
        else:
            self._report(f"ok. ({elapsed:.3f} sec)")
        return ExecResult.SUCCESS

    def _report(self, text: str) -> None:
        if self.context is None or not self.context.quiet:
            print_line(text)

    # ---------- completion ----------

    def complete(self, dispatcher, partial_line: str, last_word: str) -> Optional[Iterable[str]]:
        session = self.context.session if self.context is not None else None
        if session is None:
            return None
        words = partial_line.split()
        if last_word and words:
            words = words[:-1]
        if not words or words[-1].lower() not in _TABLE_KEYWORDS:
            return None
        lowered = last_word.lower()
        return (table for table in session.table_names() if table.lower().startswith(lowered))

    def short_description(self) -> str:
        return "execute SQL statements"

    def synopsis(self, name: str) -> Optional[str]:
        if name in ("commit", "rollback"):
            return name
        return None

    def long_description(self, name: str) -> str:
        return ("\tAny statement the database understands; terminate it with ';'\n"
                "\tor with a line that only contains '/'.")


COMMAND = SQLCommand
