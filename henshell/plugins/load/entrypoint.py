# henshell/plugins/load/entrypoint.py
from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Iterable, List, Optional

from henshell.commands import Command, ExecResult
from henshell.interface.parser import tokenize
from henshell.interface.shell import LineState

log = logging.getLogger(__name__)


def _complete_path(last_word: str) -> Iterable[str]:
    """File names below the directory part of `last_word`."""
    expanded = os.path.expanduser(last_word)
    directory, prefix = os.path.split(expanded)
    try:
        entries = sorted(os.listdir(directory or "."))
    except OSError:
        return
    head = last_word[: len(last_word) - len(prefix)]
    for entry in entries:
        if not entry.startswith(prefix):
            continue
        suffix = os.sep if os.path.isdir(os.path.join(directory or ".", entry)) else ""
        yield head + entry + suffix


class LoadCommand(Command):
    """
    load / start / @ / @@: execute the lines of script files.

    Lines are fed through the same assembler as typed input, but with the
    partial statement of the caller pushed aside and the dispatcher in
    batch mode, so failed statements are echoed. '@@' resolves relative
    to the directory of the script that is currently being loaded.
    """

    command_names = ("load", "start", "@", "@@")
    category = "load"

    def __init__(self) -> None:
        super().__init__()
        self._open_files: List[Path] = []

    def requires_valid_session(self, name: str) -> bool:
        return False

    def _resolve(self, name: str, filename: str) -> Path:
        path = Path(filename).expanduser()
        if name == "@@" and not path.is_absolute() and self._open_files:
            path = self._open_files[-1].parent / path
        return path.resolve()

    def execute(self, session: Any, name: str, params: str) -> ExecResult:
        try:
            files = tokenize(params)
        except ValueError:
            return ExecResult.SYNTAX_ERROR
        if not files:
            return ExecResult.SYNTAX_ERROR

        result = ExecResult.SUCCESS
        for filename in files:
            path = self._resolve(name, filename)
            if self.load_file(path) != ExecResult.SUCCESS:
                result = ExecResult.EXEC_FAILED
        return result

    def load_file(self, path: Path) -> ExecResult:
        if path in self._open_files:
            log.error("recursive inclusion of '%s'; skipped.", path)
            return ExecResult.EXEC_FAILED
        try:
            with path.open("r", encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except OSError as exc:
            log.error("cannot open '%s': %s", path, exc.strerror or exc)
            return ExecResult.EXEC_FAILED

        context = self.context
        dispatcher = context.dispatcher
        started = time.monotonic()
        executed = 0
        self._open_files.append(path)
        context.push_buffer()
        dispatcher.start_batch()
        try:
            for line in lines:
                if context.terminated:
                    break
                if context.execute_line(line) is LineState.EXECUTED:
                    executed += 1
            if context.assembler.buffered_text.strip():
                log.warning("incomplete statement at end of '%s' ignored.", path.name)
        finally:
            dispatcher.end_batch()
            context.pop_buffer()
            self._open_files.pop()

        if not context.quiet:
            log.info("%d statement(s) from '%s' in %.3f sec",
                     executed, path.name, time.monotonic() - started)
        return ExecResult.SUCCESS

    def complete(self, dispatcher, partial_line: str, last_word: str) -> Optional[Iterable[str]]:
        return _complete_path(last_word)

    def short_description(self) -> str:
        return "load file and execute commands"

    def synopsis(self, name: str) -> str:
        return f"{name} <filename> [<filename>..]"

    def long_description(self, name: str) -> str:
        text = ("\tOpen the file(s) and execute the commands line by line;\n"
                "\tfailed statements are echoed.")
        if name == "@@":
            text += "\n\tRelative names are looked up next to the calling script."
        return text


COMMAND = LoadCommand
