#!/usr/bin/env python3
# henshell/interface/cli.py
from __future__ import annotations

"""
Interactive input frontends.

Selection order:
    1) prompt_toolkit (rich completion + history)
    2) readline (basic completion + history)
    3) plain input (last resort, also used when stdin is not a terminal)
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from henshell.interface.parser import split_current_token

if TYPE_CHECKING:  # pragma: no cover
    from henshell.interface.shell import ShellContext

# History location in the user home directory
HISTORY_FILE_PATH = Path.home() / ".henshell_history"


class BaseCLI:
    """
    Base interface for CLI frontends; reads plain lines from a stream.

    Subclasses may implement:
        - setup()
        - get_line(prompt)
        - teardown()

    This base also provides context manager support to guarantee teardown.
    get_line() raises EOFError at end of input and KeyboardInterrupt on ^C.
    """

    def __init__(self, stream=None) -> None:
        self._stream = stream

    def setup(self) -> None:
        pass

    def get_line(self, prompt: str = "") -> str:
        if self._stream is None:
            return input(prompt)
        line = self._stream.readline()
        if not line:
            raise EOFError("EOF")
        return line.rstrip("\r\n")

    def teardown(self) -> None:
        pass

    # Context manager helpers
    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Preferred: prompt_toolkit =====
class PromptToolkitCLI(BaseCLI):
    """Rich line editor with history and completion."""

    def __init__(self, context: "ShellContext", history_path: Path = HISTORY_FILE_PATH) -> None:
        super().__init__()
        from prompt_toolkit import PromptSession
        from prompt_toolkit.history import FileHistory

        self._history_path = history_path
        history_path.parent.mkdir(parents=True, exist_ok=True)
        history_path.touch(exist_ok=True)
        self._session = PromptSession(
            history=FileHistory(str(history_path)),
            completer=make_completer(context),
            complete_while_typing=False,
        )

    def get_line(self, prompt: str = "") -> str:
        return self._session.prompt(prompt)


def make_completer(context: "ShellContext"):
    """prompt_toolkit Completer driving the shell's completion engine."""
    from prompt_toolkit.completion import Completer, Completion

    class ShellCompleter(Completer):
        def get_completions(self, document, complete_event) -> Iterable[Completion]:
            text_before_cursor = document.text_before_cursor
            _, current_prefix = split_current_token(text_before_cursor)
            line = context.partial_line(text_before_cursor)
            # replace exactly the current token
            for word in context.completion.start(current_prefix, line):
                yield Completion(word, start_position=-len(current_prefix))

    return ShellCompleter()


# ===== Fallback: readline =====
class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion and history."""

    def __init__(self, context: "ShellContext", history_path: Path = HISTORY_FILE_PATH) -> None:
        super().__init__()
        import readline

        self.readline = readline
        self._context = context
        self._history_path = history_path

    def setup(self) -> None:
        from henshell.interface.completion import readline_completer

        self._history_path.parent.mkdir(parents=True, exist_ok=True)
        self._history_path.touch(exist_ok=True)
        try:
            self.readline.read_history_file(str(self._history_path))
        except OSError:
            pass

        self.readline.set_completer_delims(" \t\n,()<>=")

        def _line() -> str:
            buffer_text = self.readline.get_line_buffer()
            return self._context.partial_line(buffer_text[:self.readline.get_endidx()])

        self.readline.set_completer(readline_completer(self._context.completion, _line))
        self.readline.parse_and_bind("tab: complete")

    def get_line(self, prompt: str = "") -> str:
        return input(prompt)

    def teardown(self) -> None:
        try:
            self.readline.write_history_file(str(self._history_path))
        except OSError:
            pass


def make_cli(context: "ShellContext", history_path: Optional[Path] = None) -> BaseCLI:
    """
    Factory to select the best available CLI frontend at runtime.
    """
    history_path = history_path or HISTORY_FILE_PATH
    if not sys.stdin.isatty():
        return BaseCLI(sys.stdin)
    try:
        return PromptToolkitCLI(context, history_path)
    except ImportError:
        try:
            return ReadlineCLI(context, history_path)
        except ImportError:
            # Last resort: plain input with no completion or history
            return BaseCLI()
