#!/usr/bin/env python3
# henshell/interface/assembler.py
from __future__ import annotations

"""
Statement assembly.

Raw input is appended line by line; the assembler proposes a statement
candidate at every semicolon or newline found outside of quotes and
comments. The candidate keeps its delimiter at the end. Whether the
delimiter really ends the statement is decided by the command that
handles it:

    assembler.append(line + "\\n")
    while assembler.has_next():
        text = assembler.next()
        if command.is_complete(text):
            ...execute...
            assembler.consumed()
        else:
            assembler.cont()

Contexts can be stacked with push()/pop() so that a command reading a
script does not disturb a partially typed statement.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

log = logging.getLogger(__name__)

DELIMITERS = ";\n"


class ScanState(Enum):
    NEW_STATEMENT = auto()
    STATEMENT = auto()
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()


_QUOTE_CLOSERS = {
    ScanState.SINGLE_QUOTE: "'",
    ScanState.DOUBLE_QUOTE: '"',
}


@dataclass
class _AssemblyState:
    """One frame of buffered, partially scanned input."""
    buffer: str = ""
    pos: int = 0
    statement: List[str] = field(default_factory=list)
    state: ScanState = ScanState.NEW_STATEMENT
    candidate: Optional[str] = None
    has_content: bool = False

    def remaining(self) -> str:
        return self.buffer[self.pos:]


class StatementAssembler:
    """Turns appended raw text into delimiter-terminated statement candidates."""

    def __init__(self, *, remove_comments: bool = False) -> None:
        self.remove_comments = remove_comments
        self._current = _AssemblyState()
        self._stack: List[_AssemblyState] = []

    # ---------------- Input ----------------

    def append(self, text: str) -> None:
        self._current.buffer += text

    def has_next(self) -> bool:
        current = self._current
        if current.candidate is None:
            self._scan(current)
        return current.candidate is not None

    def next(self) -> str:
        """Return the pending candidate; call consumed() or cont() afterwards."""
        if not self.has_next():
            raise LookupError("no complete statement available")
        return self._current.candidate  # type: ignore[return-value]

    def consumed(self) -> None:
        """The candidate has been executed; drop it for good."""
        current = self._current
        current.candidate = None
        current.statement = []
        current.has_content = False
        current.state = ScanState.NEW_STATEMENT
        current.buffer = current.remaining()
        current.pos = 0

    def cont(self) -> None:
        """The candidate is incomplete; its delimiter becomes plain content."""
        current = self._current
        if current.candidate is not None:
            current.candidate = None
            current.state = ScanState.STATEMENT

    def discard(self) -> None:
        """Drop everything not yet consumed in the current context."""
        self._current = _AssemblyState()

    # ---------------- Contexts ----------------

    def push(self) -> None:
        self._stack.append(self._current)
        self._current = _AssemblyState()

    def pop(self) -> None:
        if not self._stack:
            raise RuntimeError("pop() without matching push()")
        if self._current.statement or self._current.remaining().strip():
            log.debug("dropping unterminated input: %r", self.buffered_text)
        self._current = self._stack.pop()

    @property
    def depth(self) -> int:
        """Number of enclosing contexts below the current one."""
        return len(self._stack)

    @property
    def buffered_text(self) -> str:
        """Statement text gathered so far plus the unscanned rest."""
        current = self._current
        return "".join(current.statement) + current.remaining()

    @property
    def scan_state(self) -> ScanState:
        return self._current.state

    # ---------------- Scanner ----------------

    def _keep(self, current: _AssemblyState, text: str, *, comment: bool = False) -> None:
        if comment and self.remove_comments:
            return
        if not comment and text.strip(" \t\r\n\f;"):
            current.has_content = True
        current.statement.append(text)

    def _scan(self, current: _AssemblyState) -> None:
        buffer = current.buffer
        length = len(buffer)

        while current.pos < length:
            pos = current.pos
            char = buffer[pos]
            # two-character tokens need the lookahead to have arrived
            pair = buffer[pos:pos + 2]
            state = current.state

            if state is ScanState.NEW_STATEMENT:
                if char.isspace():
                    current.pos += 1
                    continue
                current.state = ScanState.STATEMENT
                continue

            if state is ScanState.STATEMENT:
                if char in "-/" and pos + 1 == length:
                    return
                if pair == "--":
                    current.state = ScanState.LINE_COMMENT
                    self._keep(current, pair, comment=True)
                    current.pos += 2
                elif pair == "/*":
                    current.state = ScanState.BLOCK_COMMENT
                    self._keep(current, pair, comment=True)
                    current.pos += 2
                elif char == "'":
                    current.state = ScanState.SINGLE_QUOTE
                    self._keep(current, char)
                    current.pos += 1
                elif char == '"':
                    current.state = ScanState.DOUBLE_QUOTE
                    self._keep(current, char)
                    current.pos += 1
                elif char in DELIMITERS:
                    self._keep(current, char)
                    current.pos += 1
                    if self._propose(current):
                        return
                else:
                    self._keep(current, char)
                    current.pos += 1

            elif state in _QUOTE_CLOSERS:
                self._keep(current, char)
                current.pos += 1
                if char == _QUOTE_CLOSERS[state]:
                    current.state = ScanState.STATEMENT

            elif state is ScanState.LINE_COMMENT:
                if char == "\n":
                    # the newline itself is handled as a delimiter
                    current.state = ScanState.STATEMENT
                else:
                    self._keep(current, char, comment=True)
                    current.pos += 1

            elif state is ScanState.BLOCK_COMMENT:
                if char == "*" and pos + 1 == length:
                    return
                if pair == "*/":
                    current.pos += 2
                    current.state = ScanState.STATEMENT
                    if self.remove_comments:
                        current.statement.append(" ")
                    else:
                        current.statement.append(pair)
                else:
                    self._keep(current, char, comment=True)
                    current.pos += 1

    def _propose(self, current: _AssemblyState) -> bool:
        """Turn the statement into a candidate unless it holds only comments or blanks."""
        if not current.has_content:
            current.statement = []
            current.state = ScanState.NEW_STATEMENT
            return False
        current.candidate = "".join(current.statement)
        return True
