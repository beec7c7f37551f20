#!/usr/bin/env python3
# henshell/interface/completion.py
from __future__ import annotations

"""
Command line completion.

Three domains, picked by looking at the line typed so far:
- `$NAME` / `${NAME` at the cursor: user variable names.
- first word of the line: registered command names.
- anything else: delegated to the command the line resolves to.

`CompletionEngine.start()` yields the candidates of one completion session
lazily; `complete()` wraps it in the readline-style (text, state) protocol.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, List, Optional

from henshell.interface.variables import is_identifier_part

if TYPE_CHECKING:  # pragma: no cover
    from henshell.interface.dispatcher import Dispatcher

log = logging.getLogger(__name__)

NO_MORE_CANDIDATES = -1


def _variable_start(text: str) -> int:
    """Index of the '$' (or '${') that the word at the end of `text` starts with, or -1."""
    pos = len(text) - 1
    while pos > 0 and text[pos] != "$" and is_identifier_part(text[pos]):
        pos -= 1
    if pos >= 0 and text[pos] == "$":
        return pos
    if pos >= 1 and text[pos - 1] == "$" and text[pos] == "{":
        return pos - 1
    return -1


class CompletionEngine:
    """Incremental, resumable completion candidates for the dispatcher."""

    def __init__(
        self,
        dispatcher: "Dispatcher",
        *,
        variable_names: Optional[Callable[[], Iterable[str]]] = None,
        session_provider: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self._variable_names = variable_names or (lambda: ())
        self._session_provider = session_provider or (lambda: None)
        self._possible_values: Iterator[str] = iter(())

    # ---------------------------------------------------------------------------
    # Candidate sequences
    # ---------------------------------------------------------------------------

    def start(self, text: str, line: Optional[str] = None) -> Iterator[str]:
        """Begin a completion session for word `text` on the partial `line`."""
        line = text if line is None else line
        var_pos = _variable_start(text)
        if var_pos >= 0:
            return self._complete_variable(text[:var_pos], text[var_pos:])
        if line.strip() == text:
            return self._complete_command_name(text)
        return self._complete_for_command(line, text)

    def _complete_variable(self, prefix: str, token: str) -> Iterator[str]:
        braced = token.startswith("${")
        partial = token[2:] if braced else token[1:]
        for name in sorted(self._variable_names()):
            if name.startswith(partial):
                yield f"{prefix}${{{name}}}" if braced else f"{prefix}${name}"

    def _complete_command_name(self, text: str) -> Iterator[str]:
        text = text.lower()
        registry = self.dispatcher.registry
        for name in registry.names_from(text):
            if not name:
                continue
            if not name.lower().startswith(text):
                # sorted: nothing further can match
                return
            if not text:
                command_obj = registry.get(name)
                if command_obj is None or not command_obj.participate_in_completion():
                    continue
                if command_obj.requires_valid_session(name) and self._session_provider() is None:
                    continue
            yield name

    def _complete_for_command(self, line: str, text: str) -> Iterator[str]:
        command_obj = self.dispatcher.get_command_from(line.strip())
        if command_obj is None:
            return iter(())
        try:
            candidates = command_obj.complete(self.dispatcher, line, text)
        except Exception:
            log.debug("completion of %r failed", line, exc_info=True)
            return iter(())
        return iter(candidates) if candidates is not None else iter(())

    # ---------------------------------------------------------------------------
    # (text, state) protocol
    # ---------------------------------------------------------------------------

    def complete(self, text: str, state: int, candidates: List[str],
                 line: Optional[str] = None) -> int:
        """
        Append the next candidate to `candidates`.

        state == 0 starts a new session, state > 0 resumes it. Returns 0 when
        a candidate was added, NO_MORE_CANDIDATES otherwise.
        """
        if state == 0:
            self._possible_values = self.start(text, line)
        for candidate in self._possible_values:
            candidates.append(candidate)
            return 0
        return NO_MORE_CANDIDATES

    def candidates(self, text: str, line: Optional[str] = None) -> list[str]:
        """All candidates of one session, in order."""
        return list(self.start(text, line))


def readline_completer(engine: CompletionEngine,
                       line_provider: Callable[[], str]) -> Callable[[str, int], Optional[str]]:
    """Adapt the engine to readline's set_completer() callback."""

    def _complete(text_fragment: str, state_index: int) -> Optional[str]:
        found: List[str] = []
        if engine.complete(text_fragment, state_index, found, line_provider()) == NO_MORE_CANDIDATES:
            return None
        return found[0]

    return _complete
