from __future__ import annotations

from henshell.commands import Command, ExecResult
from henshell.interface.completion import NO_MORE_CANDIDATES, CompletionEngine, readline_completer
from henshell.interface.dispatcher import Dispatcher


class StubCommand(Command):
    def __init__(self, *names: str, candidates=None, participate=True,
                 needs_session=False, error=None) -> None:
        super().__init__()
        self.command_names = names
        self.candidates = candidates
        self.participate = participate
        self.needs_session = needs_session
        self.error = error
        self.requests: list[tuple[str, str]] = []

    def execute(self, session, name, params):
        return ExecResult.SUCCESS

    def participate_in_completion(self):
        return self.participate

    def requires_valid_session(self, name):
        return self.needs_session

    def complete(self, dispatcher, partial_line, last_word):
        self.requests.append((partial_line, last_word))
        if self.error is not None:
            raise self.error
        if self.candidates is None:
            return None
        return (c for c in self.candidates if c.startswith(last_word))


def _engine(*commands: Command, variables=(), session=None) -> CompletionEngine:
    dispatcher = Dispatcher()
    for cmd in commands:
        dispatcher.register(cmd)
    return CompletionEngine(dispatcher, variable_names=lambda: variables,
                            session_provider=lambda: session)


def test_variable_names() -> None:
    engine = _engine(variables=["FOOBAR", "FOO_2", "BAR"])

    assert engine.candidates("$FO", "select $FO") == ["$FOOBAR", "$FOO_2"]
    assert engine.candidates("x$B", "echo x$B") == ["x$BAR"]
    assert engine.candidates("${FOOB", "echo ${FOOB") == ["${FOOBAR}"]


def test_command_names_in_sorted_order() -> None:
    engine = _engine(StubCommand("help"), StubCommand("history"), StubCommand("exit"))

    found: list[str] = []
    assert engine.complete("h", 0, found) == 0
    assert engine.complete("h", 1, found) == 0
    assert engine.complete("h", 2, found) == NO_MORE_CANDIDATES
    assert found == ["help", "history"]


def test_empty_text_hides_non_participating_and_session_commands() -> None:
    engine = _engine(
        StubCommand("", "select", participate=False),
        StubCommand("status", needs_session=True),
        StubCommand("help"),
    )

    assert engine.candidates("") == ["help"]
    # a typed prefix shows everything matching
    assert engine.candidates("s") == ["select", "status"]


def test_session_commands_offered_when_connected() -> None:
    engine = _engine(StubCommand("status", needs_session=True), session=object())

    assert engine.candidates("") == ["status"]


def test_arguments_delegate_to_command() -> None:
    cmd = StubCommand("connect", candidates=["alpha.db", "beta.db"])
    engine = _engine(cmd)

    assert engine.candidates("a", "connect a") == ["alpha.db"]
    assert cmd.requests == [("connect a", "a")]
    assert engine.candidates("", "connect ") == ["alpha.db", "beta.db"]


def test_delegation_failures_yield_nothing() -> None:
    engine = _engine(StubCommand("broken", error=RuntimeError("no")),
                     StubCommand("quiet"))

    assert engine.candidates("x", "broken x") == []
    assert engine.candidates("x", "quiet x") == []
    assert engine.candidates("x", "unknown x") == []


def test_readline_adapter() -> None:
    engine = _engine(StubCommand("help"), StubCommand("history"))
    completer = readline_completer(engine, lambda: "h")

    assert completer("h", 0) == "help"
    assert completer("h", 1) == "history"
    assert completer("h", 2) is None
