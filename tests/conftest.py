from __future__ import annotations

import pytest

from henshell.interface.loader import load_commands
from henshell.interface.shell import ShellContext


@pytest.fixture()
def shell() -> ShellContext:
    """Non-interactive shell with all built-in commands loaded."""
    context = ShellContext(interactive=False)
    load_commands(context.dispatcher)
    yield context
    context.shutdown()


@pytest.fixture()
def connected(shell: ShellContext) -> ShellContext:
    shell.execute_line("connect")
    assert shell.session is not None
    return shell
