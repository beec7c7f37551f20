#!/usr/bin/env python3
# henshell/__main__.py
from __future__ import annotations
"""
Command line entry point: `henshell [-s] [-v] [script ...]`.

Scripts given on the command line are loaded before the interactive loop;
with standard input not being a terminal, lines are read from it instead
of prompting.
"""

import argparse
import shlex
import sys
from typing import Optional, Sequence

from henshell import __version__
from henshell.boot import boot_sequence
from henshell.interface.cli import BaseCLI, make_cli


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="henshell", description="Interactive SQL shell.")
    parser.add_argument("-s", "--silent", action="store_true",
                        help="no boot messages, no statistics")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug output on the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("scripts", nargs="*", metavar="script",
                        help="files to load before reading input")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    interactive = sys.stdin.isatty()
    try:
        state = boot_sequence(interactive=interactive, silent=args.silent or not interactive,
                              verbose=args.verbose)
    except Exception:
        return 1

    context = state.context
    try:
        for script in args.scripts:
            context.dispatcher.execute(context.session, f"load {shlex.quote(script)}")
        if not context.terminated:
            if state.config.enable_completion:
                cli = make_cli(context, state.config.history_file_path)
            else:
                cli = BaseCLI(None if interactive else sys.stdin)
            with cli:
                context.run(cli)
    finally:
        context.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
