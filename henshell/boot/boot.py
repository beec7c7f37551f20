#!/usr/bin/env python3
# henshell/boot/boot.py
from __future__ import annotations
"""
Boot sequence for henshell.

Steps:
- Load and validate configuration.
- Initialize the 'henshell' logger (console + optional rotating file).
- Create the shell context and load the command plugins into its dispatcher.
Each step prints a [  OK  ] / [FAILED] line unless booting silently.
"""

import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from henshell.db import AppConfig, load_config
from henshell.interface.loader import load_commands
from henshell.interface.shell import ShellContext
from henshell.ui import colorize, enable_windows_vt, init_logger, print_line


@dataclass(slots=True)
class BootState:
    context: ShellContext
    logger: logging.Logger
    config: AppConfig
    loaded_count: int


def _step(label: str, fn: Callable[[], Any], *, silent: bool = False) -> Any:
    """Run a boot step with status output."""
    try:
        out = fn()
    except Exception as exc:
        print_line(
            colorize(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red")
        )
        raise
    if not silent:
        print_line(colorize(f"[  OK  ] {label}", "green"))
    return out


def boot_sequence(
    *,
    interactive: bool = True,
    silent: bool = False,
    verbose: bool = False,
    cwd: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BootState:
    # ---------- console + env ----------
    _step("Enable ANSI sequences", enable_windows_vt, silent=silent)
    _step(
        f"Detect environment: {platform.system()} {platform.release()} / Python {platform.python_version()}",
        lambda: None,
        silent=silent,
    )

    # ---------- config ----------
    config = _step("Load configuration", lambda: load_config(cwd, environ), silent=silent)

    # ---------- logging ----------
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logger = _step(
        "Initialize logger",
        lambda: init_logger(
            "henshell",
            level=level,
            logfile=str(config.log_file_path) if config.log_file_path else None,
        ),
        silent=silent,
    )

    # ---------- shell ----------
    context = _step(
        "Create shell context",
        lambda: ShellContext(config, interactive=interactive),
        silent=silent,
    )
    context.verbose = verbose
    if silent:
        context.quiet = True

    loaded_count = _step(
        f"Load commands from '{config.plugin_package}'",
        lambda: load_commands(context.dispatcher, config.plugin_package),
        silent=silent,
    )
    _step("Warm command names for completion",
          lambda: list(context.registry.names_from("")), silent=silent)
    _step(f"Boot complete ({loaded_count} commands)", lambda: None, silent=silent)

    return BootState(
        context=context,
        logger=logger,
        config=config,
        loaded_count=loaded_count,
    )
