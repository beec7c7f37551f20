#!/usr/bin/env python3
# henshell/interface/loader.py
from __future__ import annotations

"""
Dynamic command loader.

Features:
- Imports all modules under a given package (default: 'henshell.plugins').
- Supports 'entrypoint.py' inside a subpackage exporting COMMAND/COMMANDS.
- Derives categories from the subpackage name if not explicitly set.
- Registers everything into the given dispatcher (no global registry).
"""

import copy
import importlib
import logging
import pkgutil
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Iterable

from henshell.commands import Command

if TYPE_CHECKING:  # pragma: no cover
    from henshell.interface.dispatcher import Dispatcher

log = logging.getLogger(__name__)

DEFAULT_PLUGIN_PACKAGE = "henshell.plugins"


def _is_command(obj: object) -> bool:
    return isinstance(obj, Command) or (isinstance(obj, type) and issubclass(obj, Command))


def _instantiate(obj: Command | type) -> Command:
    """Fresh instance per shell: classes are called, instances copied."""
    return obj() if isinstance(obj, type) else copy.copy(obj)


def _exported_commands(module: ModuleType) -> list[Command]:
    """COMMAND/COMMANDS exported by an entry module, if present."""
    exported: list[object] = []
    if hasattr(module, "COMMAND"):
        exported.append(getattr(module, "COMMAND"))
    objs = getattr(module, "COMMANDS", None)
    if isinstance(objs, Iterable):
        exported.extend(objs)
    return [_instantiate(obj) for obj in exported if _is_command(obj)]  # type: ignore[arg-type]


def load_commands(dispatcher: "Dispatcher", commands_package: str = DEFAULT_PLUGIN_PACKAGE) -> int:
    """
    Import all modules under the given package and register their commands.

    Supported layouts:
      1) Plain modules: plugins/foo.py -> import plugins.foo
      2) Packages with an entrypoint: plugins/bar/entrypoint.py
         -> import plugins.bar.entrypoint

    Returns the number of registered commands. A name collision raises
    CommandConfigurationError.
    """
    package = importlib.import_module(commands_package)
    package_paths = [str(p) for p in getattr(package, "__path__", [])]

    if not package_paths:
        raise RuntimeError(
            f"'{commands_package}' must be a package (folder) with modules.")

    registered_count = 0
    for base_path in package_paths:
        for modinfo in sorted(pkgutil.iter_modules([base_path]), key=lambda m: m.name):
            module_name = modinfo.name
            if module_name.startswith("_"):
                # Ignore private modules
                continue

            category = None
            if modinfo.ispkg:
                category = module_name
                if (Path(base_path) / module_name / "entrypoint.py").exists():
                    module_name = f"{module_name}.entrypoint"

            module = importlib.import_module(f"{commands_package}.{module_name}")
            for command_obj in _exported_commands(module):
                if category and getattr(command_obj, "category", None) == "general":
                    command_obj.category = category  # type: ignore[attr-defined]
                dispatcher.register(command_obj)
                registered_count += 1

    log.debug("loaded %d commands from %s", registered_count, commands_package)
    return registered_count


def category_description(commands_package: str, category: str) -> str:
    """
    Category description is taken from:
      1) <package>.<category>.CATEGORY_DESCRIPTION (string), or
      2) <package>.<category> module docstring, else "".
    """
    try:
        module = importlib.import_module(f"{commands_package}.{category}")
    except ImportError:
        return ""
    value = getattr(module, "CATEGORY_DESCRIPTION", None)
    if isinstance(value, str):
        return value.strip()
    return (module.__doc__ or "").strip()
