#!/usr/bin/env python3
# henshell/db/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low -> high):
  1) Built-in defaults
  2) Files in CWD: .env, config.ini, config.json, config.toml
  3) Environment variables prefixed with HENSHELL_ (HENSHELL_PROMPT, ...)

Validation:
  - PROMPT: None or str
  - PLUGIN_PACKAGE: dotted module path
  - HISTORY_FILE_PATH / LOG_FILE_PATH: None or normalized path
  - LOG_LEVEL: one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - REMOVE_COMMENTS / ENABLE_COMPLETION / QUIET: bool
"""

import configparser
import json
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

ENV_PREFIX = "HENSHELL_"

# ---------- defaults ----------

DEFAULTS: dict[str, Any] = {
    "PROMPT": None,
    "PLUGIN_PACKAGE": "henshell.plugins",
    "HISTORY_FILE_PATH": str(Path.home() / ".henshell_history"),
    "LOG_FILE_PATH": None,
    "LOG_LEVEL": "INFO",
    "REMOVE_COMMENTS": True,
    "ENABLE_COMPLETION": True,
    "QUIET": False,
}


# ---------- data model ----------

@dataclass(frozen=True)
class AppConfig:
    prompt: str | None = None
    plugin_package: str = "henshell.plugins"
    history_file_path: Path | None = None
    log_file_path: Path | None = None
    log_level: str = "INFO"
    remove_comments: bool = True
    enable_completion: bool = True
    quiet: bool = False

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if len(v) >= 2 and v[0] == v[-1] and v[0] in "'\"":
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    # read() skips missing files
    cfg.read(path, encoding="utf-8")
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'log': {'level': 'DEBUG'}} -> {'LOG_LEVEL': 'DEBUG'}
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str:
    up = (_as_opt_str(val) or "INFO").upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {val!r}")
    return up


def _as_opt_path(val: Any) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    return Path(os.path.expandvars(os.path.expanduser(v))).resolve()


def _as_package(val: Any) -> str:
    s = _as_opt_str(val)
    if s is None or not re.fullmatch(r"[A-Za-z_][\w]*(\.[A-Za-z_][\w]*)*", s):
        raise ValueError(f"PLUGIN_PACKAGE must be a dotted module path, got {val!r}")
    return s


# ---------- merge & load ----------

def _merge_sources(cwd: Path | None = None, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    base = cwd or Path.cwd()
    merged: dict[str, Any] = dict(DEFAULTS)

    merged.update(_normalize_keys(_load_env_file(base / ".env")))
    merged.update(_normalize_keys(_load_ini_file(base / "config.ini")))
    merged.update(_normalize_keys(_flatten_mapping(_load_json_file(base / "config.json"))))
    merged.update(_normalize_keys(_flatten_mapping(_load_toml_file(base / "config.toml"))))

    # Environment variables override all
    env = os.environ if environ is None else environ
    merged.update({k[len(ENV_PREFIX):]: v for k, v in env.items()
                   if k.startswith(ENV_PREFIX)})
    return merged


def _validate_and_build(config: dict[str, Any]) -> AppConfig:
    recognized = set(DEFAULTS.keys())
    return AppConfig(
        prompt=_as_opt_str(config.get("PROMPT")),
        plugin_package=_as_package(config.get("PLUGIN_PACKAGE", DEFAULTS["PLUGIN_PACKAGE"])),
        history_file_path=_as_opt_path(config.get("HISTORY_FILE_PATH")),
        log_file_path=_as_opt_path(config.get("LOG_FILE_PATH")),
        log_level=_as_log_level(config.get("LOG_LEVEL")),
        remove_comments=_as_bool(config.get("REMOVE_COMMENTS", DEFAULTS["REMOVE_COMMENTS"])),
        enable_completion=_as_bool(config.get("ENABLE_COMPLETION", DEFAULTS["ENABLE_COMPLETION"])),
        quiet=_as_bool(config.get("QUIET", DEFAULTS["QUIET"])),
        extra={k: v for k, v in config.items() if k not in recognized},
    )


# ---------- public API ----------

def load_config(cwd: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Load, merge, normalize, and validate configuration.
    Raises ValueError on invalid values; no filesystem side-effects.
    """
    return _validate_and_build(_merge_sources(cwd, environ))
