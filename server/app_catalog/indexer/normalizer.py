"""
Path-string canonicalization and %VAR% expansion.

Every path that reaches an AppRecord goes through normalize_path, so the
catalog only ever holds forward-slash paths. None of these helpers touch the
filesystem.
"""

from __future__ import annotations

import os
from pathlib import PureWindowsPath
from typing import Mapping, Optional, Union

PathLike = Union[str, "os.PathLike[str]"]


def normalize_path(path: PathLike) -> str:
    """Replace every backslash with a forward slash."""
    return os.fspath(path).replace("\\", "/")


def expand_env_vars(value: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Expand %NAME% tokens left to right.

    Known names are replaced by their value, unknown ones are emitted as
    ``%NAME%``. ``%%`` yields a single ``%``. A token left open at the end of
    the input yields ``%`` plus the collected name, without a closing ``%``.

    Without ``environ`` names are looked up in ``os.environ`` directly, which
    ignores case on Windows (``%SystemRoot%`` finds ``SYSTEMROOT``).
    """
    env = os.environ if environ is None else environ
    out = []
    i = 0
    length = len(value)

    while i < length:
        ch = value[i]
        i += 1
        if ch != "%":
            out.append(ch)
            continue

        close = value.find("%", i)
        if close == -1:
            name = value[i:]
            i = length
        else:
            name = value[i:close]
            i = close + 1

        if not name:
            out.append("%")
        elif close == -1:
            out.append("%" + name)
        elif name in env:
            out.append(env[name])
        else:
            out.append("%" + name + "%")

    return "".join(out)


def clean_path_candidate(value: Optional[str],
                         environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Reduce an icon-location style value to its primary path.

    ``"C:\\App\\app.exe",0`` → ``C:\\App\\app.exe``. Quotes and whitespace are
    trimmed, everything from the first comma on is dropped, and the result is
    env-expanded. Returns None when nothing is left.
    """
    if value is None:
        return None
    trimmed = value.strip().strip('"')
    if not trimmed:
        return None
    primary = trimmed.split(",", 1)[0].strip().strip('"').strip()
    if not primary:
        return None
    return expand_env_vars(primary, environ)


def parent_dir(path: PathLike) -> Optional[str]:
    """Normalized parent directory, or None when the path has no directory part."""
    pure = PureWindowsPath(normalize_path(path))
    parent = pure.parent
    if parent == pure or str(parent) == ".":
        return None
    return normalize_path(str(parent))


def is_absolute(path: str) -> bool:
    return PureWindowsPath(path).is_absolute() or os.path.isabs(path)


def resolve_relative_path(base_file: PathLike, candidate: str,
                          environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve ``candidate`` against the directory holding ``base_file``.

    The candidate is env-expanded first; absolute results are kept as they are.
    """
    expanded = expand_env_vars(candidate, environ)
    if is_absolute(expanded):
        return normalize_path(expanded)
    base_dir = parent_dir(base_file)
    if base_dir is None:
        return normalize_path(expanded)
    return normalize_path(base_dir.rstrip("/") + "/" + normalize_path(expanded))
