"""
Classification rules — what counts as noise in the uninstall registry.

Each rule is a named predicate in a table so it can be audited and tested on
its own. The ingesters only ask two questions: "is this entry hidden or an
uninstall command?" and "is this path an executable we can launch?".

    entry_rejection(entry)             → reason string or None
    is_executable_candidate(path)      → bool
    uninstaller_rejection(path, args)  → reason string or None
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Callable, Optional, Sequence, Tuple

from .models import RawUninstallEntry

# ─────────────────────────────────────────────────────────────────────────────
#  Markers
# ─────────────────────────────────────────────────────────────────────────────

# Extensions (no dot, lower case) accepted as a launch path.
EXECUTABLE_EXTENSIONS = frozenset({"exe", "lnk", "bat", "cmd"})

# Substrings of UninstallString that mark the whole key as noise.
UNINSTALL_STRING_MARKERS: Tuple[str, ...] = (
    "msiexec", "uninstall", "/x", "--remove", "--uninstall",
)

# Substrings of a launch path that identify an uninstaller.
UNINSTALLER_PATH_MARKERS: Tuple[str, ...] = (
    "msiexec.exe", "uninstall", "\\uninst", "appwiz.cpl",
)

# Substrings of a launch path's file stem that identify an uninstaller.
UNINSTALLER_STEM_MARKERS: Tuple[str, ...] = ("uninstall", "unins", "remove")

# Substrings of argument text that identify an uninstall invocation.
UNINSTALLER_ARG_MARKERS: Tuple[str, ...] = (
    "/x", "/uninstall", "--uninstall", "uninstall",
)


def _contains_any(text: Optional[str], markers: Sequence[str]) -> bool:
    if not text:
        return False
    lower = text.lower()
    return any(marker in lower for marker in markers)


# ─────────────────────────────────────────────────────────────────────────────
#  Entry rules: checked in table order, first match wins
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EntryRule:
    name: str
    reason: str
    matches: Callable[[RawUninstallEntry], bool]


ENTRY_RULES: Tuple[EntryRule, ...] = (
    EntryRule(
        "blank_display_name", "missing DisplayName",
        lambda e: not (e.display_name or "").strip(),
    ),
    EntryRule(
        "system_component", "system component hidden",
        lambda e: e.system_component == 1,
    ),
    EntryRule(
        "no_display", "entry hidden from display",
        lambda e: e.no_display == 1,
    ),
    EntryRule(
        "no_display_icon", "entry hides icon",
        lambda e: e.no_display_icon == 1,
    ),
    EntryRule(
        "uninstall_string", "registry entry is uninstall command",
        lambda e: _contains_any(e.uninstall_string, UNINSTALL_STRING_MARKERS),
    ),
)


def entry_rejection(entry: RawUninstallEntry) -> Optional[str]:
    """Reason the entry is noise, or None when it may be listed."""
    for rule in ENTRY_RULES:
        if rule.matches(entry):
            return rule.reason
    return None


# ─────────────────────────────────────────────────────────────────────────────
#  Path rules
# ─────────────────────────────────────────────────────────────────────────────

def is_executable_candidate(path: Optional[str]) -> bool:
    if not path:
        return False
    suffix = PureWindowsPath(path).suffix
    return suffix[1:].lower() in EXECUTABLE_EXTENSIONS


def uninstaller_rejection(path: str, arguments: Optional[str] = None,
                          raw_path: Optional[str] = None) -> Optional[str]:
    """
    Reason the target looks like an uninstaller, or None.

    ``raw_path`` is the same path before slash normalization; the
    ``\\uninst`` marker can only match there.
    """
    if _contains_any(path, UNINSTALLER_PATH_MARKERS) or \
            _contains_any(raw_path, UNINSTALLER_PATH_MARKERS):
        return "target is an uninstaller"

    stem = PureWindowsPath(path).stem
    if _contains_any(stem, UNINSTALLER_STEM_MARKERS):
        return "target name looks like an uninstaller"

    if _contains_any(arguments, UNINSTALLER_ARG_MARKERS):
        return "arguments invoke an uninstall"

    return None
