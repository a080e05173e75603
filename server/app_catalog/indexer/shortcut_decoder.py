"""
Turns one .lnk file into ShortcutMetadata.

The scan only depends on the ShortcutDecoder protocol; WScriptShortcutDecoder
is the Windows implementation over the WScript.Shell COM object (pywin32).
It must run on a thread that holds a COM apartment (see platform_context).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Protocol

from .errors import ShortcutDecodeError
from .models import ShortcutMetadata
from .normalizer import clean_path_candidate, normalize_path, resolve_relative_path

logger = logging.getLogger(__name__)


class ShortcutDecoder(Protocol):
    def decode(self, path: str) -> ShortcutMetadata:
        """Decode a shortcut file. Raises ShortcutDecodeError."""
        ...


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class WScriptShortcutDecoder:
    """ShortcutDecoder backed by ``WScript.Shell.CreateShortcut``."""

    def __init__(self):
        self._shell = None

    def _get_shell(self):
        if self._shell is None:
            import win32com.client
            self._shell = win32com.client.Dispatch("WScript.Shell")
        return self._shell

    def decode(self, path: str) -> ShortcutMetadata:
        path = os.fspath(path)
        try:
            link = self._get_shell().CreateShortcut(path)
            raw_target = _text(link.TargetPath)
            arguments = _text(link.Arguments)
            raw_workdir = _text(link.WorkingDirectory)
            raw_icon = _text(link.IconLocation)
        except Exception as e:
            raise ShortcutDecodeError(f"cannot read shortcut {path}: {e}") from e

        return build_metadata(path, raw_target, arguments, raw_workdir, raw_icon)


def build_metadata(shortcut_path: str,
                   target: Optional[str],
                   arguments: Optional[str],
                   working_directory: Optional[str],
                   icon_location: Optional[str]) -> ShortcutMetadata:
    """
    Apply the decoder contract to raw shortcut fields.

    The target is normalized. The working directory and the icon path (with its
    ``,<index>`` suffix and quotes stripped) are env-expanded and resolved
    against the shortcut's own directory when relative.
    """
    icon_path = None
    cleaned_icon = clean_path_candidate(icon_location)
    if cleaned_icon:
        icon_path = resolve_relative_path(shortcut_path, cleaned_icon)

    return ShortcutMetadata(
        target=normalize_path(target) if target else None,
        arguments=arguments or None,
        working_directory=(
            resolve_relative_path(shortcut_path, working_directory)
            if working_directory else None
        ),
        icon_path=icon_path,
    )
