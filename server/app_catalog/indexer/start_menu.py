"""
Start-Menu ingester — one AppRecord per decodable .lnk under a root.

Identity is keyed to the shortcut file, not its target: when a shortcut is
re-pointed the id stays and launch_path changes.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Callable, Dict, FrozenSet, Iterator

from .errors import ShortcutDecodeError
from .identity import hash_id
from .models import AppRecord, ScanItem, Skip
from .normalizer import normalize_path, parent_dir
from .shortcut_decoder import ShortcutDecoder

logger = logging.getLogger(__name__)

SHORTCUT_EXTENSION = ".lnk"
UNKNOWN_SHORTCUT_NAME = "Unknown Shortcut"
SOURCE_KIND = "start_menu"


def _walk_files(root: str) -> Iterator[str]:
    """
    Every file under ``root``, following directory symlinks.

    Entries that raise while listing are left out. A link back to a directory
    on the current path is not descended into; separate links to the same
    directory are each walked.
    """
    # dirpath -> real paths of the directories above it
    ancestors: Dict[str, FrozenSet[str]] = {root: frozenset()}

    def _on_error(err: OSError):
        logger.debug("[StartMenu] walk error under %s: %s", root, err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error, followlinks=True):
        chain = ancestors.pop(dirpath, frozenset())
        try:
            real = os.path.realpath(dirpath)
        except OSError:
            real = dirpath
        if real in chain:
            logger.debug("[StartMenu] link loop at %s", dirpath)
            dirnames[:] = []
            continue

        chain = chain | {real}
        dirnames.sort()
        for dirname in dirnames:
            ancestors[os.path.join(dirpath, dirname)] = chain
        for fname in sorted(filenames):
            yield os.path.join(dirpath, fname)


def is_shortcut_file(path: str) -> bool:
    return os.path.splitext(path)[1].lower() == SHORTCUT_EXTENSION


def iter_start_menu(root: str,
                    decoder: ShortcutDecoder,
                    now: Callable[[], float] = time.time,
                    unknown_name: str = UNKNOWN_SHORTCUT_NAME) -> Iterator[ScanItem]:
    """
    Yield an AppRecord or a Skip for each shortcut under ``root``.

    A root that does not exist yields nothing.
    """
    source = normalize_path(root)
    if not os.path.exists(root):
        logger.debug("[StartMenu] root missing, nothing to scan: %s", root)
        return

    for path in _walk_files(root):
        if not is_shortcut_file(path) or not os.path.isfile(path):
            continue

        shortcut_path = normalize_path(path)
        stem = os.path.splitext(os.path.basename(path))[0].strip()
        name = stem or unknown_name

        try:
            shortcut = decoder.decode(path)
        except ShortcutDecodeError as e:
            logger.debug("[StartMenu] skip shortcut %s: %s", path, e)
            yield Skip(source, shortcut_path, str(e), "collaborator")
            continue

        if not shortcut.target:
            logger.debug("[StartMenu] skip shortcut without target %s", path)
            yield Skip(source, shortcut_path, "shortcut has no target", "collaborator")
            continue

        launch_path = normalize_path(shortcut.target)
        working_directory = shortcut.working_directory or parent_dir(launch_path)
        icon_path = shortcut.icon_path or launch_path

        try:
            modified = int(os.stat(path).st_mtime)
        except OSError:
            modified = int(now())

        yield AppRecord(
            id=hash_id([SOURCE_KIND, shortcut_path]),
            name=name,
            launch_path=launch_path,
            working_directory=working_directory,
            icon_path=icon_path,
            source=source,
            last_modified=modified,
        )
