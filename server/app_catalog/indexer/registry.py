"""
Registry ingester — installed products from an Uninstall key.

For every child key of ``HIVE\\subkey``:

    1. classification rules (rules.entry_rejection)      → hidden / uninstall noise
    2. launch path: DisplayIcon, else InstallLocation     → must be exe/lnk/bat/cmd
    3. uninstaller target check (rules.uninstaller_rejection)
    4. AppRecord keyed on (launch path, display name, hive)

A malformed path is a configuration problem for that path only. A key that
fails to read is skipped; the remaining keys are still visited.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator, Optional, Tuple

from .errors import ConfigurationError, RegistryReadError
from .identity import hash_id
from .models import AppRecord, RawUninstallEntry, ScanItem, Skip
from .normalizer import clean_path_candidate, normalize_path, parent_dir
from .registry_reader import UninstallKeyReader
from .rules import entry_rejection, is_executable_candidate, uninstaller_rejection

logger = logging.getLogger(__name__)

SOURCE_KIND = "registry"

HIVE_ALIASES = {
    "HKEY_LOCAL_MACHINE": "HKEY_LOCAL_MACHINE",
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKEY_CURRENT_USER": "HKEY_CURRENT_USER",
    "HKCU": "HKEY_CURRENT_USER",
}


def parse_registry_path(registry_path: str) -> Tuple[str, str]:
    """
    Split ``HIVE\\subkey`` into (canonical hive name, subkey).

    Raises ConfigurationError for an unknown hive or a missing subkey.
    """
    hive, sep, subkey = registry_path.partition("\\")
    if not sep or not subkey:
        raise ConfigurationError(f"invalid registry path format: {registry_path!r}")
    canonical = HIVE_ALIASES.get(hive)
    if canonical is None:
        raise ConfigurationError(f"unsupported registry hive: {hive}")
    return canonical, subkey


def _icon_arguments(display_icon: Optional[str]) -> Optional[str]:
    """Whatever follows the first comma of a DisplayIcon value."""
    if not display_icon or "," not in display_icon:
        return None
    rest = display_icon.split(",", 1)[1].strip()
    return rest or None


def resolve_launch_path(entry: RawUninstallEntry) -> Tuple[Optional[str], Optional[str]]:
    """
    Pick the launch path for an entry.

    Returns (normalized path, expanded path before normalization), or
    (None, None) when neither DisplayIcon nor InstallLocation is executable.
    """
    for raw in (entry.display_icon, entry.install_location):
        expanded = clean_path_candidate(raw)
        if expanded is None:
            continue
        normalized = normalize_path(expanded)
        if is_executable_candidate(normalized):
            return normalized, expanded
    return None, None


def build_registry_record(entry: RawUninstallEntry,
                          hive: str,
                          registry_path: str,
                          key_name: str,
                          now: Callable[[], float] = time.time) -> ScanItem:
    """Turn one uninstall entry into an AppRecord, or a Skip saying why not."""
    reason = entry_rejection(entry)
    if reason is None:
        launch_path, raw_path = resolve_launch_path(entry)
        if launch_path is None:
            reason = "missing executable path"
        else:
            reason = uninstaller_rejection(
                launch_path, _icon_arguments(entry.display_icon), raw_path=raw_path,
            )
    if reason:
        return Skip(registry_path, key_name, reason, "filtered")

    display_icon = clean_path_candidate(entry.display_icon)
    name = entry.display_name.strip()

    return AppRecord(
        id=hash_id([SOURCE_KIND, launch_path, name, hive]),
        name=name,
        launch_path=launch_path,
        working_directory=parent_dir(launch_path),
        icon_path=normalize_path(display_icon) if display_icon else None,
        source=registry_path,
        last_modified=int(now()),
    )


def iter_registry_path(registry_path: str,
                       reader: UninstallKeyReader,
                       now: Callable[[], float] = time.time) -> Iterator[ScanItem]:
    """Yield an AppRecord or a Skip for each child key under ``registry_path``."""
    try:
        hive, subkey = parse_registry_path(registry_path)
    except ConfigurationError as e:
        logger.warning("[Registry] failed to ingest registry path %r: %s", registry_path, e)
        yield Skip(registry_path, registry_path, str(e), "configuration")
        return

    try:
        children = reader.list_child_keys(hive, subkey)
    except RegistryReadError as e:
        logger.warning("[Registry] failed to ingest registry path %r: %s", registry_path, e)
        yield Skip(registry_path, registry_path, str(e), "collaborator")
        return

    for child in children:
        child_path = f"{subkey}\\{child}"
        try:
            values = reader.read_values(hive, child_path)
        except RegistryReadError as e:
            logger.debug("[Registry] skip registry app %s: %s", child, e)
            yield Skip(registry_path, child, str(e), "collaborator")
            continue

        item = build_registry_record(
            RawUninstallEntry.from_values(values), hive, registry_path, child, now,
        )
        if isinstance(item, Skip):
            logger.debug("[Registry] skip registry app %s: %s", child, item.reason)
        yield item
