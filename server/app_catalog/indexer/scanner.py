"""
Scanner — one full aggregation pass.

Usage:
    paths   = get_default_scan_paths()
    records = scan_app_records(paths.start_menu_paths, paths.registry_paths)

ORDER
    1. every Start-Menu root, in the order given, each walked fully
    2. every registry path, in the order given
    3. merge by id (last write wins), sort by name

Each call builds its own merger and holds the COM apartment for its own
duration, so concurrent calls share nothing. A bad shortcut, a bad key or a
whole bad source path never fails the pass; only PlatformInitError does.
"""

from __future__ import annotations

import logging
import ntpath
import os
import time
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Sequence

from .errors import PlatformInitError, RegistryReadError
from .merger import AppCatalogMerger
from .models import AppRecord, ScanPaths, Skip
from .platform_context import PlatformContext, com_apartment
from .registry import iter_registry_path
from .registry_reader import UninstallKeyReader
from .shortcut_decoder import ShortcutDecoder
from .start_menu import UNKNOWN_SHORTCUT_NAME, iter_start_menu

logger = logging.getLogger(__name__)

START_MENU_SUFFIX = ntpath.join("Microsoft", "Windows", "Start Menu", "Programs")

UNINSTALL_SUBKEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"
WOW64_UNINSTALL_SUBKEY = r"SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall"

DEFAULT_REGISTRY_PATHS = (
    "HKEY_LOCAL_MACHINE\\" + UNINSTALL_SUBKEY,
    "HKEY_LOCAL_MACHINE\\" + WOW64_UNINSTALL_SUBKEY,
    "HKEY_CURRENT_USER\\" + UNINSTALL_SUBKEY,
)


@dataclass
class ScanReport:
    records: List[AppRecord] = field(default_factory=list)
    skipped: List[Skip] = field(default_factory=list)


def get_default_scan_paths(environ: Optional[Mapping[str, str]] = None) -> ScanPaths:
    """
    Per-machine and per-user Start Menu\\Programs roots plus the three
    Uninstall keys (64-bit machine, 32-on-64 machine, current user).
    """
    env = os.environ if environ is None else environ
    start_menu_paths = []
    for var in ("PROGRAMDATA", "APPDATA"):
        base = env.get(var)
        if base:
            start_menu_paths.append(ntpath.join(base, START_MENU_SUFFIX))
    return ScanPaths(
        start_menu_paths=start_menu_paths,
        registry_paths=list(DEFAULT_REGISTRY_PATHS),
    )


def _default_decoder() -> ShortcutDecoder:
    from .shortcut_decoder import WScriptShortcutDecoder
    return WScriptShortcutDecoder()


def _default_reader() -> UninstallKeyReader:
    from .registry_reader import WinregUninstallReader
    try:
        return WinregUninstallReader()
    except ImportError as e:
        raise RegistryReadError(f"registry access is not available: {e}") from e


def scan_with_report(start_menu_paths: Optional[Sequence[str]] = None,
                     registry_paths: Optional[Sequence[str]] = None,
                     *,
                     decoder: Optional[ShortcutDecoder] = None,
                     reader: Optional[UninstallKeyReader] = None,
                     platform_context: Optional[PlatformContext] = None,
                     now: Callable[[], float] = time.time,
                     unknown_name: str = UNKNOWN_SHORTCUT_NAME) -> ScanReport:
    """
    Run a scan and return the catalog together with everything skipped.

    A list argument left as None falls back to get_default_scan_paths() for
    that source; an empty list scans nothing from it.
    """
    if start_menu_paths is None or registry_paths is None:
        defaults = get_default_scan_paths()
        if start_menu_paths is None:
            start_menu_paths = defaults.start_menu_paths
        if registry_paths is None:
            registry_paths = defaults.registry_paths

    context = platform_context or com_apartment
    merger = AppCatalogMerger()
    started = time.time()

    try:
        with context():
            if start_menu_paths and decoder is None:
                decoder = _default_decoder()
            for root in start_menu_paths:
                merger.extend(iter_start_menu(root, decoder, now=now, unknown_name=unknown_name))

            if registry_paths and reader is None:
                try:
                    reader = _default_reader()
                except RegistryReadError as e:
                    logger.warning("[Scanner] registry sources skipped: %s", e)
                    merger.extend(Skip(path, path, str(e), "collaborator") for path in registry_paths)
                    registry_paths = []
            for registry_path in registry_paths:
                merger.extend(iter_registry_path(registry_path, reader, now=now))
    except PlatformInitError as e:
        logger.error("[Scanner] platform initialization failed: %s", e)
        raise

    report = ScanReport(records=merger.records(), skipped=merger.skipped)
    logger.info(
        "[Scanner] scan complete: %d apps, %d skipped (%.2fs)",
        len(report.records), len(report.skipped), time.time() - started,
    )
    return report


def scan_app_records(start_menu_paths: Optional[Sequence[str]] = None,
                     registry_paths: Optional[Sequence[str]] = None,
                     **kwargs) -> List[AppRecord]:
    """Run a scan and return the name-sorted catalog."""
    return scan_with_report(start_menu_paths, registry_paths, **kwargs).records
