"""
indexer — builds the launcher's app catalog from Start-Menu shortcuts and the
Uninstall registry.

Quick start
───────────
    from app_catalog.indexer import get_default_scan_paths, scan_app_records

    paths = get_default_scan_paths()
    apps  = scan_app_records(paths.start_menu_paths, paths.registry_paths)
"""

from .diff import CatalogDiff, diff_catalogs
from .errors import (
    CatalogError,
    CollaboratorError,
    ConfigurationError,
    PlatformInitError,
    RegistryReadError,
    ShortcutDecodeError,
)
from .identity import hash_id
from .merger import AppCatalogMerger
from .models import AppRecord, RawUninstallEntry, ScanPaths, ShortcutMetadata, Skip
from .normalizer import expand_env_vars, normalize_path
from .scanner import ScanReport, get_default_scan_paths, scan_app_records, scan_with_report

__all__ = [
    "AppCatalogMerger",
    "AppRecord",
    "CatalogDiff",
    "CatalogError",
    "CollaboratorError",
    "ConfigurationError",
    "PlatformInitError",
    "RawUninstallEntry",
    "RegistryReadError",
    "ScanPaths",
    "ScanReport",
    "ShortcutDecodeError",
    "ShortcutMetadata",
    "Skip",
    "diff_catalogs",
    "expand_env_vars",
    "get_default_scan_paths",
    "hash_id",
    "normalize_path",
    "scan_app_records",
    "scan_with_report",
]
