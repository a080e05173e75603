# app_catalog/api/routes/apps.py
import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends

from app_catalog.cache.catalog_store import CatalogStore
from app_catalog.config import settings
from app_catalog.helper.response_helper import send_error, send_response
from app_catalog.indexer import PlatformInitError, ScanReport, get_default_scan_paths, scan_with_report
from app_catalog.schemas.app_schema import ScanRequest, ScanResponse, SkippedItem
from app_catalog.utils.async_utils import run_in_executor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/apps", tags=["Apps"])

ScanRunner = Callable[[Optional[List[str]], Optional[List[str]]], ScanReport]

_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    global _store
    if _store is None:
        _store = CatalogStore(settings.catalog_db_path)
    return _store


def _run_scan(start_menu_paths: Optional[List[str]],
              registry_paths: Optional[List[str]]) -> ScanReport:
    return scan_with_report(
        start_menu_paths,
        registry_paths,
        unknown_name=settings.unknown_shortcut_name,
    )


def get_scan_runner() -> ScanRunner:
    return _run_scan


@router.get("/default-paths")
async def default_paths_endpoint():
    """Start Menu roots and Uninstall keys a scan uses when none are given."""
    paths = get_default_scan_paths()
    if settings.start_menu_paths is not None:
        paths.start_menu_paths = list(settings.start_menu_paths)
    if settings.registry_paths is not None:
        paths.registry_paths = list(settings.registry_paths)
    return send_response(data=paths)


@router.post("/scan")
async def scan_endpoint(
    payload: ScanRequest,
    runner: ScanRunner = Depends(get_scan_runner),
    store: CatalogStore = Depends(get_catalog_store),
):
    """
    Rebuild the catalog from scratch.

    The scan blocks (filesystem walk, COM, registry), so it runs on the shared
    worker pool; COM is initialized on that worker for the duration of the call.
    """
    start_menu_paths = payload.start_menu_paths
    if start_menu_paths is None:
        start_menu_paths = settings.start_menu_paths
    registry_paths = payload.registry_paths
    if registry_paths is None:
        registry_paths = settings.registry_paths

    try:
        report = await run_in_executor(runner, start_menu_paths, registry_paths)
    except PlatformInitError as e:
        logger.error(f"[AppsRoute] scan unavailable: {e}")
        return send_error(message=f"App scan unavailable: {e}", status_code=503)

    if payload.persist and report.records:
        await run_in_executor(store.upsert, report.records)

    body = ScanResponse(
        apps=report.records,
        skipped=[
            SkippedItem(source=s.source, item=s.item, reason=s.reason, kind=s.kind)
            for s in report.skipped
        ],
    )
    return send_response(
        data=body,
        message=f"Found {len(report.records)} apps",
    )


@router.get("")
async def list_apps_endpoint(store: CatalogStore = Depends(get_catalog_store)):
    """Apps from the last persisted scan, sorted by name."""
    apps = await run_in_executor(store.fetch_all)
    return send_response(data=apps)


@router.post("/{app_id}/launched")
async def app_launched_endpoint(app_id: str, store: CatalogStore = Depends(get_catalog_store)):
    if not await run_in_executor(store.record_launch, app_id):
        return send_error(message=f"Unknown app id: {app_id}", status_code=404)
    return send_response(data=await run_in_executor(store.get, app_id))


@router.delete("")
async def clear_apps_endpoint(store: CatalogStore = Depends(get_catalog_store)):
    await run_in_executor(store.clear)
    return send_response(message="Catalog cleared")
