import asyncio
import functools
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

# Scans hold a COM apartment on the worker thread for their whole duration,
# so the pool stays small.
MAX_WORKERS = 2

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()

T = TypeVar('T')


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=MAX_WORKERS,
                thread_name_prefix="catalog_worker"
            )
        return _executor


async def run_in_executor(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking function (scan, SQLite access) on the shared worker pool.

    Usage:
        report = await run_in_executor(scan_with_report, start_menu_paths, registry_paths)
    """
    loop = asyncio.get_running_loop()
    call = functools.partial(func, *args, **kwargs) if kwargs else func

    try:
        if kwargs:
            return await loop.run_in_executor(_get_executor(), call)
        return await loop.run_in_executor(_get_executor(), call, *args)
    except Exception as e:
        name = getattr(func, "__name__", repr(func))
        logger.error(f"[Executor] {name} failed: {e}", exc_info=True)
        raise


def cleanup_executor():
    """
    Shut down the worker pool, waiting for running scans.
    A later run_in_executor call starts a fresh pool.
    """
    global _executor
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        logger.info("[Executor] shutting down catalog worker pool...")
        executor.shutdown(wait=True)
        logger.info("[Executor] shutdown complete")
