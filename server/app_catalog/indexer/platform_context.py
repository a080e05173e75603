"""
Per-call COM apartment for shortcut decoding.

WScript.Shell is a COM object, so the thread that decodes shortcuts must have
COM initialized. The scan holds the apartment for exactly one call:

    with com_apartment():
        ...decode shortcuts...

If the thread was already initialized in another concurrency mode
(RPC_E_CHANGED_MODE) COM is usable as-is and is not uninitialized on exit.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from .errors import PlatformInitError

logger = logging.getLogger(__name__)

# HRESULT 0x80010106, as the signed value pywintypes.com_error carries.
RPC_E_CHANGED_MODE = -2147417850

PlatformContext = Callable[[], ContextManager[None]]


@contextmanager
def com_apartment() -> Iterator[None]:
    try:
        import pythoncom
        import pywintypes
    except ImportError as e:
        raise PlatformInitError(f"pywin32 is not available: {e}") from e

    initialized = False
    try:
        pythoncom.CoInitializeEx(pythoncom.COINIT_APARTMENTTHREADED)
        initialized = True
    except pywintypes.com_error as e:
        hresult = e.args[0] if e.args else None
        if hresult != RPC_E_CHANGED_MODE:
            raise PlatformInitError(f"CoInitializeEx failed: {e}") from e
        logger.debug("[Platform] COM already initialized in another mode")

    try:
        yield
    finally:
        if initialized:
            pythoncom.CoUninitialize()
