"""
App Catalog Server Entry Point
==============================
Starts the catalog API with uvicorn.

Settings (host, port, log level, scan overrides) are read by app_catalog.config.
"""
import sys

import uvicorn

from app_catalog.config import settings


def serve():
    """Start the uvicorn server."""
    uvicorn.run(
        "app_catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=False
    )


if __name__ == "__main__":
    try:
        serve()
    except Exception as e:
        print(f"ERROR during server execution: {type(e).__name__}: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
