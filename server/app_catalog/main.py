# app_catalog/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app_catalog.api.routes import apps
from app_catalog.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ========== STARTUP ==========
    logger.info("=" * 60)
    logger.info("App catalog service starting up...")
    logger.info(f"Catalog store: {settings.catalog_db_path}")
    logger.info("=" * 60)

    yield  # Application is running

    # ========== SHUTDOWN ==========
    logger.info("App catalog service shutting down...")
    if apps._store is not None:
        apps._store.close()
        logger.info("Catalog store closed")

    from app_catalog.utils.async_utils import cleanup_executor
    cleanup_executor()
    logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="App Catalog API",
    description="Launchable application catalog built from Start Menu shortcuts and the Uninstall registry",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(apps.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
