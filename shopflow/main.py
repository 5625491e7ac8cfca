# shopflow/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from shopflow.core.config import get_settings
from shopflow.core.errors import register_exception_handlers
from shopflow.core.logging_config import configure_logging
from shopflow.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from shopflow.models import user as _user_models  # noqa: F401
from shopflow.models import product as _product_models  # noqa: F401

# Routers
from shopflow.routers.products import router as products_router

settings = get_settings()

configure_logging()
logger = logging.getLogger("shopflow")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to catalog database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# API prefix, e.g. /api/products
app.include_router(products_router, prefix=settings.API_PREFIX)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "shopflow-catalog",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
