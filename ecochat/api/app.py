"""Session store service.

``create_app`` builds the FastAPI application serving ``/sessions`` over a
persistence gateway. Without an explicit gateway the SQLite store at
``ECOCHAT_DB_PATH`` is opened on the first request and closed on shutdown.
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecochat import __version__
from ecochat.api.routes import router as sessions_router
from ecochat.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Close the store's connection when the server stops.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("EcoChat session store starting")
    yield
    close = getattr(app.state.gateway, "close", None)
    if callable(close):
        close()
    logger.info("EcoChat session store stopped")


def _cors_origins() -> list[str]:
    raw = os.getenv("ECOCHAT_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(gateway: PersistenceGateway | None = None) -> FastAPI:
    """Create the session store application.

    Args:
        gateway: Store to serve. Tests pass an in-memory store here.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="EcoChat Session Store API",
        description=(
            "Durable storage for EcoChat conversations: per-owner chat sessions "
            "and their ordered user and assistant messages."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.gateway = gateway

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "X-Owner-Id"],
    )
    application.include_router(sessions_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "ecochat"}

    return application


app = create_app()
