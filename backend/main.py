"""
Model Chat API
FastAPI backend for the chat client: model catalog, message exchange and history.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import api_router
from src.config.settings import Settings, get_settings
from src.middleware.error_handling import ErrorHandlingMiddleware
from src.middleware.request_logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once from LOG_LEVEL."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} ({settings.environment})")

    if not settings.storage_configured:
        logger.error("Supabase configuration missing! Check SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
    else:
        logger.info("Supabase storage configured")

    # Never log the key itself
    logger.info(f"Generation provider: {settings.generation_mode}")

    yield

    logger.info("Shutting down...")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Chat backend: pick a model, exchange messages, read history",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ErrorHandlingMiddleware)
    if settings.enable_request_logging:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=get_settings().is_local,
    )
