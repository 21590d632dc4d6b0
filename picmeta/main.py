"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from picmeta.api.routes import generate
from picmeta.core.config import get_settings
from picmeta.core.exceptions import PicMetaError, picmeta_exception_handler

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} with provider '{settings.ai_provider}'")

    api_key = settings.gemini_api_key if settings.ai_provider == "gemini" else settings.openai_api_key
    if not api_key:
        logger.warning(
            f"No API key configured for '{settings.ai_provider}'; "
            "alt text and title requests will fail, filenames will use fallbacks"
        )

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Alt text, title and filename generation for images with vision LLMs",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Register exception handlers
    app.add_exception_handler(PicMetaError, picmeta_exception_handler)

    # Register routers
    api_prefix = "/api/v1"
    app.include_router(generate.router, prefix=api_prefix)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.get(f"{api_prefix}/health")
    async def health():
        current = get_settings()
        return {"status": "healthy", "provider": current.ai_provider}

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "picmeta.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["picmeta"],
    )
