"""Condominium management backend - main application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.exceptions import CondoException
from .core.logging import RequestIdMiddleware, get_logger, setup_logging, shutdown_logging
from .modules.resident_import import router as resident_import_router
from .modules.resident_import import sessions_router as import_sessions_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting condominium backend (env=%s)", settings.app_env)
    yield
    logger.info("Shutting down condominium backend")
    shutdown_logging()


app = FastAPI(
    title=settings.api_title,
    description="Condominium management: units, residents and bulk resident import",
    version=settings.api_version,
    docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID middleware for request tracing
app.add_middleware(RequestIdMiddleware)


@app.exception_handler(CondoException)
async def condo_exception_handler(request: Request, exc: CondoException):
    """Handle application exceptions."""
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.message,
            "error": exc.details or exc.message,
            "data": None,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) if settings.app_debug else "Internal server error",
            "data": None,
        },
    )


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


app.include_router(resident_import_router, prefix=settings.api_prefix)
app.include_router(import_sessions_router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "condo_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
