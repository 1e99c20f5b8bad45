"""
Unified Cache Proxy Application Entry Point

FastAPI application main entry, including router registration and exception handling.
"""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cache_proxy import __version__
from cache_proxy.api.proxy import proxy_router
from cache_proxy.common.errors import AppError, MethodNotAllowedError
from cache_proxy.common.time import epoch_ms
from cache_proxy.config import get_settings
from cache_proxy.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()

# Error responses carry this so browsers can read them
ERROR_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


# Application Lifecycle Management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application Lifecycle Management

    No resources are held across requests; startup only reports the routing table.
    """
    settings = get_settings()
    logger.info("Forwarding to https://%s", settings.TARGET_HOST)
    logger.info(
        "Channels: claude=%s codex=%s gemini=%s",
        ",".join(settings.claude_channels),
        ",".join(settings.codex_channels),
        ",".join(settings.gemini_channels),
    )
    logger.info(
        "Retry: max=%s delay=%sms max_delay=%sms, timeout=%sms",
        settings.RETRY_MAX,
        settings.RETRY_DELAY,
        settings.RETRY_MAX_DELAY,
        settings.TIMEOUT_MS,
    )
    yield
    logger.info("Shutting down")


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Cache-stabilizing reverse proxy for Claude, Codex and Gemini style APIs",
    version=__version__,
    lifespan=lifespan,
)


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions

    Kind and message are returned; details only in debug mode.
    """
    settings = get_settings()
    logger.error(
        "Request failed: %s %s -> %s %s",
        request.method,
        request.url.path,
        exc.error_type,
        exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=settings.DEBUG),
        headers=ERROR_CORS_HEADERS,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle router HTTP errors

    A method without a route (PUT, HEAD, TRACE, custom verbs) is rendered in
    the proxy's own error shape; anything else keeps FastAPI's default.
    """
    if exc.status_code == 405:
        return await app_error_handler(request, MethodNotAllowedError(request.method))
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    The error is logged in full but only a generic message is returned to clients.
    """
    settings = get_settings()
    logger.error(
        "Unhandled error: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )

    content = {"error": "Internal Server Error", "type": "internal_error"}
    if settings.DEBUG:
        content["details"] = {
            "message": str(exc),
            "exception": type(exc).__name__,
            "traceback": traceback.format_exc().split("\n"),
        }
    return JSONResponse(status_code=500, content=content, headers=ERROR_CORS_HEADERS)


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "ok", "timestamp": epoch_ms()}


# Register Proxy Router (catch-all, must come after /health)
app.include_router(proxy_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cache_proxy.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
