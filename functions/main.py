"""ASGI application hosting the helloWorld and ping functions."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from functions.config import SERVICE_NAME, VERSION, Settings, load_settings
from functions.errors import HttpsError
from functions.log import configure_logging
from functions.middleware.rate_limit import RateLimitMiddleware
from functions.routes import hello, ping

logger = logging.getLogger(__name__)

FUNCTION_NAMES = ["helloWorld", "ping"]


async def https_error_handler(request: Request, exc: HttpsError) -> JSONResponse:
    """Render a handler error as the callable error envelope."""
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.status, exc.message)
    return JSONResponse({"error": exc.to_payload()}, status_code=exc.http_status)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Ping Functions",
        description="helloWorld HTTP function and ping callable",
        version=VERSION,
    )
    app.state.settings = settings

    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    # Outermost, so 429s carry CORS headers and preflights skip the limiter
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HttpsError, https_error_handler)

    app.include_router(hello.router, prefix="/api", tags=["http"])
    app.include_router(ping.router, prefix="/api", tags=["callable"])

    @app.get("/api")
    async def root():
        """API status endpoint."""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": VERSION,
            "region": settings.region,
            "functions": FUNCTION_NAMES,
        }

    @app.get("/api/health")
    async def health():
        """Health check for load balancers."""
        return {
            "status": "healthy",
            "auth_configured": bool(settings.auth_secret),
            "require_auth": settings.require_auth,
        }

    return app


app = create_app()
