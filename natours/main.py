"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.datastructures import URL
from starlette.middleware import Middleware
from starlette.routing import Match

from natours import __version__
from natours.api import views, webhooks
from natours.api.v1.router import router as api_v1_router
from natours.config import Settings, get_settings
from natours.core.errors import register_exception_handlers
from natours.core.exceptions import NotFoundError
from natours.core.logging import configure_logging
from natours.middleware import (
    BodyParserMiddleware,
    CookieParserMiddleware,
    MongoSanitizeMiddleware,
    ParameterPollutionMiddleware,
    RateLimitMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    RequestTimeMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
    XSSCleanMiddleware,
)
from natours.redis import close_redis, get_redis
from natours.schemas.common import HealthResponse
from natours.services.repository import Repositories

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CATCH_ALL_ROUTE = "not_found"


def trailing_slash_target(request: Request) -> Optional[URL]:
    """
    URL without the trailing slash when another route serves that path.

    The catch-all claims every path, so the router never gets to redirect
    slashes itself.
    """
    path = request.url.path
    if path == "/" or not path.endswith("/"):
        return None

    scope = {**request.scope, "path": path.rstrip("/") or "/"}
    for route in request.app.router.routes:
        if getattr(route, "name", None) == CATCH_ALL_ROUTE:
            continue
        match, _ = route.matches(scope)
        if match != Match.NONE:
            return request.url.replace(path=scope["path"])
    return None


def build_middleware(settings: Settings) -> list[Middleware]:
    """
    Global middleware in request order, outermost first.

    Rate limiting runs before any body is read, and every sanitizer runs
    after parsing and before routing.
    """
    middleware = [
        Middleware(RequestIDMiddleware),
        Middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins_list,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-RateLimit-Limit", "X-RateLimit-Remaining"],
        ),
        Middleware(SecurityHeadersMiddleware, settings=settings),
    ]

    if settings.request_logging_enabled:
        middleware.append(Middleware(RequestLoggingMiddleware, settings=settings))

    middleware += [
        Middleware(UnhandledErrorMiddleware, settings=settings),
        Middleware(RateLimitMiddleware, settings=settings),
        Middleware(BodyParserMiddleware, settings=settings),
        Middleware(CookieParserMiddleware),
        Middleware(MongoSanitizeMiddleware, settings=settings),
        Middleware(XSSCleanMiddleware, settings=settings),
        Middleware(ParameterPollutionMiddleware, settings=settings),
        Middleware(GZipMiddleware, minimum_size=settings.compression_min_size),
        Middleware(RequestTimeMiddleware),
    ]
    return middleware


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
) -> FastAPI:
    """Build the application with its middleware, routes and error handlers."""
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events handler."""
        yield
        await close_redis()

    app = FastAPI(
        title=settings.app_name,
        description="Tour booking API: tours, users, reviews and bookings.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        middleware=build_middleware(settings),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repositories = repositories or Repositories()

    register_exception_handlers(app, settings)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Basic health check",
    )
    async def health_check() -> HealthResponse:
        """Basic health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get(
        "/health/ready",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Readiness probe",
    )
    async def readiness_check() -> HealthResponse:
        """Readiness probe - checks Redis when it backs the rate limiter."""
        if settings.rate_limit_backend != "redis":
            return HealthResponse(status="healthy", version=__version__)

        redis_status = "healthy"
        try:
            redis_client = await get_redis(settings)
            await redis_client.ping()
        except Exception as e:
            redis_status = f"unhealthy: {str(e)}"

        return HealthResponse(
            status="healthy" if redis_status == "healthy" else "unhealthy",
            version=__version__,
            redis=redis_status,
        )

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount(settings.static_url, StaticFiles(directory=static_dir), name="static")

    # Routes
    app.include_router(views.router, tags=["Views"])
    app.include_router(webhooks.router, prefix=settings.webhook_path, tags=["Webhooks"])
    app.include_router(api_v1_router, prefix=settings.api_v1_prefix)

    @app.api_route(
        "/{path:path}",
        methods=ALL_METHODS,
        name=CATCH_ALL_ROUTE,
        include_in_schema=False,
    )
    async def not_found(request: Request) -> RedirectResponse:
        """Anything no other route claimed."""
        target = trailing_slash_target(request)
        if target is not None:
            return RedirectResponse(str(target), status_code=status.HTTP_307_TEMPORARY_REDIRECT)

        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        raise NotFoundError(message=f"Can't find {url} on this server!")

    return app


app = create_app()
