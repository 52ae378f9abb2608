"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount the files_sharing router once per OCS version (v1.php / v2.php)
  - Expose health check and metrics endpoints

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID, access token and logging context
  - interfaces.api.http.router: OCS sharing endpoints

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - No authentication here: the caller's token is forwarded to the gateway

Notes:
  - Middleware order matters: RequestContext → CORS → routes
  - HTTP_ROOT (default /ocs) prefixes every OCS route
  - /healthz follows Kubernetes health check convention
  - /metrics exposes Prometheus metrics
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_gateway_client
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import RequestContextMiddleware
from ..crosscutting.ocs_responses import OcsVersion
from ..interfaces.api.http.router import FILES_SHARING_PREFIX, router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and builds the gateway client."""
    settings = get_settings()
    gateway = get_gateway_client()

    logger.info(
        "OCS Sharing API starting up",
        extra={
            "app_env": settings.app_env,
            "http_root": settings.http_root,
            "gateway": type(gateway).__name__,
            "gateway_address": settings.gateway_address,
        },
    )
    try:
        yield
    finally:
        close = getattr(gateway, "close", None)
        if close is not None:
            close()
        get_gateway_client.cache_clear()
        logger.info("OCS Sharing API shutting down")


def ocs_prefix(http_root: str, version: OcsVersion) -> str:
    return f"{http_root}/{version.value}{FILES_SHARING_PREFIX}"


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="OCS Sharing API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "shares", "description": "files_sharing OCS endpoints"},
        ],
    )

    # R: Middleware order (bottom = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id and access token
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Access-Token",
            "X-Request-Id",
        ],
    )

    # R: OCS routes, one mount per version (v1 answers 200, v2 mirrors statuscode)
    for version in OcsVersion:
        app.include_router(router, prefix=ocs_prefix(settings.http_root, version))

    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        """
        R: Liveness check. Does not call the gateway.

        Returns:
            ok: always True while the process serves requests
            request_id: Correlation ID for this request
        """
        return {
            "ok": True,
            "request_id": getattr(request.state, "request_id", None),
        }

    @app.get("/metrics")
    def metrics():
        """R: Expose Prometheus metrics (text format)."""
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
