# src/sneaker_vault/main.py
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

import sneaker_vault.api.dependencies as deps
from sneaker_vault.api.v1.router import api_router
from sneaker_vault.core.config import get_settings
from sneaker_vault.core.metrics import REQUEST_COUNT
from sneaker_vault.core.rate_limit import limiter

logger = logging.getLogger(__name__)

settings = get_settings()


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        # Routen-Template statt konkreter Pfad, sonst wächst /items/{style_id} unbegrenzt
        route = request.scope.get("route")
        REQUEST_COUNT.labels(
            method=request.method,
            path=getattr(route, "path", request.url.path),
            status_code=str(response.status_code),
        ).inc()
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    yield
    await deps.get_http_client().aclose()
    deps.get_http_client.cache_clear()
    for repo in (deps._vault_repository, deps._collection_repository):
        engine = getattr(repo, "engine", None)
        if engine is not None:
            await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Katalog-Routen sind limitiert, siehe core/rate_limit.py
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["X-API-Key", "Content-Type"],
)

app.include_router(api_router)


@app.get("/healthz", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {"status": "ok", "version": settings.app_version}


@app.get("/readyz", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    return {"status": "ready"}


@app.get("/metrics", tags=["Monitoring"])
async def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
