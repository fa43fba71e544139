from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from bizcard.api.error_handling import register_exception_handlers
from bizcard.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from bizcard.api.routes.health import router as health_router
from bizcard.api.routes.menu_items import router as menu_items_router
from bizcard.api.routes.menus import router as menus_router
from bizcard.api.routes.metrics import router as metrics_router
from bizcard.api.routes.public_menus import router as public_menus_router
from bizcard.infrastructure.observability.logging_config import configure_logging
from bizcard.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("bizcard.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "bizcard_http_requests_total",
    "HTTP requests served, by route template",
    ["method", "route", "status_code"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "bizcard_http_request_duration_seconds",
    "HTTP request latency in seconds, by route template",
    ["method", "route"],
)


def _cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "https://cards.example.com")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_template(request: Request) -> str:
    # Unmatched paths share one label so scanners cannot grow the label set.
    route = request.scope.get("route")
    return getattr(route, "path", "<unmatched>")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed = time.perf_counter() - started
            route = _route_template(request)
            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                route=route,
                status_code=str(status_code),
            ).inc()
            HTTP_REQUEST_SECONDS.labels(method=request.method, route=route).observe(elapsed)
            logger.log(
                logging.ERROR if status_code >= 500 else logging.INFO,
                "request_complete",
                extra={
                    "method": request.method,
                    "path": route,
                    "status_code": status_code,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Business Card Menus", version="0.1.0")
    register_exception_handlers(app)
    for router in (
        health_router,
        metrics_router,
        menus_router,
        menu_items_router,
        public_menus_router,
    ):
        app.include_router(router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
