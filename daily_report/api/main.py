"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize the FastAPI application (title, version, lifespan)
  - Configure middleware (CORS, request context)
  - Mount the business router under /api/v1
  - Expose health check and metrics endpoints

Collaborators:
  - RequestContextMiddleware: request id, logging context, request metrics
  - interfaces.api.http.router: auth, reports, comments, master data
  - container: repositories and token service
  - application.dev_seed: optional local demo data

Notes:
  - Middleware order matters: RequestContext -> CORS -> routes
  - Settings and the signing secret are validated in the lifespan, so a
    missing JWT_SECRET aborts startup instead of failing per request
  - Test environments (APP_ENV=test) skip the Postgres pool entirely
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..application.dev_seed import ensure_dev_demo
from ..container import (
    get_customer_repository,
    get_sales_person_repository,
    get_token_service,
    is_test_env,
)
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..identity.passwords import hash_password
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import API_PREFIX, router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: settings, signing secret, pool, seed."""
    settings = get_settings()
    # Fail fast on an unusable signing secret.
    get_token_service()

    use_pool = not is_test_env()
    if use_pool:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        ensure_dev_demo(
            settings,
            sales_persons=get_sales_person_repository(),
            customers=get_customer_repository(),
            password_hasher=hash_password,
        )

        logger.info(
            "Daily Report API starting up",
            extra={
                "app_env": settings.app_env,
                "db_pool": use_pool,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
                "token_ttl_seconds": settings.token_ttl_seconds(),
            },
        )

        yield

    finally:
        if use_pool:
            close_pool()
        logger.info("Daily Report API shutting down")


app = FastAPI(
    title="Daily Report API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Login / logout / current user (JWT)"},
        {"name": "reports", "description": "Daily reports, visit records, review"},
        {"name": "comments", "description": "Report comments"},
        {"name": "sales-persons", "description": "Sales person master data"},
        {"name": "customers", "description": "Customer master data"},
    ],
)

app.add_middleware(RequestContextMiddleware)

_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_allowed_origins_list(),
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
)

app.include_router(router, prefix=API_PREFIX)

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """Liveness + DB connectivity."""
    db_ok = get_sales_person_repository().ping()
    return {
        "ok": db_ok,
        "db": "connected" if db_ok else "disconnected",
        "request_id": getattr(request.state, "request_id", None),
    }


@app.get("/metrics")
def metrics():
    """Prometheus metrics."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
