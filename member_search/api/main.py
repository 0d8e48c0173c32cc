from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from member_search.api.errors import register_exception_handlers
from member_search.api.routes.members import router as members_router
from member_search.api.routes.teams import router as teams_router
from member_search.core.logging import bind_correlation_id, configure_logging
from member_search.core.settings import AppSettings, get_app_settings
from member_search.db.run_migrations import main as run_alembic
from member_search.db.seed import seed_all
from member_search.db.session import dispose_engine
from member_search.schemas.common import MessageResponse

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

OPENAPI_TAGS = [
    {"name": "Health", "description": "Liveness check."},
    {"name": "Members", "description": "Member search, paging, and bulk updates."},
    {"name": "Teams", "description": "Teams and per-team statistics."},
]


async def correlation_middleware(request: Request, call_next):
    """
    Bind a correlation id for the request's logs and error bodies, and echo it back.

    Taken from X-Correlation-ID or X-Request-ID when the caller sends one.
    """
    corr = (
        request.headers.get(CORRELATION_HEADER)
        or request.headers.get("X-Request-ID")
        or str(uuid4())
    )
    request.state.correlation_id = corr
    with bind_correlation_id(corr):
        logger.info("Incoming request %s %s", request.method, request.url.path)
        response = await call_next(request)
    response.headers[CORRELATION_HEADER] = corr
    return response


def _add_cors(app: FastAPI, settings: AppSettings) -> None:
    allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and allow_credentials:
        # Browsers reject credentialed requests to a wildcard origin.
        logger.warning("CORS_ALLOW_CREDENTIALS ignored with '*' origins")
        allow_credentials = False
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _add_lifecycle(app: FastAPI, settings: AppSettings) -> None:
    @app.on_event("startup")
    async def prepare_database() -> None:
        """Migrate and optionally seed; failures are logged and the app still starts."""
        if settings.RUN_MIGRATIONS_ON_STARTUP:
            logger.info("Running migrations: upgrade head")
            try:
                # env.py runs its own event loop, so it cannot share this one
                await asyncio.to_thread(run_alembic, ["upgrade", "head"])
            except Exception:
                logger.exception("Migrations failed")
        if settings.AUTO_SEED:
            logger.info("Seeding sample roster")
            try:
                await seed_all()
            except Exception:
                logger.exception("Seeding failed")

    @app.on_event("shutdown")
    async def close_database() -> None:
        await dispose_engine()


def _api_router() -> APIRouter:
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get("/health", response_model=MessageResponse, summary="Health Check", tags=["Health"])
    def health_check() -> MessageResponse:
        """Liveness check; does not touch the database."""
        return MessageResponse(message="Healthy")

    api_v1.include_router(members_router)
    api_v1.include_router(teams_router)
    return api_v1


# PUBLIC_INTERFACE
def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the FastAPI application for ``settings`` (read from the environment by default)."""
    settings = settings or get_app_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Dynamic member/team search with composable filters, paged retrieval and bulk updates.",
        version=settings.APP_VERSION,
        openapi_tags=OPENAPI_TAGS,
    )
    _add_cors(app, settings)
    app.middleware("http")(correlation_middleware)
    register_exception_handlers(app)
    _add_lifecycle(app, settings)
    app.include_router(_api_router())
    return app


app = create_app()
