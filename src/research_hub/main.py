from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.research_hub.api.middlewares import setup_middlewares
from src.research_hub.api.v1.router import api_router
from src.research_hub.core.config import get_settings
from src.research_hub.core.db import dispose_engine
from src.research_hub.core.exceptions import setup_exception_handlers
from src.research_hub.core.health import setup_health_endpoint, setup_metrics
from src.research_hub.core.logging import get_logger, setup_logging
from src.research_hub.core.rate_limit import limiter
from src.research_hub.core.shutdown import request_tracker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug, settings.log_level)
    logger.info("Starting", app=settings.app_name, env=settings.app_env)

    yield

    request_tracker.start_shutdown()
    await request_tracker.wait_for_drain(timeout=settings.shutdown_grace_period)
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Sign-up, sign-in, tokens and OAuth completion"},
    {"name": "users", "description": "Own profile"},
    {"name": "projects", "description": "Research postings"},
    {"name": "applications", "description": "Student applications and review"},
    {"name": "uploads", "description": "PDF uploads"},
    {"name": "blog", "description": "Articles"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="University research matchmaking API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
