from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from projecthub import models  # noqa: F401  (registers tables on Base.metadata)
from projecthub.api import api_router
from projecthub.config import Settings, settings as default_settings
from projecthub.container import configure_container
from projecthub.db import Base, create_db_engine, create_session_factory
from projecthub.errors import register_error_handlers
from projecthub.logging import configure_logging, get_logger
from projecthub.middleware.rate_limit import RateLimitMiddleware, default_rules
from projecthub.observability import ObservabilityMiddleware
from projecthub.telemetry import setup_otel

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.auto_create_schema:
        Base.metadata.create_all(bind=app.state.engine)
    if not settings.jwt_secret:
        logger.warning("jwt_secret_missing authenticated routes will answer 500")
    logger.info("startup app=%s environment=%s", settings.app_name, settings.environment)
    try:
        yield
    finally:
        app.state.engine.dispose()
        logger.info("shutdown engine_disposed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)
    configure_container(settings)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    setup_otel(app, app.state.engine, settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            rules=default_rules(settings),
            redis_url=settings.rate_limit_redis_url,
        )
    app.add_middleware(ObservabilityMiddleware)
    register_error_handlers(app)

    app.include_router(api_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        data = generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
