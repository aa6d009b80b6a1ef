from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from projecthub.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.engine import Engine

    from projecthub.config import Settings

logger = get_logger(__name__)


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return an OTel tracer; spans are no-ops until ``setup_otel`` runs."""
    return trace.get_tracer(name or "projecthub")


def setup_otel(app: FastAPI, engine: Engine, settings: Settings) -> bool:
    """Configure OpenTelemetry tracing for the app and its engine when enabled."""
    if not settings.otel_enabled:
        return False

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    SQLAlchemyInstrumentor().instrument(engine=engine, tracer_provider=provider)
    logger.info("otel_enabled service=%s", settings.otel_service_name)
    return True
