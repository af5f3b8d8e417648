"""Optional OpenTelemetry bootstrap (graceful no-op if deps missing)."""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def setup_opentelemetry() -> None:
    """Best-effort OTel setup for the refresh worker process.

    Keeps runtime compatible when OpenTelemetry packages are absent.
    """
    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    except Exception as exc:
        logger.info("OpenTelemetry disabled (packages missing): %s", exc)
        return

    provider = trace.get_tracer_provider()
    if provider.__class__.__name__ != "ProxyTracerProvider":
        # Already initialized by another bootstrap.
        return

    tracer_provider = TracerProvider(
        resource=Resource.create({"service.name": "livescore-worker"})
    )
    tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(tracer_provider)

    try:
        from opentelemetry.instrumentation.celery import CeleryInstrumentor

        CeleryInstrumentor().instrument()
    except Exception as exc:
        logger.info("Celery OTel instrumentation unavailable: %s", exc)

    try:
        from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

        from livescore.db import engine

        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
    except Exception as exc:
        logger.info("SQLAlchemy OTel instrumentation unavailable: %s", exc)
