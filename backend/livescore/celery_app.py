"""Celery application — RabbitMQ broker, Redis result backend.

A single `score` queue carries the refresh tasks; Beat triggers the
full-fleet refresh on a fixed interval.
"""
from __future__ import annotations

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging
from kombu import Exchange, Queue

from livescore.config import settings
from livescore.logging_config import setup_logging
from livescore.observability import setup_opentelemetry

celery = Celery(
    "livescore",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.REDIS_URL,
)

# Best-effort OTel bootstrap for worker process imports.
setup_opentelemetry()


@celery_setup_logging.connect
def _configure_worker_logging(**_kwargs) -> None:
    setup_logging()


# ── Serialisation ──
celery.conf.accept_content = ["json"]
celery.conf.task_serializer = "json"
celery.conf.result_serializer = "json"
celery.conf.timezone = "UTC"
celery.conf.enable_utc = True

# ── Reliability ──
celery.conf.task_acks_late = True
celery.conf.worker_prefetch_multiplier = 1
celery.conf.task_reject_on_worker_lost = True

# ── Exchanges & Queues ──
default_exchange = Exchange("livescore", type="direct")

celery.conf.task_queues = (
    Queue("score", default_exchange, routing_key="score"),
    Queue("dead_letter", default_exchange, routing_key="dead_letter"),
)

celery.conf.task_default_queue = "score"
celery.conf.task_default_exchange = "livescore"
celery.conf.task_default_routing_key = "score"

# ── Task routes ──
celery.conf.task_routes = {
    "livescore.workers.refresh.run_score_refresh": {"queue": "score"},
    "livescore.workers.refresh.run_venue_refresh": {"queue": "score"},
}

# ── Beat Schedule ──
celery.conf.beat_schedule = {
    "refresh-scores": {
        "task": "livescore.workers.refresh.run_score_refresh",
        "schedule": float(settings.REFRESH_INTERVAL_S),
    },
}

# ── Task modules ──
celery.conf.imports = ("livescore.workers.refresh",)
