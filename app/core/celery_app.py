# app/core/celery_app.py
from datetime import timedelta

from celery import Celery
from app.core.config import settings


def make_celery() -> Celery:
    celery = Celery(
        "app",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "app.tasks.refresh",
        ],
    )

    celery.conf.update(
        timezone=settings.CELERY_TIMEZONE,
        enable_utc=settings.CELERY_ENABLE_UTC,
        broker_connection_retry_on_startup=True,
        worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    )

    if settings.CELERY_BEAT_ENABLED:
        if settings.QUOTE_REFRESH_MINUTES < 1:
            raise ValueError("QUOTE_REFRESH_MINUTES must be at least 1")
        celery.conf.beat_schedule = {
            'refresh-watchlist-quotes': {
                'task': 'app.tasks.refresh.refresh_watchlist_quotes_task',
                'schedule': timedelta(minutes=settings.QUOTE_REFRESH_MINUTES),
            },
        }
        celery.conf.beat_max_loop_interval = 10

    return celery


celery = make_celery()
