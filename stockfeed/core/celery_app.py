# stockfeed/core/celery_app.py
from celery import Celery
from celery.schedules import crontab
from stockfeed.core.config import settings


def make_celery() -> Celery:
    celery = Celery(
        "stockfeed",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "stockfeed.tasks.refresh",
        ],
    )

    celery.conf.update(
        timezone=settings.CELERY_TIMEZONE,
        enable_utc=settings.CELERY_ENABLE_UTC,
        broker_connection_retry_on_startup=True,
        worker_concurrency=settings.CELERY_WORKER_CONCURRENCY,
    )

    if settings.CELERY_BEAT_ENABLED:
        celery.conf.beat_schedule = {
            'refresh-latest-prices': {
                'task': 'stockfeed.tasks.refresh.refresh_latest_prices_task',
                'schedule': crontab(minute=f'*/{settings.LATEST_REFRESH_MINUTES}'),
            },
        }
        celery.conf.beat_max_loop_interval = 10

    return celery


celery = make_celery()
