from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from partnerhub.core.config import settings
from partnerhub.core.logging import configure_logging


celery_app = Celery(
    "partnerhub",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND or None,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    timezone=settings.DEFAULT_TIMEZONE,
    include=["partnerhub.health_scoring.tasks"],
)

# Celery Beat schedule: recompute every eligible project once a day
celery_app.conf.beat_schedule = {
    "daily-health-score-recompute": {
        "task": "health_scoring.daily_recompute",
        "schedule": crontab(
            hour=settings.HEALTH_SCORE_CRON_HOUR,
            minute=settings.HEALTH_SCORE_CRON_MINUTE,
        ),
    },
}


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging()
