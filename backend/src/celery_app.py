"""Celery application for scheduled background jobs.

Worker:
    celery -A celery_app worker --loglevel=INFO
Beat (schedule):
    celery -A celery_app beat

Beat must run as a single instance: the retention job is not safe against
two overlapping runs.
"""

from celery import Celery
from celery.schedules import crontab

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "hrm",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["retention.tasks"],
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_acks_late=False,
)

celery_app.conf.beat_schedule = {
    'retention-cleanup-daily': {
        'task': 'retention.cleanup',
        'schedule': crontab(hour=2, minute=0),  # 02:00 UTC
        'options': {
            'expires': 3600,  # Task expires after 1 hour if not picked up
        },
    },
}
