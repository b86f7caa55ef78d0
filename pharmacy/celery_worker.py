# pharmacy/celery_worker.py
from celery import Celery
from celery.schedules import crontab

from pharmacy.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

celery_app = Celery(
    "pharmacy",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "pharmacy.tasks.daily_reset",
    "pharmacy.services.notification_service",
)

# Konfiguracja beat schedule
celery_app.conf.beat_schedule = {
    "reset-courier-daily-counters": {
        "task": "pharmacy.tasks.daily_reset.reset_courier_daily_counters_task",
        "schedule": crontab(hour=0, minute=0),  # o polnocy UTC
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
