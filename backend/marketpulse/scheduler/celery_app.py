from datetime import timedelta

from celery import Celery

from marketpulse.core.config import settings

app = Celery("marketpulse")
app.conf.broker_url = settings.CELERY_BROKER_URL
app.conf.result_backend = settings.CELERY_RESULT_BACKEND
app.conf.timezone = settings.CELERY_TIMEZONE
app.conf.enable_utc = False

app.autodiscover_tasks(["marketpulse.tasks"], related_name="refresh")

app.conf.beat_schedule = {
    "refresh-watchlist": {
        "task": "marketpulse.tasks.refresh.refresh_watchlist",
        "schedule": timedelta(minutes=settings.REFRESH_INTERVAL_MINUTES),
    },
}
