import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("fleet_reservations")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

REAPER_INTERVAL_SECONDS = float(os.environ.get("RESERVATION_REAPER_INTERVAL_SECONDS", 10))

app.conf.beat_schedule = {
    # Expire abandoned holds, independent of the hold duration
    "expire-stale-holds": {
        "task": "reservations.expire_stale_holds",
        "schedule": REAPER_INTERVAL_SECONDS,
        "options": {"expires": REAPER_INTERVAL_SECONDS},
    },
}
