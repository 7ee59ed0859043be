"""Test settings for the fleet reservation service.

SQLite on a file so threaded tests share one database, IMMEDIATE
transactions so concurrent writers serialize, and Celery tasks run eagerly.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

RESERVATION_TRANSACTION_TIMEOUT_SECONDS = 10

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': RESERVATION_TRANSACTION_TIMEOUT_SECONDS,
        },
        'TEST': {
            'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        },
    }
}

RESERVATION_HOLD_SECONDS = 300
RESERVATION_MAX_SPAN_DAYS = 30
RESERVATION_REAPER_INTERVAL_SECONDS = 10

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOGGING["root"]["level"] = "CRITICAL"  # noqa: F405
LOGGING["loggers"]["apps"]["level"] = "WARNING"  # noqa: F405
LOGGING["loggers"]["shared"]["level"] = "WARNING"  # noqa: F405
