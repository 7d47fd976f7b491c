"""
Celery configuration for the messaging backend.

Request handling is fully synchronous; Celery only runs housekeeping on a
beat schedule (see CELERY_BEAT_SCHEDULE in settings), currently the sweep
that expires stale typing indicators.

Tasks are auto-discovered from the ``tasks.py`` module of every installed app.

Usage:
    from celery import shared_task

    @shared_task
    def expire_typing_indicators():
        ...

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
