"""Celery application for background ledger maintenance."""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "campus_backend.settings")

app = Celery("campus_backend")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
