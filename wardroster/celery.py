"""
Celery application configuration for WardRoster.

Tasks are auto-discovered from each Django app's tasks.py module.
Two queues are defined:
  - default: general background work
  - notifications: simulated email delivery for staff notifications
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "wardroster.settings.local")

app = Celery("wardroster")

# Read configuration from Django settings, namespaced under CELERY_
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()
