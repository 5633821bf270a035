# backend/liveclass/tasks/__init__.py
"""
Celery tasks package.

Importing the package registers every task with the Celery app.
"""

from liveclass.tasks.celery_app import BaseTask, celery_app
from liveclass.tasks.session_sync_tasks import sync_provider_sessions

__all__ = ["BaseTask", "celery_app", "sync_provider_sessions"]
