# backend/liveclass/tasks/beat_schedule.py
"""
Celery Beat schedule configuration.
"""

from datetime import timedelta
from typing import Any

SESSION_SYNC_TASK = "liveclass.tasks.session_sync_tasks.sync_provider_sessions"


def get_beat_schedule(sync_interval_minutes: int = 60) -> dict[str, dict[str, Any]]:
    """
    Build the beat schedule.

    Args:
        sync_interval_minutes: Minutes between reconciliation sweeps; 0 disables it

    Returns:
        Mapping of schedule entry name to Celery beat configuration dict
    """
    schedule: dict[str, dict[str, Any]] = {}
    if sync_interval_minutes > 0:
        schedule["sync-provider-sessions"] = {
            "task": SESSION_SYNC_TASK,
            "schedule": timedelta(minutes=sync_interval_minutes),
            "options": {
                "queue": "sync",
                # A sweep that waited longer than one interval is superseded by the next
                "expires": sync_interval_minutes * 60,
            },
        }
    return schedule
