# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# scheduled calendar syncs and off-request analytics writes.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (calendar sync, chat analytics)
# - config.py: Worker settings and the beat schedule
#
# Usage:
#   # Start worker with the embedded beat scheduler
#   celery -A workers.celery_app worker --beat -Q default,sync --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import sync_calendars
#   result = sync_calendars.delay()
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
