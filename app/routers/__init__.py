# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - calendar.py: Cached calendar events and time-blocking helpers
# - dashboard.py: Today's events and the viewer's task list
# - tasks.py: House and kid task lists
# - reminders.py: Phone reminders per user
# - checklist.py: Kids checklist kiosk
# - doodles.py: Drawing board
# - family.py: Family members and school feeds
# - weather.py / content.py: Weather, jokes and fun facts
# - chat.py: Family assistant (streaming and quick chat)
# - shortcuts.py: Phone automation push endpoints
# - cron.py: Scheduled calendar sync
# - priorities.py: Weekly priorities
# - admin.py: Parents dashboard (adult token required)
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import calendar
from . import dashboard
from . import tasks
from . import reminders
from . import checklist
from . import doodles
from . import family
from . import weather
from . import content
from . import chat
from . import shortcuts
from . import cron
from . import priorities
from . import admin

__all__ = [
    "health",
    "calendar",
    "dashboard",
    "tasks",
    "reminders",
    "checklist",
    "doodles",
    "family",
    "weather",
    "content",
    "chat",
    "shortcuts",
    "cron",
    "priorities",
    "admin",
]
