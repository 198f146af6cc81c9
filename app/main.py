# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Family Hub API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    FamilyHubException,
    application_error_handler,
    family_hub_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    admin,
    calendar,
    chat,
    checklist,
    content,
    cron,
    dashboard,
    doodles,
    family,
    health,
    priorities,
    reminders,
    shortcuts,
    tasks,
    weather,
)
from app.auth import routes as auth_routes
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs which optional integrations are switched on so a missing key
    shows up at startup rather than on the first request.
    """
    logger.info(f"Starting Family Hub API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        "Integrations: "
        f"llm={bool(settings.OPENAI_API_KEY)} "
        f"tasks={bool(settings.TODOIST_API_TOKEN)} "
        f"knowledge_base={bool(settings.NOTION_API_KEY)} "
        f"analytics={settings.analytics_enabled} "
        f"ical_feeds={len(settings.ical_feeds_list)}"
    )

    yield

    logger.info("Shutting down Family Hub API")


# Create FastAPI application
app = FastAPI(
    title="Family Hub API",
    description="""
## Family Dashboard API

Backend for the family hub: a kitchen display, the kids' kiosk and the
parents dashboard.

### What It Serves

| Area | Endpoints |
|------|-----------|
| **Calendar** | Cached iCal and phone events, free time, time suggestions |
| **Tasks** | House and per-kid task lists, reminders, weekly priorities |
| **Kids** | Daily checklists, doodles, jokes and fun facts |
| **Assistant** | Streaming chat with tools over the family's data |
| **Admin** | Family members, PIN users, checklist items, media |

### Callers Without a PIN

- Phone automations send `X-Shortcut-Key`
- The scheduler sends `Authorization: Bearer <CRON_SECRET>`
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "PIN login and token checks"},
        {"name": "Calendar", "description": "Family calendar and time blocking"},
        {"name": "Dashboard", "description": "Kitchen display widgets"},
        {"name": "Tasks", "description": "House and kid task lists"},
        {"name": "Reminders", "description": "Phone reminders per user"},
        {"name": "Checklist", "description": "Kids daily routine checklists"},
        {"name": "Doodles", "description": "Drawing board"},
        {"name": "Family", "description": "Family members and school feeds"},
        {"name": "Weather", "description": "Current conditions and forecast"},
        {"name": "Content", "description": "Joke and fun fact of the hour"},
        {"name": "Chat", "description": "Family assistant"},
        {"name": "Shortcuts", "description": "Phone automation push endpoints"},
        {"name": "Cron", "description": "Scheduled calendar sync"},
        {"name": "Priorities", "description": "Weekly priorities"},
        {"name": "Admin", "description": "Parents dashboard (adult token required)"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(FamilyHubException)
async def handle_family_hub_exception(request: Request, exc: FamilyHubException):
    """Handle custom Family Hub exceptions."""
    return await family_hub_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """Handle errors raised by integration clients."""
    return await application_error_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# House and kid task lists (/house-tasks, /kid-tasks/{name})
app.include_router(
    tasks.router,
    prefix="/api/v1",
    tags=["Tasks"]
)

_FEATURE_ROUTERS = [
    (calendar.router, "calendar", "Calendar"),
    (dashboard.router, "dashboard", "Dashboard"),
    (reminders.router, "reminders", "Reminders"),
    (checklist.router, "checklist", "Checklist"),
    (doodles.router, "doodles", "Doodles"),
    (family.router, "family", "Family"),
    (weather.router, "weather", "Weather"),
    (content.router, "content", "Content"),
    (chat.router, "chat", "Chat"),
    (shortcuts.router, "shortcuts", "Shortcuts"),
    (cron.router, "cron", "Cron"),
    (priorities.router, "priorities", "Priorities"),
    (admin.router, "admin", "Admin"),
]

for feature_router, path, tag in _FEATURE_ROUTERS:
    app.include_router(
        feature_router,
        prefix=f"/api/v1/{path}",
        tags=[tag]
    )


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Family Hub API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
