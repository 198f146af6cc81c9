# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the family hub's business logic:
# - models/: Pydantic schemas for data validation
# - services/: Supabase queries and external API orchestration
#
# Routes stay thin and delegate here, so the same logic serves the HTTP
# API, the Celery worker and the chat assistant's tools.
# =============================================================================
