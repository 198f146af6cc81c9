# =============================================================================
# core/services/__init__.py - Service Layer
# =============================================================================
# Each module holds one static-method service class that wraps the
# Supabase queries or external API calls for one feature. Routes, Celery
# tasks and the chat tool executor all call into these.
# =============================================================================
