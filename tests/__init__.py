# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Family Hub API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_*_service.py / feature modules: Services against a fake Supabase
# - test_api.py: Root, health and error handling
#
# Run tests with: pytest
# =============================================================================
