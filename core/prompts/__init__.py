# =============================================================================
# core/prompts/ - Chat Model Prompts
# =============================================================================
