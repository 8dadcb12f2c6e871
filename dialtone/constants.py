# dialtone/constants.py
"""
Default constants for the Dialtone client.
All fixed wire values and defaults are centralised here so the rest of the
package never hard-codes them.
"""

# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------
DIALTONE_BASE_URL: str = "https://dialtone-app.fly.dev"
"""Hosted Dialtone endpoint used when no base_url is configured."""

API_VERSION: str = "v0"

CHAT_COMPLETIONS_PATH: str = f"/{API_VERSION}/chat/completions"

# ---------------------------------------------------------------------------
# Dials
# ---------------------------------------------------------------------------
DEFAULT_QUALITY: float = 0.5
DEFAULT_COST: float = 0.5

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
UNEXPECTED_ERROR_STATUS: int = 418
"""
Internal marker status for failures that never produced a real HTTP status
(transport faults, malformed success bodies). Not a protocol code.
"""

UNEXPECTED_ERROR_MESSAGE: str = "Failed to create chat completion due to an unexpected error"

NO_STATUS_OR_BODY_MESSAGE: str = "(no status code or body)"

ERROR_CODE_PROVIDER_MODERATION: str = "provider_moderation"
ERROR_CODE_CONFIGURATION: str = "configuration_error"

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------
ENV_API_KEY: str = "DIALTONE_API_KEY"
ENV_BASE_URL: str = "DIALTONE_BASE_URL"
ENV_PROVIDER_KEY_TMPL: str = "{provider}_API_KEY"
"""Per-provider credential variable, e.g. OPENAI_API_KEY, GROQ_API_KEY."""
