# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export configuration and logging helpers
# CREATED: 19 OCT 2026
# ============================================================================

from core.config import get_defaults, reset_defaults
from core.logging import configure_logging, log_context

__all__ = [
    "get_defaults",
    "reset_defaults",
    "configure_logging",
    "log_context",
]
