# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core module initialization
# PURPOSE: Export error taxonomy shared by all packages
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.errors import (
    HealthApiError,
    ConfigError,
    ServerStartupError,
    AuthenticationError,
)

__all__ = [
    "HealthApiError",
    "ConfigError",
    "ServerStartupError",
    "AuthenticationError",
]
