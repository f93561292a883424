# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Exception hierarchy
# PURPOSE: Fatal startup errors and request-level auth failures
# CREATED: 19 OCT 2026
# ============================================================================
"""
Error Taxonomy

Fatal errors (process exits non-zero):
- ConfigError: config file missing, malformed or failing validation
- ServerStartupError: listener bind failure or unusable TLS material

Request errors:
- AuthenticationError: HTTP Basic credentials missing or wrong (401)

Probe failures are never raised. Each checker converts them into a
per-target failure message.
"""


class HealthApiError(Exception):
    """Base class for Server Health API errors."""


class ConfigError(HealthApiError):
    """Configuration could not be loaded or validated."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ServerStartupError(HealthApiError):
    """Listener could not be started."""


class AuthenticationError(HealthApiError):
    """Request rejected by the auth gate."""

    def __init__(self, realm: str = "Restricted"):
        self.realm = realm
        super().__init__("Unauthorized")


__all__ = [
    "HealthApiError",
    "ConfigError",
    "ServerStartupError",
    "AuthenticationError",
]
