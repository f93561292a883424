# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probe timeouts, shutdown and file locations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Values that are not part of the YAML config file. Probe timeouts are
fixed per probe type; only the service query timeout and the config file
location can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from core.errors import ConfigError


def _env_seconds(name: str, default: float) -> float:
    """Positive number of seconds from `name`, or `default` when unset."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"Invalid value for {name}: {raw!r} (expected seconds)") from None
    if not value > 0:
        raise ConfigError(f"Invalid value for {name}: {raw!r} (must be positive)")
    return value


@dataclass(frozen=True)
class TimeoutDefaults:
    """
    Probe and lifecycle timeouts (seconds).

    Every probe is bounded so one slow target cannot stall a request.
    """
    port_connect_seconds: float = 1.0
    endpoint_request_seconds: float = 10.0
    service_query_seconds: float = 5.0

    # Drain window for in-flight requests after SIGINT/SIGTERM
    shutdown_grace_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        """
        Create from environment variables.

        Raises:
            ConfigError: HEALTH_SERVICE_TIMEOUT is not a positive number
        """
        return cls(
            service_query_seconds=_env_seconds("HEALTH_SERVICE_TIMEOUT", 5.0),
        )


@dataclass(frozen=True)
class ServerDefaults:
    """
    Defaults for process startup and the HTTP surface.
    """
    config_file: str = "config.yaml"
    health_path: str = "/healthy"
    auth_realm: str = "Restricted"

    # Service manager binary used for `<bin> is-active <name>`
    service_manager: str = "systemctl"

    @classmethod
    def from_env(cls) -> "ServerDefaults":
        """Create from environment variables."""
        return cls(
            config_file=os.getenv("HEALTHCHECK_CONFIG_FILE", "config.yaml"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)
    server: ServerDefaults = field(default_factory=ServerDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            timeouts=TimeoutDefaults.from_env(),
            server=ServerDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TimeoutDefaults",
    "ServerDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
