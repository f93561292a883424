# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Config file model, loader and non-file defaults for the Server Health API.
"""

from core.config.defaults import (
    TimeoutDefaults,
    ServerDefaults,
    get_defaults,
)
from core.config.models import (
    ListenConfig,
    SSLConfig,
    AuthConfig,
    AppConfig,
    ServiceTarget,
    PortTarget,
    EndpointTarget,
    HealthConfig,
)
from core.config.loader import (
    load_config,
    parse_config,
    resolve_config_path,
)

__all__ = [
    # Defaults
    "TimeoutDefaults",
    "ServerDefaults",
    "get_defaults",
    # Models
    "ListenConfig",
    "SSLConfig",
    "AuthConfig",
    "AppConfig",
    "ServiceTarget",
    "PortTarget",
    "EndpointTarget",
    "HealthConfig",
    # Loader
    "load_config",
    "parse_config",
    "resolve_config_path",
]
