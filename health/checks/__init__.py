# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Checker implementations
# PURPOSE: Built-in checkers for ports, services and endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Built-in checkers, in execution order:

- ports (priority 10): TCP connect, 1s timeout
- services (priority 20): `systemctl is-active`, 5s timeout
- endpoints (priority 30): HTTP(S) GET, 10s timeout

Import this module to register all checkers on the global registry:
    import health.checks
"""

# Import all check modules to trigger registration
from health.checks.ports import PortCheck, check_ports
from health.checks.services import (
    ServiceCheck,
    ServiceStateQuery,
    SystemctlServiceQuery,
    check_services,
)
from health.checks.endpoints import EndpointCheck, check_endpoints

__all__ = [
    # Ports
    "PortCheck",
    "check_ports",
    # Services
    "ServiceCheck",
    "ServiceStateQuery",
    "SystemctlServiceQuery",
    "check_services",
    # Endpoints
    "EndpointCheck",
    "check_endpoints",
]
