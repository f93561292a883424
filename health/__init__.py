# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Probe aggregation engine
# PURPOSE: Check ports, services and endpoints; aggregate to one verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Plugin-based probe engine:
- HealthCheckPlugin: Base class for checkers
- HealthCheckRegistry: Checker registration, ordered by priority
- HealthCheckExecutor: Sequential execution and AND aggregation
- health_router: GET /healthy

Usage:
    import health.checks  # register built-in checkers
    from health import HealthCheckExecutor

    report = await HealthCheckExecutor().run_all(config)
"""

from health.core import (
    HealthStatus,
    HealthReport,
    CheckerResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
)
from health.executor import HealthCheckExecutor
from health.router import health_router

__all__ = [
    # Core types
    "HealthStatus",
    "HealthReport",
    "CheckerResult",
    "HealthCheckPlugin",
    "HealthCheckCategory",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    # Executor
    "HealthCheckExecutor",
    # Router
    "health_router",
]
