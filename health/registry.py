# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Checker registration
# PURPOSE: Hold the checkers and hand them out in execution order
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

The built-in checkers register themselves on the global registry when
`health.checks` is imported:

    @register_check(category="ports")
    class PortCheck(HealthCheckPlugin):
        ...

Tests and custom wiring build their own registry instead:

    registry = HealthCheckRegistry([PortCheck(), ServiceCheck(query=fake)])
    executor = HealthCheckExecutor(registry)

Execution order is ascending priority (ports 10, services 20,
endpoints 30); ties keep registration order.
"""

import logging
from typing import Dict, Iterable, List, Optional, Type, Union

from health.core import (
    HealthCheckPlugin,
    HealthCheckCategory,
)

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """Checkers keyed by name. One checker per name."""

    def __init__(self, checks: Optional[Iterable[HealthCheckPlugin]] = None):
        self._checks: Dict[str, HealthCheckPlugin] = {}
        for check in checks or ():
            self.register(check)

    def register(self, check: HealthCheckPlugin) -> None:
        """Add a checker; an existing checker with the same name is replaced."""
        replaced = self._checks.pop(check.name, None)
        if replaced is not None:
            logger.warning(f"Replacing health check {check.name!r}")
        self._checks[check.name] = check
        logger.debug(f"Registered health check {check.name!r} (priority {check.priority})")

    def register_class(self, check_class: Type[HealthCheckPlugin], **kwargs) -> HealthCheckPlugin:
        """Instantiate `check_class(**kwargs)` and register the instance."""
        check = check_class(**kwargs)
        self.register(check)
        return check

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        return self._checks.get(name)

    def get_checks_by_priority(self) -> List[HealthCheckPlugin]:
        """Checkers in execution order."""
        return sorted(self._checks.values(), key=lambda check: check.priority)

    def clear(self) -> None:
        self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


# ============================================================================
# GLOBAL REGISTRY
# ============================================================================

_registry: Optional[HealthCheckRegistry] = None


def get_registry() -> HealthCheckRegistry:
    """Registry used by HealthCheckExecutor when none is given."""
    global _registry
    if _registry is None:
        _registry = HealthCheckRegistry()
    return _registry


def register_check(
    category: Union[str, HealthCheckCategory, None] = None,
    priority: Optional[int] = None,
):
    """
    Class decorator: set category/priority, then register a default
    instance on the global registry.

    Without an explicit priority the category's default is used.
    """
    def decorator(cls: Type[HealthCheckPlugin]) -> Type[HealthCheckPlugin]:
        if category is not None:
            cls.category = HealthCheckCategory(category)
        cls.priority = priority if priority is not None else cls.category.default_priority
        get_registry().register_class(cls)
        return cls

    return decorator


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
    "get_registry",
    "register_check",
]
