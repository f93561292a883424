# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Base classes for checkers
# PURPOSE: Checker plugin interface and result types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the checker plugin interface and result types.

A checker probes one kind of target (ports, services, endpoints) and
yields a CheckerResult: one message per target plus a pass flag.
The executor reduces the checker results of a request into a
HealthReport (logical AND across all targets).

Categories (execution order by priority):
1. Ports (10)
2. Services (20)
3. Endpoints (30)

Order only affects message ordering, never the verdict.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence

from core.config.models import HealthConfig


class HealthStatus(str, Enum):
    """Overall verdict, rendered verbatim in the response body."""
    HEALTHY = "Server is healthy"
    UNHEALTHY = "Server is unhealthy"

    @property
    def http_code(self) -> int:
        return 200 if self is HealthStatus.HEALTHY else 500

    @classmethod
    def aggregate(cls, passed: Sequence[bool]) -> "HealthStatus":
        """All passed -> healthy. No checks at all is healthy."""
        return cls.HEALTHY if all(passed) else cls.UNHEALTHY


class HealthCheckCategory(str, Enum):
    """Checker categories with default priorities."""
    PORTS = "ports"            # Priority 10: TCP reachability
    SERVICES = "services"      # Priority 20: service manager state
    ENDPOINTS = "endpoints"    # Priority 30: HTTP(S) status codes

    @property
    def default_priority(self) -> int:
        """Get default priority for category."""
        priorities = {
            HealthCheckCategory.PORTS: 10,
            HealthCheckCategory.SERVICES: 20,
            HealthCheckCategory.ENDPOINTS: 30,
        }
        return priorities[self]


@dataclass
class CheckerResult:
    """
    Result of one checker over its targets.

    Created fresh for every call; never shared between requests.
    """
    passed: bool = True
    messages: List[str] = field(default_factory=list)
    failures: int = 0

    def record(self, ok: bool, message: str) -> None:
        """Append the message for one target."""
        self.messages.append(message)
        if not ok:
            self.passed = False
            self.failures += 1

    def __len__(self) -> int:
        return len(self.messages)


@dataclass
class HealthReport:
    """Aggregated result for one /healthy request."""
    status: HealthStatus
    messages: List[str]
    failures: int = 0
    duration_ms: float = 0.0

    @classmethod
    def from_results(
        cls,
        results: Sequence[CheckerResult],
        duration_ms: float = 0.0,
    ) -> "HealthReport":
        messages: List[str] = []
        for result in results:
            messages.extend(result.messages)
        return cls(
            status=HealthStatus.aggregate([r.passed for r in results]),
            messages=messages,
            failures=sum(r.failures for r in results),
            duration_ms=duration_ms,
        )

    @property
    def healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    @property
    def http_status(self) -> int:
        return self.status.http_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "messages": list(self.messages),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for checkers.

    A checker selects its targets from the config and probes each one,
    recording exactly one message per target. Probe failures must be
    recorded, not raised.

    Attributes:
        name: Unique identifier for the checker
        category: Checker category (determines priority)
        priority: Execution priority (lower runs first)
        timeout_seconds: Per-target probe timeout
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.ENDPOINTS
    priority: int = 50
    timeout_seconds: float = 10.0

    @abstractmethod
    def targets(self, config: HealthConfig) -> Sequence[Any]:
        """Targets of this checker, in configured order."""

    @abstractmethod
    async def check(self, targets: Sequence[Any]) -> CheckerResult:
        """Probe every target sequentially."""

    def __init_subclass__(cls, **kwargs):
        """Set default priority from category if not specified."""
        super().__init_subclass__(**kwargs)
        if cls.priority == 50 and hasattr(cls, "category"):
            cls.priority = cls.category.default_priority


__all__ = [
    "HealthStatus",
    "HealthCheckCategory",
    "CheckerResult",
    "HealthReport",
    "HealthCheckPlugin",
]
