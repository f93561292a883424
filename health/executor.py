# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Per-request check aggregation
# PURPOSE: Run all checkers for one request and reduce to a verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Executes checkers with:
- Sequential execution in priority order (ports, services, endpoints)
- A request-local message list, so concurrent requests never share state
- Result aggregation with AND semantics

Every checker always runs, even after an earlier one failed, so each
configured target contributes exactly one message to the report.
"""

import logging
import time
from typing import List, Optional

from core.config.models import HealthConfig
from core.logging import get_logger, log_context
from health.core import (
    CheckerResult,
    HealthCheckPlugin,
    HealthReport,
)
from health.registry import HealthCheckRegistry, get_registry

logger = get_logger(__name__)


class HealthCheckExecutor:
    """
    Runs the registered checkers against a config.

    Holds no per-request state; one instance serves all requests.
    """

    def __init__(self, registry: Optional[HealthCheckRegistry] = None):
        """
        Initialize executor.

        Args:
            registry: Checker registry (uses global if None)
        """
        self.registry = registry or get_registry()

    async def run_all(self, config: HealthConfig) -> HealthReport:
        """
        Execute all checkers.

        Args:
            config: Loaded config (read only)

        Returns:
            HealthReport with one message per configured target
        """
        start_time = time.monotonic()
        results: List[CheckerResult] = []

        for check in self.registry.get_checks_by_priority():
            with log_context(check=check.name):
                results.append(await self._execute_check(check, config))

        duration_ms = (time.monotonic() - start_time) * 1000
        report = HealthReport.from_results(results, duration_ms=duration_ms)

        log = logger.info if report.healthy else logger.warning
        log(
            f"Health check complete: {report.status.value} "
            f"({len(report.messages)} targets, {report.failures} failed, "
            f"{duration_ms:.1f}ms)",
            extra={
                "targets": len(report.messages),
                "failures": report.failures,
                "duration_ms": round(duration_ms, 1),
            },
        )
        return report

    async def _execute_check(
        self,
        check: HealthCheckPlugin,
        config: HealthConfig,
    ) -> CheckerResult:
        """Run one checker; an unexpected error fails each of its targets."""
        targets = check.targets(config)
        start_time = time.monotonic()

        try:
            result = await check.check(targets)
        except Exception as e:
            logger.exception(f"Health check {check.name} raised: {e}")
            result = CheckerResult()
            for target in targets:
                result.record(
                    False,
                    f"Check {check.name}: {getattr(target, 'name', target)} could not be evaluated",
                )
            return result

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Health check {check.name}: passed={result.passed} "
                f"({(time.monotonic() - start_time) * 1000:.1f}ms)"
            )
        return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckExecutor",
]
