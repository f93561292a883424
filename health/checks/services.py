# ============================================================================
# SERVICE HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - Service manager state checker
# PURPOSE: Compare service active states against expected values
# CREATED: 19 OCT 2026
# ============================================================================
"""
Service Health Checks

For each configured service:
1. Validate the name against an allow-list (alphanumerics and @ : . _ -).
   A name outside the list fails as "invalid" and is never passed to
   the service manager.
2. Ask the service manager for the current state.
3. Compare it, exactly and case-sensitively, to the expected status.

The service manager sits behind ServiceStateQuery. The default,
SystemctlServiceQuery, runs `systemctl is-active <name>` as an argument
vector (no shell) with a timeout.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from core.config.defaults import ServerDefaults, get_defaults
from core.config.models import HealthConfig, ServiceTarget
from health.core import (
    CheckerResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import register_check

logger = logging.getLogger(__name__)

SERVICE_NAME_PATTERN = re.compile(r"[a-zA-Z0-9@:._-]+")

def is_valid_service_name(name: str) -> bool:
    """Check a service name against the allow-list."""
    return SERVICE_NAME_PATTERN.fullmatch(name) is not None


class ServiceStateQuery(ABC):
    """Capability: report the current state of a named service."""

    @abstractmethod
    async def query(self, name: str) -> Tuple[str, bool]:
        """
        Query one service.

        Returns:
            (state, ok): raw state text (possibly empty) and whether the
            query itself succeeded
        """


class SystemctlServiceQuery(ServiceStateQuery):
    """
    Query systemd via `systemctl is-active`.

    The subprocess is killed if it does not finish within `timeout`.

    Only exit 0 is a successful query. `is-active` exits 3 both for
    units that are stopped and for units that do not exist, printing
    "inactive" either way, so any non-zero exit fails the target.
    """

    def __init__(
        self,
        binary: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.binary = binary or ServerDefaults.service_manager
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return get_defaults().timeouts.service_query_seconds

    async def query(self, name: str) -> Tuple[str, bool]:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary, "is-active", name,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug(f"Cannot run {self.binary}: {e}")
            return "", False

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{self.binary} is-active {name} timed out after {self.timeout}s")
            proc.kill()
            await proc.wait()
            return "", False

        state = stdout.decode("utf-8", errors="replace").strip()
        ok = proc.returncode == 0 and bool(state)
        if not ok:
            logger.debug(f"{self.binary} is-active {name} exited {proc.returncode}")
        return state, ok


async def check_services(
    targets: Sequence[ServiceTarget],
    query: Optional[ServiceStateQuery] = None,
    timeout: Optional[float] = None,
) -> CheckerResult:
    """
    Check every service target in order.

    Args:
        targets: Configured services
        query: Service manager capability (default: systemctl)
        timeout: Per-query timeout for the default query (default 5s)

    Returns:
        CheckerResult with one message per target
    """
    if query is None:
        query = SystemctlServiceQuery(timeout=timeout)

    result = CheckerResult()
    for target in targets:
        if not is_valid_service_name(target.name):
            logger.warning(f"Rejected invalid service name: {target.name!r}")
            result.record(False, f"Service Name: {target.name} is invalid")
            continue

        state, ok = await query.query(target.name)

        if ok and state == target.status:
            result.record(
                True,
                f"Service Name: {target.name}, Status: {target.status} is as expected",
            )
        else:
            result.record(
                False,
                f"Service Name: {target.name}, Expected Status: {target.status}, "
                f"Actual Status: {state}",
            )
    return result


@register_check(category="services")
class ServiceCheck(HealthCheckPlugin):
    """Service manager state of configured services."""

    name = "services"
    category = HealthCheckCategory.SERVICES

    def __init__(self, query: Optional[ServiceStateQuery] = None):
        self.query = query or SystemctlServiceQuery()

    @property
    def timeout_seconds(self) -> Optional[float]:
        return getattr(self.query, "timeout", None)

    def targets(self, config: HealthConfig) -> Sequence[ServiceTarget]:
        return config.services

    async def check(self, targets: Sequence[ServiceTarget]) -> CheckerResult:
        return await check_services(targets, self.query)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SERVICE_NAME_PATTERN",
    "is_valid_service_name",
    "ServiceStateQuery",
    "SystemctlServiceQuery",
    "check_services",
    "ServiceCheck",
]
