# ============================================================================
# PORT HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - TCP reachability checker
# PURPOSE: Verify configured address:port pairs accept connections
# CREATED: 19 OCT 2026
# ============================================================================
"""
Port Health Checks

For each configured port, open a TCP connection with a 1 second bound.
A completed handshake passes and the connection is closed at once
without exchanging data. Timeouts, refusals, unreachable hosts and DNS
failures all fail with the same message.
"""

import asyncio
import logging
from typing import Optional, Sequence

from core.config.defaults import get_defaults
from core.config.models import HealthConfig, PortTarget
from health.core import (
    CheckerResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import register_check

logger = logging.getLogger(__name__)


async def probe_port(address: str, port: int, timeout: float) -> bool:
    """
    Attempt one TCP connection.

    Returns:
        True if the handshake completed within `timeout`
    """
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(address, port),
            timeout=timeout,
        )
    except (OSError, asyncio.TimeoutError) as e:
        logger.debug(f"Port probe {address}:{port} failed: {type(e).__name__}: {e}")
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        # Peer reset after a completed handshake still counts as reachable
        logger.debug(f"Port probe {address}:{port} close error: {e}")
    return True


async def check_ports(
    targets: Sequence[PortTarget],
    timeout: Optional[float] = None,
) -> CheckerResult:
    """
    Probe every port target in order.

    Args:
        targets: Configured ports
        timeout: Connect timeout per target (default 1s)

    Returns:
        CheckerResult with one message per target
    """
    if timeout is None:
        timeout = get_defaults().timeouts.port_connect_seconds

    result = CheckerResult()
    for target in targets:
        if await probe_port(target.address, target.port, timeout):
            result.record(
                True,
                f"Port Name: {target.name}, Port: {target.port} is available",
            )
        else:
            result.record(
                False,
                f"Port Name: {target.name}, Port: {target.port} is not available",
            )
    return result


@register_check(category="ports")
class PortCheck(HealthCheckPlugin):
    """TCP reachability of configured ports."""

    name = "ports"
    category = HealthCheckCategory.PORTS

    def __init__(self, timeout_seconds: Optional[float] = None):
        self._timeout_seconds = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        if self._timeout_seconds is not None:
            return self._timeout_seconds
        return get_defaults().timeouts.port_connect_seconds

    def targets(self, config: HealthConfig) -> Sequence[PortTarget]:
        return config.ports

    async def check(self, targets: Sequence[PortTarget]) -> CheckerResult:
        return await check_ports(targets, timeout=self.timeout_seconds)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "probe_port",
    "check_ports",
    "PortCheck",
]
