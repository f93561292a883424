# ============================================================================
# ENDPOINT HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - HTTP(S) status code checker
# PURPOSE: Verify configured URLs answer GET with an acceptable status
# CREATED: 19 OCT 2026
# ============================================================================
"""
Endpoint Health Checks

For each configured endpoint, issue a GET with a 10 second timeout and
compare the status code against `statuses` plus `status`.

- https:// targets use a client that skips certificate verification, so
  self-signed and internal certificates do not fail the check. A target
  can opt back in with `verifyTLS: true`. This relaxation applies to
  outbound probes only, never to the server's own TLS listener.
- Redirects are not followed; the first status code is what counts.
- The body is never read. Each response is closed as soon as the status
  line is available, before the next target is probed.
- The timeout covers the whole request, so a server that trickles its
  response headers cannot hold a probe past it.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional, Sequence

import httpx

from core.config.defaults import get_defaults
from core.config.models import EndpointTarget, HealthConfig
from health.core import (
    CheckerResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import register_check

logger = logging.getLogger(__name__)

# (verify_tls, timeout_seconds) -> client
ClientFactory = Callable[[bool, float], httpx.AsyncClient]


def default_client_factory(verify: bool, timeout: float) -> httpx.AsyncClient:
    """Plain httpx client; `verify=False` disables certificate checks."""
    return httpx.AsyncClient(
        verify=verify,
        timeout=timeout,
        follow_redirects=False,
    )


async def _request_status(client: httpx.AsyncClient, url: str) -> int:
    async with client.stream("GET", url) as response:
        return response.status_code


async def probe_endpoint(
    client: httpx.AsyncClient,
    url: str,
    timeout: Optional[float] = None,
) -> Optional[int]:
    """
    GET `url` and return the status code, or None on transport failure.

    The response is streamed and released without reading the body.
    `timeout` bounds the whole exchange up to the status line; the
    client's own timeouts only bound each connect or read.
    """
    try:
        if timeout is None:
            return await _request_status(client, url)
        return await asyncio.wait_for(_request_status(client, url), timeout=timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug(f"Endpoint probe {url} failed: {type(e).__name__}: {e}")
        return None
    except asyncio.TimeoutError:
        logger.debug(f"Endpoint probe {url} exceeded {timeout}s")
        return None


async def check_endpoints(
    targets: Sequence[EndpointTarget],
    timeout: Optional[float] = None,
    client_factory: Optional[ClientFactory] = None,
) -> CheckerResult:
    """
    Probe every endpoint target in order.

    Args:
        targets: Configured endpoints
        timeout: Request timeout per target (default 10s)
        client_factory: Builds clients; defaults to default_client_factory

    Returns:
        CheckerResult with one message per target
    """
    if timeout is None:
        timeout = get_defaults().timeouts.endpoint_request_seconds
    factory = client_factory or default_client_factory

    result = CheckerResult()
    # At most two clients per call: verifying and non-verifying
    clients: Dict[bool, httpx.AsyncClient] = {}
    try:
        for target in targets:
            verify = target.verify_tls or not target.is_https
            if verify not in clients:
                clients[verify] = factory(verify, timeout)

            status_code = await probe_endpoint(clients[verify], target.url, timeout=timeout)

            if status_code is None:
                result.record(
                    False,
                    f"Endpoint Name: {target.name}, URL: {target.url} is not reachable",
                )
            elif status_code in target.accepted_statuses:
                result.record(
                    True,
                    f"Endpoint Name: {target.name}, URL: {target.url}, "
                    f"Status: {status_code} is as expected",
                )
            else:
                result.record(
                    False,
                    f"Endpoint Name: {target.name}, URL: {target.url}, "
                    f"Status: {target.status} is not as expected, got: {status_code}",
                )
    finally:
        for client in clients.values():
            await client.aclose()

    return result


@register_check(category="endpoints")
class EndpointCheck(HealthCheckPlugin):
    """HTTP(S) status codes of configured endpoints."""

    name = "endpoints"
    category = HealthCheckCategory.ENDPOINTS

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self._timeout_seconds = timeout_seconds
        self.client_factory = client_factory

    @property
    def timeout_seconds(self) -> float:
        if self._timeout_seconds is not None:
            return self._timeout_seconds
        return get_defaults().timeouts.endpoint_request_seconds

    def targets(self, config: HealthConfig) -> Sequence[EndpointTarget]:
        return config.endpoints

    async def check(self, targets: Sequence[EndpointTarget]) -> CheckerResult:
        return await check_endpoints(
            targets,
            timeout=self.timeout_seconds,
            client_factory=self.client_factory,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ClientFactory",
    "default_client_factory",
    "probe_endpoint",
    "check_endpoints",
    "EndpointCheck",
]
