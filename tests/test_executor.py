# ============================================================================
# EXECUTOR + REGISTRY TESTS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Tests - Checker ordering and verdict aggregation
# PURPOSE: Verify message ordering, counts and the AND verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Executor + Registry Tests

Covers:
1. Registry ordering by priority
2. One message per configured target
3. Verdict = AND over all targets; no short-circuit
4. A checker that raises fails its own targets only
5. HealthReport / HealthStatus rendering

Run with:
    pytest tests/test_executor.py -v
"""

import asyncio
import logging
from typing import Any, Sequence

import httpx
import pytest

from core.config.models import HealthConfig
from health.checks.endpoints import EndpointCheck
from health.checks.ports import PortCheck
from health.checks.services import ServiceCheck, ServiceStateQuery
from health.core import (
    CheckerResult,
    HealthCheckCategory,
    HealthCheckPlugin,
    HealthReport,
    HealthStatus,
)
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry, get_registry


# ============================================================================
# FIXTURES
# ============================================================================

class StaticPlugin(HealthCheckPlugin):
    """Passes or fails every target of one config section."""

    def __init__(self, name, section, ok=True, category=HealthCheckCategory.ENDPOINTS, priority=None):
        self.name = name
        self.section = section
        self.ok = ok
        self.category = category
        self.priority = priority if priority is not None else category.default_priority

    def targets(self, config: HealthConfig) -> Sequence[Any]:
        return getattr(config, self.section)

    async def check(self, targets) -> CheckerResult:
        result = CheckerResult()
        for target in targets:
            result.record(self.ok, f"{self.name}:{target.name}")
        return result


class ExplodingPlugin(StaticPlugin):
    async def check(self, targets) -> CheckerResult:
        raise RuntimeError("boom")


class ActiveQuery(ServiceStateQuery):
    async def query(self, name):
        return "active", True


async def _probe_open(address, port, timeout):
    return True


def _config(services=(), ports=(), endpoints=()):
    return HealthConfig.model_validate({
        "config": {"listen": {"port": 7654}},
        "services": [{"name": n, "status": "active"} for n in services],
        "ports": [{"name": n, "address": "127.0.0.1", "port": 1000 + i} for i, n in enumerate(ports)],
        "endpoints": [{"name": n, "url": f"http://{n}/", "status": 200} for n in endpoints],
    })


def _run(registry, config):
    return asyncio.run(HealthCheckExecutor(registry).run_all(config))


# ============================================================================
# REGISTRY
# ============================================================================

class TestRegistry:
    """Tests for HealthCheckRegistry."""

    def test_priority_order(self):
        registry = HealthCheckRegistry([
            StaticPlugin("endpoints", "endpoints", category=HealthCheckCategory.ENDPOINTS),
            StaticPlugin("ports", "ports", category=HealthCheckCategory.PORTS),
            StaticPlugin("services", "services", category=HealthCheckCategory.SERVICES),
        ])
        names = [c.name for c in registry.get_checks_by_priority()]
        assert names == ["ports", "services", "endpoints"]

    def test_same_name_replaces(self):
        registry = HealthCheckRegistry()
        registry.register(StaticPlugin("ports", "ports", ok=True))
        replacement = StaticPlugin("ports", "ports", ok=False)
        registry.register(replacement)

        assert len(registry) == 1
        assert registry.get("ports") is replacement

    def test_register_class(self):
        registry = HealthCheckRegistry()
        instance = registry.register_class(PortCheck, timeout_seconds=0.5)
        assert "ports" in registry
        assert instance.timeout_seconds == 0.5

    def test_clear(self):
        registry = HealthCheckRegistry([StaticPlugin("x", "ports")])
        registry.clear()
        assert len(registry) == 0

    def test_builtin_checks_registered(self):
        import health.checks  # noqa: F401

        registry = get_registry()
        names = [c.name for c in registry.get_checks_by_priority()]
        assert names == ["ports", "services", "endpoints"]


# ============================================================================
# EXECUTOR
# ============================================================================

class TestExecutor:
    """Tests for HealthCheckExecutor.run_all."""

    def _registry(self, ports_ok=True, services_ok=True, endpoints_ok=True):
        return HealthCheckRegistry([
            StaticPlugin("endpoints", "endpoints", endpoints_ok, HealthCheckCategory.ENDPOINTS),
            StaticPlugin("services", "services", services_ok, HealthCheckCategory.SERVICES),
            StaticPlugin("ports", "ports", ports_ok, HealthCheckCategory.PORTS),
        ])

    def test_all_pass(self):
        config = _config(services=["s1"], ports=["p1"], endpoints=["e1"])
        report = _run(self._registry(), config)

        assert report.status is HealthStatus.HEALTHY
        assert report.http_status == 200
        assert report.messages == ["ports:p1", "services:s1", "endpoints:e1"]

    def test_message_count_equals_target_count(self):
        config = _config(services=["s1", "s2"], ports=["p1", "p2", "p3"], endpoints=["e1"])
        report = _run(self._registry(ports_ok=False), config)

        assert len(report.messages) == config.target_count == 6

    def test_early_failure_does_not_skip_later_checks(self):
        config = _config(services=["s1"], ports=["p1"], endpoints=["e1"])
        report = _run(self._registry(ports_ok=False), config)

        assert report.status is HealthStatus.UNHEALTHY
        assert report.http_status == 500
        assert report.messages == ["ports:p1", "services:s1", "endpoints:e1"]
        assert report.failures == 1

    def test_summary_log_carries_counts(self, caplog):
        config = _config(services=["s1"], ports=["p1", "p2"])
        with caplog.at_level(logging.INFO, logger="health.executor"):
            _run(self._registry(ports_ok=False), config)

        summary = [r for r in caplog.records if r.getMessage().startswith("Health check complete")]
        assert len(summary) == 1
        assert summary[0].levelno == logging.WARNING
        assert summary[0].data["targets"] == 3
        assert summary[0].data["failures"] == 2
        assert summary[0].data["duration_ms"] >= 0

    def test_empty_config_is_healthy(self):
        report = _run(self._registry(), _config())

        assert report.healthy
        assert report.messages == []

    def test_raising_checker_fails_its_targets(self):
        registry = HealthCheckRegistry([
            StaticPlugin("ports", "ports", True, HealthCheckCategory.PORTS),
            ExplodingPlugin("services", "services", True, HealthCheckCategory.SERVICES),
            StaticPlugin("endpoints", "endpoints", True, HealthCheckCategory.ENDPOINTS),
        ])
        config = _config(services=["nginx", "cron"], ports=["p1"], endpoints=["e1"])
        report = _run(registry, config)

        assert report.status is HealthStatus.UNHEALTHY
        assert report.messages == [
            "ports:p1",
            "Check services: nginx could not be evaluated",
            "Check services: cron could not be evaluated",
            "endpoints:e1",
        ]

    def test_builtin_checkers_end_to_end(self, monkeypatch):
        monkeypatch.setattr("health.checks.ports.probe_port", _probe_open)
        factory = lambda verify, timeout: httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200))
        )
        registry = HealthCheckRegistry([
            PortCheck(),
            ServiceCheck(query=ActiveQuery()),
            EndpointCheck(client_factory=factory),
        ])
        config = _config(services=["nginx"], ports=["ssh"], endpoints=["api"])
        report = _run(registry, config)

        assert report.healthy
        assert report.messages == [
            "Port Name: ssh, Port: 1000 is available",
            "Service Name: nginx, Status: active is as expected",
            "Endpoint Name: api, URL: http://api/, Status: 200 is as expected",
        ]

    def test_reports_are_independent(self):
        registry = self._registry()
        executor = HealthCheckExecutor(registry)
        config = _config(ports=["p1"])

        first = asyncio.run(executor.run_all(config))
        second = asyncio.run(executor.run_all(config))

        assert first.messages == second.messages == ["ports:p1"]
        assert first.messages is not second.messages


# ============================================================================
# REPORT TYPES
# ============================================================================

class TestReportTypes:
    """Tests for HealthStatus, CheckerResult and HealthReport."""

    def test_status_strings(self):
        assert HealthStatus.HEALTHY.value == "Server is healthy"
        assert HealthStatus.UNHEALTHY.value == "Server is unhealthy"

    @pytest.mark.parametrize("passed,expected", [
        ([], HealthStatus.HEALTHY),
        ([True, True], HealthStatus.HEALTHY),
        ([True, False], HealthStatus.UNHEALTHY),
    ])
    def test_aggregate(self, passed, expected):
        assert HealthStatus.aggregate(passed) is expected

    def test_checker_result_record(self):
        result = CheckerResult()
        result.record(True, "a")
        result.record(False, "b")

        assert result.passed is False
        assert result.failures == 1
        assert len(result) == 2

    def test_report_to_dict(self):
        ok = CheckerResult()
        ok.record(True, "a")
        bad = CheckerResult()
        bad.record(False, "b")

        report = HealthReport.from_results([ok, bad])
        assert report.to_dict() == {"status": "Server is unhealthy", "messages": ["a", "b"]}
