# ============================================================================
# SERVICE CHECK TESTS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Tests - Service manager state checker
# PURPOSE: Verify name validation, state comparison and systemctl queries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Service Check Tests

Covers:
1. Service name allow-list
2. Exact, case-sensitive state comparison
3. Invalid names never reach the service manager
4. SystemctlServiceQuery against stand-in executables; any non-zero
   exit fails, including exit 3 for an unknown unit

Run with:
    pytest tests/test_service_checks.py -v
"""

import asyncio
import time
from typing import Dict, List, Tuple

import pytest

from core.config.defaults import reset_defaults
from core.config.models import ServiceTarget
from core.errors import ConfigError
from health.checks.services import (
    ServiceCheck,
    ServiceStateQuery,
    SystemctlServiceQuery,
    check_services,
    is_valid_service_name,
)


# ============================================================================
# FIXTURES
# ============================================================================

class FakeServiceQuery(ServiceStateQuery):
    """Returns canned states and records every queried name."""

    def __init__(self, states: Dict[str, str], failing=()):
        self.states = states
        self.failing = set(failing)
        self.calls: List[str] = []

    async def query(self, name: str) -> Tuple[str, bool]:
        self.calls.append(name)
        if name in self.failing:
            return "", False
        return self.states.get(name, "inactive"), True


def _svc(name, status="active"):
    return ServiceTarget(name=name, status=status)


def _script(tmp_path, body):
    """Write an executable shell script standing in for systemctl."""
    path = tmp_path / "systemctl"
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(0o755)
    return str(path)


# ============================================================================
# NAME VALIDATION
# ============================================================================

class TestServiceNames:
    """Tests for the service name allow-list."""

    @pytest.mark.parametrize("name", [
        "nginx",
        "getty@tty1.service",
        "user-1000.slice",
        "dbus:org.freedesktop",
        "my_app.2",
    ])
    def test_valid(self, name):
        assert is_valid_service_name(name)

    @pytest.mark.parametrize("name", [
        "",
        "nginx; rm -rf /",
        "$(reboot)",
        "a b",
        "nginx\n",
        "foo|bar",
        "../etc/passwd",
    ])
    def test_invalid(self, name):
        assert not is_valid_service_name(name)


# ============================================================================
# CHECKER
# ============================================================================

class TestCheckServices:
    """Tests for check_services."""

    def test_expected_state(self):
        query = FakeServiceQuery({"nginx": "active"})
        result = asyncio.run(check_services([_svc("nginx")], query))

        assert result.passed is True
        assert result.messages == ["Service Name: nginx, Status: active is as expected"]

    def test_unexpected_state(self):
        query = FakeServiceQuery({"nginx": "inactive"})
        result = asyncio.run(check_services([_svc("nginx")], query))

        assert result.passed is False
        assert result.messages == [
            "Service Name: nginx, Expected Status: active, Actual Status: inactive"
        ]

    def test_expected_inactive(self):
        query = FakeServiceQuery({"telnet": "inactive"})
        result = asyncio.run(check_services([_svc("telnet", "inactive")], query))
        assert result.passed is True

    def test_comparison_is_case_sensitive(self):
        query = FakeServiceQuery({"nginx": "active"})
        result = asyncio.run(check_services([_svc("nginx", "Active")], query))
        assert result.passed is False

    def test_invalid_name_not_queried(self):
        query = FakeServiceQuery({})
        result = asyncio.run(check_services([_svc("nginx; rm -rf /")], query))

        assert query.calls == []
        assert result.passed is False
        assert result.messages == ["Service Name: nginx; rm -rf / is invalid"]

    def test_query_failure_reports_empty_state(self):
        query = FakeServiceQuery({}, failing=["ghost"])
        result = asyncio.run(check_services([_svc("ghost")], query))

        assert result.passed is False
        assert result.messages == [
            "Service Name: ghost, Expected Status: active, Actual Status: "
        ]

    def test_failed_query_never_matches_empty_expectation(self):
        query = FakeServiceQuery({}, failing=["ghost"])
        result = asyncio.run(check_services([_svc("ghost", "")], query))
        assert result.passed is False

    def test_default_query_not_used_for_invalid_names(self):
        result = asyncio.run(check_services([_svc("$(reboot)")], timeout=0.5))
        assert result.messages == ["Service Name: $(reboot) is invalid"]

    def test_every_target_checked(self):
        query = FakeServiceQuery({"a": "active", "b": "failed", "c": "active"})
        targets = [_svc("a"), _svc("b"), _svc("bad name"), _svc("c")]
        result = asyncio.run(check_services(targets, query))

        assert len(result) == 4
        assert result.failures == 2
        assert query.calls == ["a", "b", "c"]


class TestServiceCheckPlugin:
    """Tests for the registered plugin."""

    def test_defaults(self):
        check = ServiceCheck()
        assert check.name == "services"
        assert check.priority == 20
        assert isinstance(check.query, SystemctlServiceQuery)
        assert check.query.binary == "systemctl"

    def test_timeout_read_when_used(self, monkeypatch):
        monkeypatch.setenv("HEALTH_SERVICE_TIMEOUT", "not-a-number")
        reset_defaults()
        try:
            check = ServiceCheck()
            with pytest.raises(ConfigError):
                check.timeout_seconds
        finally:
            reset_defaults()

    def test_explicit_timeout(self):
        query = SystemctlServiceQuery(timeout=1.5)
        assert ServiceCheck(query=query).timeout_seconds == 1.5

    def test_injected_query(self):
        query = FakeServiceQuery({"nginx": "active"})
        check = ServiceCheck(query=query)
        result = asyncio.run(check.check([_svc("nginx")]))
        assert result.passed is True
        assert query.calls == ["nginx"]


# ============================================================================
# SYSTEMCTL QUERY
# ============================================================================

class TestSystemctlServiceQuery:
    """Tests for the subprocess-backed query using stand-in scripts."""

    def test_missing_binary(self, tmp_path):
        query = SystemctlServiceQuery(binary=str(tmp_path / "missing"))
        assert asyncio.run(query.query("nginx")) == ("", False)

    def test_active(self, tmp_path):
        binary = _script(tmp_path, 'echo active; exit 0')
        query = SystemctlServiceQuery(binary=binary)
        assert asyncio.run(query.query("nginx")) == ("active", True)

    def test_non_zero_exit_keeps_state_but_fails(self, tmp_path):
        binary = _script(tmp_path, 'echo inactive; exit 3')
        query = SystemctlServiceQuery(binary=binary)
        assert asyncio.run(query.query("nginx")) == ("inactive", False)

    def test_unknown_unit_is_failure(self, tmp_path):
        # systemctl is-active prints "inactive" and exits 3 for a unit that does not exist
        binary = _script(tmp_path, 'echo inactive; exit 3')
        query = SystemctlServiceQuery(binary=binary)
        state, ok = asyncio.run(query.query("nope"))
        assert state == "inactive"
        assert ok is False

    def test_unknown_unit_fails_expected_inactive(self, tmp_path):
        binary = _script(tmp_path, 'echo inactive; exit 3')
        query = SystemctlServiceQuery(binary=binary)
        result = asyncio.run(check_services([_svc("nope", "inactive")], query))

        assert result.passed is False
        assert result.messages == [
            "Service Name: nope, Expected Status: inactive, Actual Status: inactive"
        ]

    def test_other_exit_codes_are_failures(self, tmp_path):
        binary = _script(tmp_path, 'echo failed; exit 4')
        query = SystemctlServiceQuery(binary=binary)
        assert asyncio.run(query.query("nginx")) == ("failed", False)

    def test_arguments_passed_without_shell(self, tmp_path):
        binary = _script(tmp_path, 'echo "$1:$2"; exit 0')
        query = SystemctlServiceQuery(binary=binary)
        assert asyncio.run(query.query("getty@tty1.service")) == (
            "is-active:getty@tty1.service", True,
        )

    def test_timeout_kills_query(self, tmp_path):
        binary = _script(tmp_path, 'exec sleep 5')
        query = SystemctlServiceQuery(binary=binary, timeout=0.2)

        start = time.monotonic()
        assert asyncio.run(query.query("nginx")) == ("", False)
        assert time.monotonic() - start < 2.0
