# ============================================================================
# CONFIGURATION MODELS
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Typed config file model
# PURPOSE: Pydantic models for listen/TLS/auth settings and check targets
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Models

Typed representation of the YAML config file:

    config:
      listen: {host, port}
      ssl: {enabled, certFile, keyFile}
      auth: {enabled, username, password}
    services:  [{name, status}]
    ports:     [{name, address, port}]
    endpoints: [{name, url, status, statuses, verifyTLS}]

All models are frozen. The config is loaded once at startup and shared
read-only by every request.
"""

from typing import FrozenSet, List

import httpx
from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

MIN_PORT = 1
MAX_PORT = 65535

_FROZEN = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


def _port_in_range(port: int) -> bool:
    return MIN_PORT <= port <= MAX_PORT


# ============================================================================
# SERVER SETTINGS
# ============================================================================

class ListenConfig(BaseModel):
    """Listen address for the HTTP server."""
    host: str = ""
    port: int = 0

    model_config = _FROZEN

    @field_validator("host", mode="before")
    @classmethod
    def none_host_is_empty(cls, v):
        return "" if v is None else v

    @model_validator(mode="after")
    def check_port(self) -> "ListenConfig":
        if not _port_in_range(self.port):
            raise ValueError(f"invalid listen port: {self.port}")
        return self

    @property
    def address(self) -> str:
        """host:port, bracketing IPv6 literals."""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class SSLConfig(BaseModel):
    """Inbound TLS settings. Certificates are always verified normally."""
    enabled: bool = False
    cert_file: str = Field(default="", alias="certFile")
    key_file: str = Field(default="", alias="keyFile")

    model_config = _FROZEN

    @model_validator(mode="after")
    def check_files(self) -> "SSLConfig":
        if self.enabled and not (self.cert_file and self.key_file):
            raise ValueError("ssl enabled but certFile/keyFile not set")
        return self


class AuthConfig(BaseModel):
    """HTTP Basic credentials. Disabled means the gate is bypassed."""
    enabled: bool = False
    username: str = ""
    password: SecretStr = SecretStr("")

    model_config = _FROZEN


class AppConfig(BaseModel):
    """The `config:` section."""
    listen: ListenConfig
    ssl: SSLConfig = Field(default_factory=SSLConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    model_config = _FROZEN


# ============================================================================
# CHECK TARGETS
# ============================================================================

class ServiceTarget(BaseModel):
    """A service whose active state must equal `status`."""
    name: str
    status: str = ""

    model_config = _FROZEN


class PortTarget(BaseModel):
    """A TCP address:port that must accept connections."""
    name: str
    address: str = ""
    port: int = 0

    model_config = _FROZEN

    @model_validator(mode="after")
    def check_port(self) -> "PortTarget":
        if not _port_in_range(self.port):
            raise ValueError(f"invalid port: {self.port} for {self.name}")
        return self


class EndpointTarget(BaseModel):
    """
    An HTTP(S) URL whose GET status must be acceptable.

    Acceptable statuses are `statuses` plus `status`. HTTPS targets skip
    certificate verification unless `verifyTLS` is set.
    """
    name: str
    url: str
    status: int = 0
    statuses: List[int] = Field(default_factory=list)
    verify_tls: bool = Field(default=False, alias="verifyTLS")

    model_config = _FROZEN

    @field_validator("statuses", mode="before")
    @classmethod
    def handle_single_status(cls, v):
        """Allow null and a single int as shorthand."""
        if v is None:
            return []
        if isinstance(v, int):
            return [v]
        return v

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        try:
            parsed = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid URL {v}: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError(f"invalid URL {v}: expected absolute http(s) URL")
        return v

    @property
    def accepted_statuses(self) -> FrozenSet[int]:
        return frozenset(self.statuses) | {self.status}

    @property
    def is_https(self) -> bool:
        return self.url.startswith("https://")


# ============================================================================
# ROOT
# ============================================================================

class HealthConfig(BaseModel):
    """Root of the config file."""
    config: AppConfig
    services: List[ServiceTarget] = Field(default_factory=list)
    ports: List[PortTarget] = Field(default_factory=list)
    endpoints: List[EndpointTarget] = Field(default_factory=list)

    model_config = _FROZEN

    @field_validator("services", "ports", "endpoints", mode="before")
    @classmethod
    def empty_section(cls, v):
        """A section present in YAML with no entries parses as None."""
        return [] if v is None else v

    @property
    def target_count(self) -> int:
        return len(self.services) + len(self.ports) + len(self.endpoints)

    def describe(self) -> str:
        """One-line summary for startup logging."""
        return (
            f"{len(self.services)} services, {len(self.ports)} ports, "
            f"{len(self.endpoints)} endpoints"
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MIN_PORT",
    "MAX_PORT",
    "ListenConfig",
    "SSLConfig",
    "AuthConfig",
    "AppConfig",
    "ServiceTarget",
    "PortTarget",
    "EndpointTarget",
    "HealthConfig",
]
