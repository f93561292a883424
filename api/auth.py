# ============================================================================
# AUTH GATE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - HTTP Basic authentication
# PURPOSE: Gate /healthy behind optional Basic credentials
# CREATED: 19 OCT 2026
# ============================================================================
"""
Auth Gate

When auth is enabled, requests must carry HTTP Basic credentials that
match the configured username and password. Both values are compared
with secrets.compare_digest, and both comparisons always run, so
response timing does not reveal which part (or how much of it) matched.

Rejections raise AuthenticationError; the app turns it into a plain-text
401 with `WWW-Authenticate: Basic realm="Restricted"`. Handlers that
depend on require_auth never run for a rejected request.
"""

import base64
import binascii
import secrets
from typing import Optional

from fastapi import Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from core.config.defaults import ServerDefaults
from core.config.models import AuthConfig, HealthConfig
from core.errors import AuthenticationError
from core.logging import get_logger

logger = get_logger(__name__)

AUTH_REALM = ServerDefaults.auth_realm


def parse_basic_credentials(header: Optional[str]) -> Optional[HTTPBasicCredentials]:
    """
    Decode an `Authorization: Basic ...` header.

    The payload is decoded as UTF-8, so non-ASCII usernames and passwords
    work. Returns None when the header is absent, uses another scheme, or
    is not valid base64 `user:password`.
    """
    scheme, param = get_authorization_scheme_param(header)
    if not header or scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return HTTPBasicCredentials(username=username, password=password)


def _constant_time_equals(supplied: str, expected: str) -> bool:
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def authorize(
    credentials: Optional[HTTPBasicCredentials],
    auth: AuthConfig,
) -> bool:
    """
    Decide whether a request may proceed.

    Args:
        credentials: Parsed Basic credentials, None if absent or malformed
        auth: Configured auth settings

    Returns:
        True if auth is disabled or both username and password match
    """
    if not auth.enabled:
        return True
    if credentials is None:
        return False

    user_match = _constant_time_equals(credentials.username, auth.username)
    pass_match = _constant_time_equals(
        credentials.password, auth.password.get_secret_value()
    )
    return user_match and pass_match


def get_health_config(request: Request) -> HealthConfig:
    """Config loaded at startup, attached to the app by create_app."""
    return request.app.state.health_config


async def require_auth(request: Request) -> None:
    """
    FastAPI dependency enforcing the auth gate.

    Raises:
        AuthenticationError: credentials missing, malformed or wrong
    """
    auth = get_health_config(request).config.auth
    if not auth.enabled:
        return

    # A malformed header gets the same response as a wrong password
    credentials = parse_basic_credentials(request.headers.get("Authorization"))

    if not authorize(credentials, auth):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected unauthorized request to {request.url.path} from {client}")
        raise AuthenticationError(realm=AUTH_REALM)


__all__ = [
    "AUTH_REALM",
    "parse_basic_credentials",
    "authorize",
    "get_health_config",
    "require_auth",
]
