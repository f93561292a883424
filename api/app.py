# ============================================================================
# APPLICATION FACTORY
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - FastAPI application assembly
# PURPOSE: Build the app around a loaded config
# CREATED: 19 OCT 2026
# ============================================================================
"""
Application Factory

create_app() wires the loaded config, the executor and the /healthy
route into a FastAPI app. The config is attached once and only read
afterwards. Interactive docs and the OpenAPI schema are disabled so the
health route is the only thing the listener serves.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from __version__ import __version__, CODENAME
from core.config.models import HealthConfig
from core.errors import AuthenticationError
from health.executor import HealthCheckExecutor
from health.router import health_router


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    """Plain-text 401 with a Basic challenge. No detail is exposed."""
    return PlainTextResponse(
        "Unauthorized\n",
        status_code=401,
        headers={"WWW-Authenticate": f'Basic realm="{exc.realm}"'},
    )


def create_app(
    config: HealthConfig,
    executor: Optional[HealthCheckExecutor] = None,
) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        config: Validated config
        executor: Check executor (defaults to the built-in checkers)

    Returns:
        FastAPI application
    """
    if executor is None:
        import health.checks  # noqa: F401  register built-in checkers
        executor = HealthCheckExecutor()

    app = FastAPI(
        title=CODENAME,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.health_config = config
    app.state.health_executor = executor

    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.include_router(health_router)

    return app


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "create_app",
    "authentication_error_handler",
]
