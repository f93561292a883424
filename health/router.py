# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Infrastructure - FastAPI health check endpoint
# PURPOSE: Expose the aggregated host health verdict over HTTP
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

Endpoints:
    GET /healthy - Run every configured check and report the verdict.

Response Codes:
    200 - {"status": "Server is healthy", "messages": [...]}
    500 - {"status": "Server is unhealthy", "messages": [...]}
    401 - Auth enabled and credentials missing or wrong (plain text)
"""

import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.auth import get_health_config, require_auth
from core.config.defaults import ServerDefaults
from core.logging import get_logger, log_context
from health.executor import HealthCheckExecutor

logger = get_logger(__name__)

health_router = APIRouter(tags=["Health"])


def get_executor(request: Request) -> HealthCheckExecutor:
    """Executor attached to the app by create_app."""
    return request.app.state.health_executor


# ============================================================================
# HOST HEALTH
# ============================================================================

@health_router.get(ServerDefaults.health_path, dependencies=[Depends(require_auth)])
async def host_health(request: Request):
    """
    Probe all configured ports, services and endpoints.

    Checks run synchronously for this request; nothing is cached
    between requests.
    """
    config = get_health_config(request)
    executor = get_executor(request)

    with log_context(request_id=uuid.uuid4().hex[:8]):
        report = await executor.run_all(config)

    return JSONResponse(status_code=report.http_status, content=report.to_dict())


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "get_executor",
]
