# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - FastAPI application and auth gate
# PURPOSE: HTTP surface for the health check
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

- api.auth: HTTP Basic auth gate (constant-time comparison)
- api.app: FastAPI application factory

Import submodules directly; this package does not re-export them
because health.router depends on api.auth.
"""
