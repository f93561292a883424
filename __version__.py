# ============================================================================
# VERSION - SERVER HEALTH API
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# ============================================================================
"""
Version information for the Server Health API.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "1.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

EPOCH = 1
CODENAME = "Server Health API"
