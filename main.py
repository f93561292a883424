# ============================================================================
# SERVER HEALTH API - MAIN ENTRY POINT
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Process entry point
# PURPOSE: Parse CLI, load config, serve /healthy until signalled
# CREATED: 19 OCT 2026
# ============================================================================
"""
Server Health API

Serves GET /healthy, which probes the configured ports, services and
HTTP(S) endpoints of this host and answers 200 or 500.

Usage:
    python main.py -config /etc/server-health/config.yaml
    server-health-api --config config.yaml

Environment:
    HEALTHCHECK_CONFIG_FILE  Config path when no flag is given (config.yaml)
    HEALTH_LISTEN_HOST       Overrides config.listen.host
    HEALTH_LISTEN_PORT       Overrides config.listen.port
    HEALTH_SERVICE_TIMEOUT   Service query timeout in seconds (5)
    LOG_LEVEL                Log level (INFO)
    LOG_FORMAT               "json" for structured logs
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from __version__ import __version__, BUILD_DATE, CODENAME, EPOCH
from api.app import create_app
from core.config import get_defaults, load_config, resolve_config_path
from core.errors import ConfigError, ServerStartupError
from core.lifecycle import HealthServer
from core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="server-health-api",
        description="HTTP health gate for ports, services and endpoints of this host",
    )
    parser.add_argument(
        "-config", "--config",
        dest="config",
        default=None,
        help="Path to YAML config (default: $HEALTHCHECK_CONFIG_FILE or config.yaml)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the server.

    Returns:
        Process exit code
    """
    args = parse_args(argv)

    configure_logging(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
    )
    logger.info(f"Starting {CODENAME} v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    try:
        # Invalid environment overrides fail startup, not the first request
        get_defaults()
        config = load_config(resolve_config_path(args.config))
    except ConfigError as e:
        logger.error(f"Error loading config: {e}")
        return 1

    server = HealthServer(create_app(config), config.config)
    try:
        return asyncio.run(server.serve())
    except ServerStartupError as e:
        logger.error(f"Error starting server: {e}")
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
