# ============================================================================
# CONFIGURATION LOADER
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - YAML config loading and validation
# PURPOSE: Read config file, apply environment overrides, validate
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Loader

Loads the YAML config file into a HealthConfig.

Precedence for the file path:
    -config CLI flag > HEALTHCHECK_CONFIG_FILE > ./config.yaml

Environment overrides (applied before validation):
    HEALTH_LISTEN_HOST  - replaces config.listen.host
    HEALTH_LISTEN_PORT  - replaces config.listen.port (must be an integer)

Any failure raises ConfigError. The caller treats it as fatal.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from core.config.defaults import get_defaults
from core.config.models import HealthConfig
from core.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG_FILE = "HEALTHCHECK_CONFIG_FILE"
ENV_LISTEN_HOST = "HEALTH_LISTEN_HOST"
ENV_LISTEN_PORT = "HEALTH_LISTEN_PORT"


def resolve_config_path(
    cli_value: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Pick the config file path: CLI flag, then env, then default."""
    if cli_value:
        return cli_value
    environ = os.environ if environ is None else environ
    return environ.get(ENV_CONFIG_FILE) or get_defaults().server.config_file


def apply_env_overrides(
    data: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Apply HEALTH_LISTEN_HOST / HEALTH_LISTEN_PORT onto raw config data.

    Returns the same dict, mutated.

    Raises:
        ConfigError: HEALTH_LISTEN_PORT is not an integer
    """
    environ = os.environ if environ is None else environ

    app = data.get("config")
    if not isinstance(app, dict):
        app = data["config"] = {}
    listen = app.get("listen")
    if not isinstance(listen, dict):
        listen = app["listen"] = {}

    if ENV_LISTEN_HOST in environ:
        listen["host"] = environ[ENV_LISTEN_HOST]
        logger.debug(f"Listen host overridden by {ENV_LISTEN_HOST}")

    if ENV_LISTEN_PORT in environ:
        raw = environ[ENV_LISTEN_PORT]
        try:
            listen["port"] = int(raw)
        except ValueError:
            raise ConfigError(f"Invalid value for {ENV_LISTEN_PORT}: {raw}")
        logger.debug(f"Listen port overridden by {ENV_LISTEN_PORT}")

    return data


def _format_validation_error(e: ValidationError) -> str:
    """Flatten pydantic errors into `loc: msg; loc: msg`."""
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid")
        # pydantic prefixes ValueError text with "Value error, "
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "invalid config: " + "; ".join(parts)


def parse_config(
    data: Any,
    environ: Optional[Mapping[str, str]] = None,
    source: Optional[str] = None,
) -> HealthConfig:
    """
    Validate already-parsed YAML data.

    Args:
        data: Result of yaml.safe_load (None for an empty file)
        environ: Environment mapping (defaults to os.environ)
        source: File path, used in error messages
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping", path=source)

    data = apply_env_overrides(data, environ)

    try:
        return HealthConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(e), path=source) from e


def load_config(
    path: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None,
) -> HealthConfig:
    """
    Load and validate a config file.

    Args:
        path: Path to the YAML file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Frozen HealthConfig

    Raises:
        ConfigError: file unreadable, malformed YAML or invalid values
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e.strerror or e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed YAML: {e}", path=str(path)) from e

    config = parse_config(data, environ=environ, source=str(path))
    logger.info(f"Loaded config from {path} ({config.describe()})")
    return config


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ENV_CONFIG_FILE",
    "ENV_LISTEN_HOST",
    "ENV_LISTEN_PORT",
    "resolve_config_path",
    "apply_env_overrides",
    "parse_config",
    "load_config",
]
