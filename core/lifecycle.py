# ============================================================================
# SERVER LIFECYCLE
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Listener startup and graceful shutdown
# PURPOSE: Bind, serve (optionally TLS), drain on SIGINT/SIGTERM
# CREATED: 19 OCT 2026
# ============================================================================
"""
Server Lifecycle

States:
    STARTING -> SERVING -> DRAINING -> STOPPED

STARTING: TLS material is loaded (when enabled) and the listening socket
    is bound. Any failure raises ServerStartupError before anything is
    served.
SERVING: uvicorn serves the app; every request runs in its own task.
DRAINING: entered on SIGINT/SIGTERM. The listener stops accepting and
    in-flight requests get the grace period (5s) to finish. Whatever is
    still running after that is cancelled and the shutdown counts as
    forced.
STOPPED: serve() returns the process exit code (0 clean, 1 forced).

Usage:
    server = HealthServer(app, config.config)
    exit_code = asyncio.run(server.serve())
"""

import asyncio
import contextlib
import signal
import socket
import ssl
import threading
from enum import Enum
from typing import List, Optional

import uvicorn

from core.config.defaults import get_defaults
from core.config.models import AppConfig
from core.errors import ServerStartupError
from core.logging import get_logger

logger = get_logger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class LifecycleState(str, Enum):
    """Server lifecycle states."""
    STARTING = "starting"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind a TCP listening socket.

    An empty host binds all IPv4 interfaces; a host containing ':' is
    treated as an IPv6 literal.

    Raises:
        ServerStartupError: address in use, permission denied, bad host
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise ServerStartupError(f"Failed to bind {host or '0.0.0.0'}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


class _DrainingServer(uvicorn.Server):
    """
    uvicorn.Server with a bounded drain and lifecycle reporting.

    Signal capture does not re-raise the signal after serving, so a
    graceful SIGTERM ends with exit code 0 instead of the default
    signal disposition.
    """

    def __init__(self, config: uvicorn.Config, lifecycle: "HealthServer"):
        super().__init__(config)
        self.lifecycle = lifecycle

    @contextlib.contextmanager
    def capture_signals(self):
        # Signals can only be listened to from the main thread
        if threading.current_thread() is not threading.main_thread():
            yield
            return
        original_handlers = {sig: signal.signal(sig, self.handle_exit) for sig in HANDLED_SIGNALS}
        try:
            yield
        finally:
            for sig, handler in original_handlers.items():
                signal.signal(sig, handler)

    def handle_exit(self, sig, frame) -> None:
        if not self.should_exit:
            logger.info(f"Received {signal.Signals(sig).name}, shutting down server...")
        super().handle_exit(sig, frame)

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self.lifecycle.state = LifecycleState.SERVING
            logger.info(f"Serving on {self.lifecycle.url}")

    async def shutdown(self, sockets: Optional[List[socket.socket]] = None) -> None:
        self.lifecycle.state = LifecycleState.DRAINING
        grace = self.lifecycle.grace_period
        try:
            await asyncio.wait_for(super().shutdown(sockets=sockets), timeout=grace)
        except asyncio.TimeoutError:
            self.lifecycle.forced_shutdown = True
            logger.error(
                f"Server forced to shutdown: {len(self.server_state.tasks)} request(s) "
                f"still running after {grace}s grace period"
            )
            for task in list(self.server_state.tasks):
                task.cancel()
            for connection in list(self.server_state.connections):
                transport = getattr(connection, "transport", None)
                if transport is not None:
                    transport.close()


class HealthServer:
    """
    Runs the FastAPI app under uvicorn with the configured listener.
    """

    def __init__(
        self,
        app,
        app_config: AppConfig,
        grace_period: Optional[float] = None,
    ):
        """
        Args:
            app: ASGI application (see api.app.create_app)
            app_config: The `config:` section (listen, ssl)
            grace_period: Drain window in seconds (default 5)
        """
        self.app = app
        self.app_config = app_config
        self.grace_period = (
            grace_period if grace_period is not None
            else get_defaults().timeouts.shutdown_grace_seconds
        )
        self.state = LifecycleState.STARTING
        self.forced_shutdown = False
        self._server: Optional[_DrainingServer] = None

    @property
    def url(self) -> str:
        scheme = "https" if self.app_config.ssl.enabled else "http"
        return f"{scheme}://{self.app_config.listen.address}"

    def _build_uvicorn_config(self) -> uvicorn.Config:
        listen = self.app_config.listen
        tls = self.app_config.ssl
        kwargs = dict(
            host=listen.host,
            port=listen.port,
            lifespan="off",
            log_config=None,
            server_header=False,
            # Drain is bounded by _DrainingServer.shutdown
            timeout_graceful_shutdown=None,
        )
        if tls.enabled:
            kwargs.update(ssl_certfile=tls.cert_file, ssl_keyfile=tls.key_file)
        return uvicorn.Config(self.app, **kwargs)

    def _load(self) -> uvicorn.Config:
        """Build and load the uvicorn config (creates the TLS context)."""
        config = self._build_uvicorn_config()
        try:
            config.load()
        except (OSError, ssl.SSLError) as e:
            raise ServerStartupError(f"Failed to load TLS certificate/key: {e}") from e
        return config

    def request_shutdown(self) -> None:
        """Begin draining, as if SIGTERM had been received."""
        if self._server is not None:
            self._server.should_exit = True

    async def serve(self) -> int:
        """
        Run until shutdown.

        Returns:
            Exit code: 0 after a clean drain, 1 if the drain was forced

        Raises:
            ServerStartupError: TLS material or bind failure
        """
        self.state = LifecycleState.STARTING
        config = self._load()
        # uvicorn's own bind path calls sys.exit on failure
        sock = bind_socket(self.app_config.listen.host, self.app_config.listen.port)

        logger.info(f"Starting server on {self.url}")
        self._server = _DrainingServer(config, self)
        try:
            await self._server.serve(sockets=[sock])
        finally:
            sock.close()
            self.state = LifecycleState.STOPPED

        if self.forced_shutdown:
            return 1
        logger.info("Server exited gracefully")
        return 0


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LifecycleState",
    "bind_socket",
    "HealthServer",
]
