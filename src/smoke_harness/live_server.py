from __future__ import annotations

import socket
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator

import uvicorn
from loguru import logger

from .core.errors import TransportCategory, TransportError


def _bind(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


@contextmanager
def serve(
    app: Any,
    host: str = "127.0.0.1",
    port: int = 0,
    *,
    startup_timeout: float = 10.0,
    log_level: str = "warning",
) -> Iterator[str]:
    """Run ``app`` under uvicorn on a background thread and yield its base URL.

    The listening socket is bound here (``port=0`` picks a free one) and is
    always released on exit, including when the body raises.
    """
    sock = _bind(host, port)
    bound_host, bound_port = sock.getsockname()[:2]
    base_url = f"http://{bound_host}:{bound_port}"

    config = uvicorn.Config(app, log_level=log_level, lifespan="on")
    server = uvicorn.Server(config)
    thread = threading.Thread(
        target=server.run, kwargs={"sockets": [sock]}, name="smoke-live-server", daemon=True
    )

    try:
        thread.start()
        deadline = time.monotonic() + startup_timeout
        while not server.started:
            if not thread.is_alive():
                raise TransportError(
                    "Live server exited during startup",
                    category=TransportCategory.CONNECTION,
                    url=base_url,
                )
            if time.monotonic() > deadline:
                raise TransportError(
                    f"Live server not ready after {startup_timeout}s",
                    category=TransportCategory.TIMEOUT,
                    url=base_url,
                )
            time.sleep(0.02)

        logger.info({"event": "live_server_started", "url": base_url})
        yield base_url
    finally:
        server.should_exit = True
        if thread.is_alive():
            thread.join(timeout=startup_timeout)
        sock.close()
        logger.info({"event": "live_server_stopped", "url": base_url})
