import os
import socket
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"

for p in (REPO_ROOT, SRC_DIR):
    if p.exists() and str(p) not in sys.path:
        sys.path.insert(0, str(p))


@pytest.fixture(scope="session")
def app():
    from demo_service.main import app as demo_app

    return demo_app


@pytest.fixture(scope="session")
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def live_base_url(app):
    """Demo service on a real socket for the whole session."""
    from smoke_harness.live_server import serve

    with serve(app) as url:
        yield url


@pytest.fixture(scope="session")
def base_url() -> str:
    return os.getenv("SMOKE_BASE_URL", "http://localhost:8000")


@pytest.fixture
def closed_port_url() -> str:
    # Bind then release so nothing is listening on the port
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"http://127.0.0.1:{port}"


@pytest.fixture(scope="session")
def expected_heading() -> str:
    return "<h1>Welcome to My CI/CD Demo</h1>"


@pytest.fixture
def silent_listener_url():
    # Accepts connections at the kernel level but never answers
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(8)
        port = s.getsockname()[1]
        yield f"http://127.0.0.1:{port}"
