from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

import requests
from fastapi.testclient import TestClient
from loguru import logger
from requests.structures import CaseInsensitiveDict

from .core.config import settings
from .core.errors import TransportError, categorize_exception, is_transport_failure

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})

_T = TypeVar("_T")


class ResponseHeaders(Mapping[str, str]):
    """Read-only, case-insensitive view over a copy of the response headers."""

    def __init__(self, headers: Mapping[str, str]):
        self._store: CaseInsensitiveDict = CaseInsensitiveDict(headers)

    def __getitem__(self, key: str) -> str:
        return self._store[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._store == CaseInsensitiveDict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._store.lower_items()))

    def __repr__(self) -> str:
        return f"ResponseHeaders({dict(self._store)!r})"


@dataclass(frozen=True)
class ResponseSnapshot:
    method: str
    url: str
    status_code: int
    headers: ResponseHeaders
    body: str
    elapsed_seconds: float

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")


class ProbeState(str, Enum):
    IDLE = "idle"
    SENT = "sent"
    RECEIVED = "received"
    FAILED = "failed"


class Probe:
    """A single request against a server handle.

    ``handle`` is a base URL (real socket via requests), an open client with a
    ``.request(method, url, timeout=...)`` method such as ``requests.Session``
    (aimed at ``base_url``), an open ``TestClient``, or an ASGI app served
    in-process for the duration of the request. In-process requests are
    bounded by ``timeout`` as well.

    A probe moves ``IDLE -> SENT -> RECEIVED | FAILED`` and cannot be sent
    again once it reaches a terminal state.
    """

    def __init__(
        self,
        handle: Any,
        method: str = "GET",
        path: str = "/",
        *,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
    ):
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method!r}")
        if not path.startswith("/"):
            raise ValueError(f"Probe path must start with '/': {path!r}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.handle = handle
        self.method = method
        self.path = path
        self.base_url = handle if isinstance(handle, str) else (base_url or settings.base_url)
        self.timeout = timeout if timeout is not None else settings.timeout_seconds
        self.state = ProbeState.IDLE
        self.snapshot: Optional[ResponseSnapshot] = None
        self.error: Optional[BaseException] = None

    @property
    def in_process(self) -> bool:
        return isinstance(self.handle, TestClient) or callable(self.handle)

    @property
    def target(self) -> str:
        if self.in_process:
            return self.path
        return self.base_url.rstrip("/") + self.path

    def send(self) -> ResponseSnapshot:
        if self.state is not ProbeState.IDLE:
            raise RuntimeError(f"Probe already {self.state.value}; create a new one")

        self.state = ProbeState.SENT
        logger.debug({"event": "probe_sent", "method": self.method, "url": self.target})
        start = time.perf_counter()

        try:
            status, headers, body, url = self._dispatch()
        except Exception as e:
            self.state = ProbeState.FAILED
            if not is_transport_failure(e):
                self.error = e
                raise
            err = TransportError(
                f"{self.method} {self.path} failed: {e}",
                category=categorize_exception(e),
                url=self.target,
            )
            self.error = err
            logger.warning(
                {
                    "event": "probe_failed",
                    "method": self.method,
                    "url": self.target,
                    "category": err.category.value,
                    "error": str(e),
                }
            )
            raise err from e

        self.snapshot = ResponseSnapshot(
            method=self.method,
            url=url,
            status_code=status,
            headers=ResponseHeaders(headers),
            body=body,
            elapsed_seconds=time.perf_counter() - start,
        )
        self.state = ProbeState.RECEIVED
        logger.debug(
            {
                "event": "probe_received",
                "method": self.method,
                "url": url,
                "status": status,
                "elapsed_seconds": round(self.snapshot.elapsed_seconds, 6),
            }
        )
        return self.snapshot

    def _dispatch(self) -> tuple[int, Mapping[str, str], str, str]:
        if isinstance(self.handle, str):
            with requests.Session() as session:
                r = session.request(self.method, self.target, timeout=self.timeout)
            return r.status_code, r.headers, r.text, r.url

        if isinstance(self.handle, TestClient):
            return self._bounded(lambda: self._via_test_client(self.handle))

        if callable(self.handle):
            return self._bounded(self._in_process)

        if hasattr(self.handle, "request"):
            # requests.Session, httpx.Client and friends: bounded by their own timeout
            r = self.handle.request(self.method, self.target, timeout=self.timeout)
            return r.status_code, r.headers, r.text, str(r.url)

        raise TypeError(
            f"Unsupported server handle {type(self.handle).__name__}; "
            "expected a base URL, a client with .request(), a TestClient or an ASGI app"
        )

    def _in_process(self) -> tuple[int, Mapping[str, str], str, str]:
        # Run the app's lifespan around the single request
        with TestClient(self.handle, raise_server_exceptions=False) as client:
            return self._via_test_client(client)

    def _via_test_client(self, client: TestClient) -> tuple[int, Mapping[str, str], str, str]:
        r = client.request(self.method, self.path, timeout=self.timeout)
        return r.status_code, r.headers, r.text, str(r.url)

    def _bounded(self, call: Callable[[], _T]) -> _T:
        """Run ``call`` on a daemon thread and give up after ``self.timeout``.

        In-process transports ignore socket timeouts, so a hung app would
        otherwise block the caller forever. The abandoned worker finishes (or
        dies with the interpreter) on its own; its result is discarded.
        """
        outcome: dict[str, Any] = {}

        def work() -> None:
            try:
                outcome["value"] = call()
            except BaseException as e:  # noqa: BLE001 - re-raised on the caller's thread
                outcome["error"] = e

        worker = threading.Thread(target=work, name="smoke-probe", daemon=True)
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            raise TimeoutError(f"no response within {self.timeout}s")
        if "error" in outcome:
            raise outcome["error"]
        return outcome["value"]


def probe(
    handle: Any,
    method: str = "GET",
    path: str = "/",
    *,
    timeout: Optional[float] = None,
    base_url: Optional[str] = None,
) -> ResponseSnapshot:
    return Probe(handle, method, path, timeout=timeout, base_url=base_url).send()
