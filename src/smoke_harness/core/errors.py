"""Transport failures raised by the probe."""

from __future__ import annotations

import socket
from enum import Enum
from typing import Optional

import httpx
import requests


class TransportCategory(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    PROTOCOL = "protocol"
    UNKNOWN = "unknown"


class TransportError(Exception):
    """The request never produced a complete response.

    Raised for refused connections, DNS failures, servers that hang up without
    answering, and timeouts. The underlying exception is chained as
    ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        category: TransportCategory = TransportCategory.UNKNOWN,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.url = url

    def __str__(self) -> str:
        base = super().__str__()
        if self.url:
            return f"{base} [{self.category.value}] {self.url}"
        return f"{base} [{self.category.value}]"


def categorize_exception(exc: BaseException) -> TransportCategory:
    """
    Map requests/httpx/socket exceptions to a TransportCategory.
    """
    if isinstance(exc, (requests.Timeout, httpx.TimeoutException, socket.timeout, TimeoutError)):
        return TransportCategory.TIMEOUT

    if isinstance(exc, (requests.exceptions.ChunkedEncodingError, httpx.RemoteProtocolError)):
        return TransportCategory.PROTOCOL

    if isinstance(
        exc,
        (
            requests.ConnectionError,
            httpx.ConnectError,
            httpx.NetworkError,
            socket.gaierror,
            ConnectionError,
        ),
    ):
        return TransportCategory.CONNECTION

    return TransportCategory.UNKNOWN


def is_transport_failure(exc: BaseException) -> bool:
    return isinstance(
        exc,
        (
            requests.ConnectionError,
            requests.Timeout,
            requests.exceptions.ChunkedEncodingError,
            httpx.TransportError,
            socket.timeout,
            ConnectionError,
            TimeoutError,
        ),
    )
