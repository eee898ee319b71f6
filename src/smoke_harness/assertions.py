"""Plain assertion helpers.

Each helper returns ``None`` when the expectation holds and raises
``AssertionError`` with the actual value otherwise. They hold no state and do
no I/O, so they are ready as soon as this module is imported.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Pattern, Union

from .probe import ResponseSnapshot

PREVIEW_CHARS = 200


def _preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return repr(text)
    return repr(text[:limit]) + f"... ({len(text)} chars)"


def assert_true(value: Any) -> None:
    if value is not True:
        raise AssertionError(f"expected true, got {value!r}")


def assert_includes(haystack: str, needle: str) -> None:
    # Literal, case-sensitive containment
    if not isinstance(haystack, str):
        raise AssertionError(f"expected a string to include {needle!r}, got {haystack!r}")
    if needle not in haystack:
        raise AssertionError(f"expected {_preview(haystack)} to include {needle!r}")


def assert_matches(value: Optional[str], pattern: Union[str, Pattern[str]]) -> None:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    if value is None:
        raise AssertionError(f"expected a value matching /{regex.pattern}/, got None")
    if regex.search(value) is None:
        raise AssertionError(f"expected {value!r} to match /{regex.pattern}/")


def assert_status(snapshot: ResponseSnapshot, expected: int) -> None:
    if snapshot.status_code != expected:
        raise AssertionError(
            f"expected {expected} from {snapshot.method} {snapshot.url}, "
            f"got {snapshot.status_code}: {_preview(snapshot.body)}"
        )


def assert_header_matches(
    snapshot: ResponseSnapshot, name: str, pattern: Union[str, Pattern[str]]
) -> None:
    value = snapshot.headers.get(name)
    if value is None:
        raise AssertionError(
            f"expected header {name!r} in response from {snapshot.url}, "
            f"got headers {sorted(snapshot.headers)}"
        )
    try:
        assert_matches(value, pattern)
    except AssertionError as e:
        raise AssertionError(f"header {name!r}: {e}") from None
