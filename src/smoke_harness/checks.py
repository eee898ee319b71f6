from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from functools import partial
from typing import Any, Callable, Iterable, Optional

from loguru import logger

from .assertions import assert_header_matches, assert_includes, assert_status, assert_true
from .core.config import settings
from .core.errors import TransportError
from .probe import probe

UNIT_GROUP = "Unit Tests"
INTEGRATION_GROUP = "Integration Tests - Express App"


@dataclass(frozen=True)
class SmokeCase:
    group: str
    name: str
    run: Callable[[Any], None]


@dataclass
class CaseResult:
    group: str
    name: str
    passed: bool
    duration_seconds: float
    message: Optional[str] = None
    error_type: Optional[str] = None


@dataclass
class SuiteReport:
    results: list[CaseResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "passed": self.passed,
            "failed": self.failed,
            "results": [asdict(r) for r in self.results],
        }


def simple_check() -> bool:
    return True


def check_simple_truth(handle: Any) -> None:
    assert_true(simple_check())


def check_home_page(
    handle: Any, *, heading: Optional[str] = None, timeout: Optional[float] = None
) -> None:
    snapshot = probe(handle, "GET", "/", timeout=timeout)
    assert_status(snapshot, 200)
    assert_header_matches(snapshot, "Content-Type", settings.expected_content_type)
    assert_includes(snapshot.body, heading or settings.expected_heading)


def build_suite(
    *, heading: Optional[str] = None, timeout: Optional[float] = None
) -> tuple[SmokeCase, ...]:
    return (
        SmokeCase(UNIT_GROUP, "should return true for a simple check", check_simple_truth),
        SmokeCase(
            INTEGRATION_GROUP,
            "should return 200 and correct response body for GET /",
            partial(check_home_page, heading=heading, timeout=timeout),
        ),
    )


SUITE = build_suite()


def run_case(case: SmokeCase, handle: Any) -> CaseResult:
    start = time.perf_counter()
    message = None
    error_type = None
    try:
        case.run(handle)
    except (AssertionError, TransportError) as e:
        message = str(e)
        error_type = type(e).__name__
    except Exception as e:  # noqa: BLE001 - a crashing case is a failed case
        logger.exception({"event": "case_crashed", "group": case.group, "case": case.name})
        message = f"{type(e).__name__}: {e}"
        error_type = type(e).__name__

    result = CaseResult(
        group=case.group,
        name=case.name,
        passed=error_type is None,
        duration_seconds=time.perf_counter() - start,
        message=message,
        error_type=error_type,
    )
    log = logger.info if result.passed else logger.error
    log(
        {
            "event": "case_finished",
            "group": case.group,
            "case": case.name,
            "passed": result.passed,
            "message": message,
        }
    )
    return result


def run_suite(handle: Any, cases: Iterable[SmokeCase] = SUITE) -> SuiteReport:
    report = SuiteReport()
    for case in cases:
        report.results.append(run_case(case, handle))
    logger.info({"event": "suite_finished", "passed": report.passed, "failed": report.failed})
    return report
