from __future__ import annotations

import json
from typing import Optional

import typer

from smoke_harness.checks import SuiteReport, build_suite, run_suite
from smoke_harness.core.config import settings
from smoke_harness.core.logging import setup_logging
from smoke_harness.live_server import serve

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(log_level: str = typer.Option(settings.log_level, help="loguru level for stderr")) -> None:
    setup_logging(log_level.upper())


def _run_against_demo_service(heading: Optional[str], timeout: Optional[float]) -> SuiteReport:
    from demo_service.main import create_app

    # The CLI owns the loguru sinks; stdout carries only the report
    with serve(create_app(configure_logging=False)) as base_url:
        return run_suite(base_url, build_suite(heading=heading, timeout=timeout))


@app.command()
def run(
    base_url: str = typer.Option(settings.base_url, help="Server to probe"),
    serve_demo: bool = typer.Option(
        False, "--serve", help="Start the bundled demo service and probe it instead"
    ),
    timeout: float = typer.Option(settings.timeout_seconds, min=0.001, help="Per-probe timeout"),
    heading: Optional[str] = typer.Option(None, help="Expected heading markup on GET /"),
) -> None:
    if serve_demo:
        report = _run_against_demo_service(heading, timeout)
    else:
        report = run_suite(base_url, build_suite(heading=heading, timeout=timeout))

    typer.echo(json.dumps(report.to_dict(), indent=2))
    if not report.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
