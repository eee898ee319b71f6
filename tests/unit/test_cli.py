import json

from typer.testing import CliRunner

from smoke_harness.cli import app

runner = CliRunner()

# Keep stderr logging out of the captured report
QUIET = ["--log-level", "critical"]


def test_run_against_bundled_demo_service() -> None:
    result = runner.invoke(app, QUIET + ["run", "--serve"])
    assert result.exit_code == 0, result.output

    report = json.loads(result.stdout)
    assert report["ok"] is True
    assert report["passed"] == 2


def test_run_against_unreachable_server_exits_non_zero(closed_port_url) -> None:
    result = runner.invoke(app, QUIET + ["run", "--base-url", closed_port_url, "--timeout", "2"])
    assert result.exit_code == 1

    report = json.loads(result.stdout)
    assert report["ok"] is False
    failed = [r for r in report["results"] if not r["passed"]]
    assert len(failed) == 1
    assert failed[0]["error_type"] == "TransportError"


def test_run_with_unexpected_heading_fails() -> None:
    result = runner.invoke(app, QUIET + ["run", "--serve", "--heading", "<h1>Something else</h1>"])
    assert result.exit_code == 1

    report = json.loads(result.stdout)
    assert "<h1>Something else</h1>" in report["results"][1]["message"]


def test_serve_leaves_demo_settings_untouched() -> None:
    from demo_service.core.config import settings as demo_settings

    before = demo_settings.configure_logging
    result = runner.invoke(app, QUIET + ["run", "--serve"])
    assert result.exit_code == 0, result.output
    assert demo_settings.configure_logging is before
