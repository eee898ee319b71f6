from fastapi.testclient import TestClient

import demo_service.main as demo_main


def _record_setup_calls(monkeypatch) -> list:
    calls = []
    monkeypatch.setattr(demo_main, "setup_logging", lambda *args: calls.append(args))
    return calls


def test_app_without_own_logging_leaves_sinks_alone(monkeypatch) -> None:
    calls = _record_setup_calls(monkeypatch)

    with TestClient(demo_main.create_app(configure_logging=False)) as c:
        assert c.get("/").status_code == 200

    assert calls == []


def test_app_with_own_logging_installs_sinks(monkeypatch) -> None:
    calls = _record_setup_calls(monkeypatch)

    with TestClient(demo_main.create_app(configure_logging=True)) as c:
        assert c.get("/health").status_code == 200

    assert calls == [(demo_main.settings.log_level, demo_main.settings.service_name)]


def test_logging_default_follows_settings(monkeypatch) -> None:
    calls = _record_setup_calls(monkeypatch)
    monkeypatch.setattr(demo_main.settings, "configure_logging", False)

    with TestClient(demo_main.create_app()):
        pass

    assert calls == []


def test_factory_does_not_touch_shared_settings() -> None:
    before = demo_main.settings.configure_logging
    demo_main.create_app(configure_logging=not before)
    assert demo_main.settings.configure_logging is before
