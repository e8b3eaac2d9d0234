"""Tests for main module."""

from pathlib import Path

import pytest
from fastapi import FastAPI

from nutrilog import main as main_module


def test_main_runs_uvicorn_factory(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[tuple[str, dict[str, object]]] = []
    monkeypatch.setenv("PORT", "5055")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setattr(
        main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
    )

    main_module.main()

    captured = capsys.readouterr()
    assert "Nutrilog" in captured.out
    assert calls == [
        (
            "nutrilog.main:create_asgi_app",
            {
                "factory": True,
                "host": "127.0.0.1",
                "port": 5055,
                "log_level": "debug",
            },
        )
    ]


def test_create_asgi_app_uses_configured_data_file(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    data_file = tmp_path / "db.json"
    monkeypatch.setenv("DATA_FILE", str(data_file))

    app = main_module.create_asgi_app()

    assert isinstance(app, FastAPI)
    assert app.state.container.settings.data_file == data_file
