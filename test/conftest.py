from __future__ import annotations
import logging
from pathlib import Path
import pytest


@pytest.fixture(autouse=True)
def capture_all_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="ghmkrepo")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_USER", raising=False)
    monkeypatch.delenv("GITHUB_PASS", raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    cfg = tmp_path / ".ghmkrepo.ini"
    cfg.write_text(
        "[github]\n"
        "login_page = https://example.com/login\n"
        "account = jdoe\n"
        "password = hunter2\n",
        encoding="utf-8",
    )
    return cfg
