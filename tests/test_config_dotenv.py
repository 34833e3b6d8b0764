from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_log_ingest import cli as cli_module
from lib_log_ingest import config as ingest_config


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> Iterator[None]:
    """Reset shared dotenv state around each test."""

    ingest_config._reset_dotenv_state_for_testing()
    yield
    ingest_config._reset_dotenv_state_for_testing()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values that were not set before."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LM_ACCOUNT=dotenv-account\n")
    monkeypatch.chdir(nested)
    monkeypatch.delenv("LM_ACCOUNT", raising=False)

    loaded = ingest_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LM_ACCOUNT"] == "dotenv-account"

    os.environ.pop("LM_ACCOUNT", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    (tmp_path / ".env").write_text("LM_ACCOUNT=dotenv-account\n")
    monkeypatch.setenv("LM_ACCOUNT", "real-account")

    result = ingest_config.enable_dotenv(search_from=tmp_path)

    assert result == (tmp_path / ".env").resolve()
    assert os.environ["LM_ACCOUNT"] == "real-account"


def test_enable_dotenv_without_file_returns_none(tmp_path: Path) -> None:
    assert ingest_config.enable_dotenv(search_from=tmp_path / "missing" / "deeper") is None


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()
    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(ingest_config, "enable_dotenv", record_enable)
    monkeypatch.delenv(ingest_config.DOTENV_ENV_VAR, raising=False)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["info"], env={ingest_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env={ingest_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert calls == []


def test_endpoint_url_wins_over_account() -> None:
    settings = ingest_config.IngestEndpointSettings.from_env(
        {"LM_ACCOUNT": "acme", "LM_INGEST_URL": "http://localhost:8080/ingest", "LM_BEARER_TOKEN": " t ", "LM_INGEST_TIMEOUT": "2.5"}
    )
    assert settings.url == "http://localhost:8080/ingest"
    assert settings.bearer_token == "t"
    assert settings.timeout == 2.5


def test_endpoint_from_account() -> None:
    settings = ingest_config.IngestEndpointSettings.from_env({"LM_ACCOUNT": "acme"})
    assert settings.url == "https://acme.logicmonitor.com/rest/log/ingest"
    assert settings.bearer_token is None
    assert settings.timeout == 10.0


@pytest.mark.parametrize(
    ("environ", "message"),
    [
        ({}, "LM_ACCOUNT or LM_INGEST_URL"),
        ({"LM_ACCOUNT": "   "}, "LM_ACCOUNT or LM_INGEST_URL"),
        ({"LM_ACCOUNT": "acme", "LM_INGEST_TIMEOUT": "soon"}, "number of seconds"),
        ({"LM_ACCOUNT": "acme", "LM_INGEST_TIMEOUT": "0"}, "must be positive"),
    ],
)
def test_endpoint_settings_errors(environ: dict[str, str], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ingest_config.IngestEndpointSettings.from_env(environ)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, True), ("0", False), ("off", False), ("YES", True), ("maybe", True)],
)
def test_env_flag(raw: str | None, expected: bool, monkeypatch: pytest.MonkeyPatch) -> None:
    if raw is None:
        monkeypatch.delenv("LOG_INGEST_TEST_FLAG", raising=False)
    else:
        monkeypatch.setenv("LOG_INGEST_TEST_FLAG", raw)
    assert ingest_config.env_flag("LOG_INGEST_TEST_FLAG", default=True) is expected
