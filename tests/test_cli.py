import pytest
from typer.testing import CliRunner

from whatsmyip import cli

runner = CliRunner()


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return calls


def test_help_exits_cleanly(served):
    result = runner.invoke(cli.app, ["--help"])

    assert result.exit_code == 0
    assert "--include" in result.output
    assert served == []


def test_serves_with_parsed_settings(served):
    result = runner.invoke(
        cli.app,
        ["--host", "127.0.0.1", "--port", "9000", "--include", "User-Agent, X-Real-IP", "--exclude", "cookie"],
    )

    assert result.exit_code == 0, result.output
    app, kwargs = served[0]
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9000
    settings = app.state.settings
    assert settings.include_headers == {"user-agent", "x-real-ip"}
    assert settings.exclude_headers == {"cookie"}


def test_environment_variables(served, monkeypatch):
    monkeypatch.setenv("WHATSMYIP_PORT", "8181")
    monkeypatch.setenv("WHATSMYIP_EXCLUDE", "Authorization")

    result = runner.invoke(cli.app, [])

    assert result.exit_code == 0, result.output
    app, kwargs = served[0]
    assert kwargs["port"] == 8181
    assert app.state.settings.exclude_headers == {"authorization"}


@pytest.mark.parametrize("port", ["0", "65536", "http"])
def test_invalid_port_is_rejected(served, port):
    result = runner.invoke(cli.app, ["--port", port])

    assert result.exit_code != 0
    assert served == []
