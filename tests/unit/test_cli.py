"""Tests for CLI commands."""

from unittest.mock import patch

from typer.testing import CliRunner

from ergtracking import __version__
from ergtracking.cli.commands import app

runner = CliRunner()


def test_version() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_serve_uses_proxy_headers() -> None:
    """Test serve passes host, port and proxy settings to uvicorn."""
    with patch("uvicorn.run") as run:
        result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9000"])

    assert result.exit_code == 0
    args, kwargs = run.call_args
    assert args == ("ergtracking.api.app:app",)
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9000
    assert kwargs["proxy_headers"] is True
