import logging

import pytest
from typer.testing import CliRunner

from recogate.domain.errors import HttpStatusError
from recogate.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# make_transport / ok_response: scripted transport factories
# isolated_config: autouse, keeps real config and env vars out


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI callback reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def configured_env(monkeypatch):
    monkeypatch.setenv("RECOGATE_API_BASE_URL", "https://reco.example.test")
    monkeypatch.setenv("RECOGATE_API_KEY", "integration-key")
    monkeypatch.setenv("RECOGATE_INITIAL_BACKOFF", "0.0")


@pytest.fixture
def patch_transport(mocker):
    """Replaces the HTTP transport built by the composition root."""
    def _patch(transport):
        return mocker.patch("recogate.main.build_transport", return_value=transport)
    return _patch


def test_user_command_flow(runner: CliRunner, configured_env, patch_transport, make_transport, ok_response):
    transport = make_transport(ok_response([{"productId": "sku-42", "score": 0.87}]))
    build = patch_transport(transport)

    result = runner.invoke(app, ["user", "user-1", "--limit", "3"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert transport.calls == [("/recommendations/user", {"userId": "user-1", "limit": 3})]
    assert "sku-42" in result.output
    assert transport.closed
    settings = build.call_args.args[0]
    assert settings.api_key == "integration-key"


def test_product_command_falls_back_on_server_errors(runner, configured_env, patch_transport, make_transport):
    transport = make_transport(HttpStatusError(503, "busy"))
    patch_transport(transport)

    result = runner.invoke(app, ["product", "sku-1"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert len(transport.calls) == 3
    assert transport.calls[0] == ("/recommendations/product", {"productId": "sku-1", "limit": 10})
    assert "No recommendations available" in result.output
    assert "Warning" in result.output


def test_invalid_limit_exits_with_error(runner, configured_env, patch_transport, make_transport, ok_response):
    transport = make_transport(ok_response([]))
    patch_transport(transport)

    result = runner.invoke(app, ["user", "user-1", "--limit", "0"])

    assert result.exit_code == 2
    assert transport.calls == []
    assert "Invalid request" in result.output


def test_missing_configuration_exits(runner):
    result = runner.invoke(app, ["user", "user-1"])

    assert result.exit_code == 1
    assert "Initialization Failed" in result.output


def test_config_command_masks_key(runner, configured_env, patch_transport, make_transport, ok_response):
    patch_transport(make_transport(ok_response([])))

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert "https://reco.example.test" in result.output
    assert "integration-key" not in result.output
    assert "inte****" in result.output
