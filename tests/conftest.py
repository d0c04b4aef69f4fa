import asyncio
import json
import os
from typing import Any, Dict, List, Tuple, Union

import pytest
from typer.testing import CliRunner

from recogate.domain.interfaces.transport import Transport, TransportResponse
from recogate.domain.models.common import Endpoint, ResponseBody, RetryPolicy
from recogate.infrastructure.config import settings as settings_module

Step = Union[TransportResponse, BaseException]


def ok(items: List[Dict[str, Any]], status_code: int = 200) -> TransportResponse:
    """Builds a 2xx TransportResponse carrying the given recommendation items."""
    return TransportResponse(status_code=status_code, body=ResponseBody(json.dumps({"recommendations": items})))


class ScriptedTransport(Transport):
    """Transport that replays a fixed script of responses/errors and records every call.

    The last step repeats once the script is exhausted.
    """

    def __init__(self, *steps: Step, hang_seconds: float = 0.0):
        self.steps = list(steps)
        self.hang_seconds = hang_seconds
        self.calls: List[Tuple[Endpoint, Dict[str, Any]]] = []
        self.call_times: List[float] = []
        self.closed = False

    async def send(self, endpoint: Endpoint, payload: Dict[str, Any]) -> TransportResponse:
        self.calls.append((endpoint, dict(payload)))
        self.call_times.append(asyncio.get_running_loop().time())
        if self.hang_seconds:
            await asyncio.sleep(self.hang_seconds)
        step = self.steps[min(len(self.calls), len(self.steps)) - 1]
        if isinstance(step, BaseException):
            raise step
        return step

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def retry_policy():
    """The documented defaults: 3 attempts, 1s initial backoff, doubling."""
    return RetryPolicy(max_attempts=3, initial_delay=1.0, multiplier=2.0)


@pytest.fixture
def sample_items():
    return [
        {"productId": "sku-1", "score": 0.93, "category": "books"},
        {"productId": "sku-2", "score": 0.71},
    ]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the developer's real config, .env and env vars."""
    for name in list(os.environ):
        if name.startswith("RECOGATE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings_module, "DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    monkeypatch.chdir(tmp_path)
    settings_module.reset_configuration()
    settings_module.clear_test_config()
    yield
    settings_module.reset_configuration()
    settings_module.clear_test_config()


@pytest.fixture
def ok_response():
    """Factory fixture: ok_response(items) -> 2xx TransportResponse."""
    return ok


@pytest.fixture
def make_transport():
    """Factory fixture: make_transport(*steps, hang_seconds=0.0) -> ScriptedTransport."""
    return ScriptedTransport
