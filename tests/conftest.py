import json
from collections.abc import Callable

import httpx
import pytest

from api.exa_client import ExaClient

TEST_KEY = "test-key-1234567890"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real credential file and environment."""
    monkeypatch.delenv("EXA_API_KEY", raising=False)
    monkeypatch.delenv("EXA_API_URL", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_client() -> Callable[..., ExaClient]:
    """Build an ExaClient whose network calls are answered by ``handler``."""
    clients = []

    def _make(handler, **kwargs) -> ExaClient:
        client = ExaClient(
            TEST_KEY,
            "https://api.test.local/",
            transport=httpx.MockTransport(handler),
            version="9.9.9",
            **kwargs,
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def sse_body(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


def data_line(event: dict) -> str:
    return "data: " + json.dumps(event)
