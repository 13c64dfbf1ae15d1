"""Shared test fixtures for ccgrant.

Provides a canned token endpoint served through :class:`httpx.MockTransport`,
a default client registration, isolated config directories, and output
state management. These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path

import httpx
import pytest

from ccgrant.models import ClientCredentialsGrantRequest, ClientRegistration
from ccgrant.output import OutputFormat, OutputManager, reset_output, set_output


TOKEN_URI = "https://auth.example.com/oauth2/token"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once CliRunner restores the streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Token endpoint
# ---------------------------------------------------------------------------


class MockTokenServer:
    """A queue of canned token endpoint responses.

    Every request sent through :meth:`client` is recorded in
    :attr:`requests` and answered with the next queued response.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: deque[httpx.Response] = deque()

    def enqueue(self, response: httpx.Response) -> None:
        self._responses.append(response)

    def enqueue_json(self, body: str, status_code: int = 200) -> None:
        self.enqueue(
            httpx.Response(
                status_code,
                headers={"Content-Type": "application/json"},
                content=body.encode("utf-8"),
            )
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.popleft()

    def take_request(self) -> httpx.Request:
        return self.requests.pop(0)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def token_server() -> MockTokenServer:
    return MockTokenServer()


@pytest.fixture
def registration() -> ClientRegistration:
    """Basic-authenticated registration with the ``read:user`` scope."""
    return ClientRegistration(
        registration_id="registration-id",
        client_id="client-id",
        client_secret="client-secret",
        token_uri=TOKEN_URI,
        scopes={"read:user"},
    )


@pytest.fixture
def grant_request(registration: ClientRegistration) -> ClientCredentialsGrantRequest:
    return ClientCredentialsGrantRequest(client_registration=registration)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces the XDG layout, points XDG_CONFIG_HOME at ``tmp_path/config``,
    clears CCGRANT_* environment variables and changes the working
    directory to tmp_path.
    """
    monkeypatch.setattr("ccgrant.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("CCGRANT_REGISTRATION", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
