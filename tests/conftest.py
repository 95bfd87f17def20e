"""Shared test fixtures for skunk test suite."""

from pathlib import Path
from typing import Callable

import httpx
import pytest

from skunk.utils.config import Config


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config with workspace and skills path inside tmp_path."""
    return Config(workspace=tmp_path / ".skunk", skills_path=tmp_path / "skills")


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    """Requests recorded by transports built with make_transport."""
    return []


@pytest.fixture
def make_transport(
    requests_seen: list[httpx.Request],
) -> Callable[[dict[str, httpx.Response]], httpx.MockTransport]:
    """
    Build a MockTransport from a {path: Response} mapping.

    Unknown paths answer 404. Every request is appended to requests_seen.
    """

    def factory(routes: dict[str, httpx.Response]) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            response = routes.get(request.url.path)
            if response is None:
                return httpx.Response(404)
            # Fresh copy so a route can answer more than once
            return httpx.Response(
                response.status_code,
                headers=response.headers,
                content=response.content,
            )

        return httpx.MockTransport(handler)

    return factory
