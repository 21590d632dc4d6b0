"""Pytest configuration and fixtures."""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import httpx
import pytest

# Set test environment before importing app modules
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["AI_PROVIDER"] = "openai"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

FIXED_NOW = datetime(2026, 10, 19, 14, 30, 5)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock returning a fixed moment."""
    return lambda: FIXED_NOW


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    """Create a small PNG file on disk."""
    path = tmp_path / "Mountain Photo.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def settings():
    """Settings with both provider keys configured and no .env file."""
    from picmeta.core.config import Settings

    return Settings(
        _env_file=None,
        ai_provider="openai",
        openai_api_key="test-openai-key",
        gemini_api_key="test-gemini-key",
    )


def openai_reply(content: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def gemini_reply(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class RecordingTransport:
    """Builds an httpx.MockTransport and keeps the requests it received."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def payload(self, index: int = 0) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def reply_with() -> Callable[..., RecordingTransport]:
    """Factory for transports that answer with a fixed JSON body."""

    def _factory(body: Any, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=body))

    return _factory


@pytest.fixture
def failing_transport() -> RecordingTransport:
    """Transport whose every request fails to connect."""

    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return RecordingTransport(_fail)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reset cached settings between tests."""
    from picmeta.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
