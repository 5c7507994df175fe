"""Shared fixtures: test configuration, stub upstream client, test app."""
from __future__ import annotations

from typing import List, Tuple

import pytest

from tts_proxy.core.config import AppConfig
from tts_proxy.services.errors import Ok

TEST_SECRET = "5f2b9c0e7a1d4e3f8b6a2c9d0e1f7a3b5c8d2e4f6a9b1c3d5e7f9a2b4c6d8e0f"
FAKE_MP3 = b"ID3\x04\x00\x00\x00\x00\x00\x00" + b"\xff\xfb\x90\x64" * 64


class StubSpeechClient:
    """Stands in for SpeechClient; records calls and returns a fixed result."""

    def __init__(self, result=None, exc: Exception | None = None):
        self.result = result if result is not None else Ok(FAKE_MP3)
        self.exc = exc
        self.calls: List[Tuple[str, str]] = []
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def synthesize(self, text: str, model: str):
        self.calls.append((text, model))
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture
def metadata_file(tmp_path):
    path = tmp_path / "deepgram.toml"
    path.write_text(
        '[meta]\ntitle = "Text-to-Speech Proxy"\nuseCase = "Text-to-Speech"\n'
        'tags = ["tts", "aura"]\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def config(metadata_file) -> AppConfig:
    return AppConfig(
        api_key="test-api-key",
        session_secret=TEST_SECRET,
        metadata_path=str(metadata_file),
    )


@pytest.fixture
def stub_client() -> StubSpeechClient:
    return StubSpeechClient()


@pytest.fixture
def app(config, stub_client):
    from tts_proxy.main import create_app

    return create_app(config, speech_client=stub_client)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    token = client.get("/api/session").json()["token"]
    return {"Authorization": f"Bearer {token}"}
