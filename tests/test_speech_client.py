"""
Tests for the upstream SpeechClient.

Uses httpx.MockTransport so no network access is needed.

Tests cover:
- Request shape: path, model query parameter, Token auth header, JSON body
- Error message extraction (err_msg, message, raw text, status fallback)
- Transport failures become Err
- start()/stop() lifecycle
"""
from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from tts_proxy.core.config import AppConfig
from tts_proxy.services.errors import Err, Ok
from tts_proxy.services.speech_client import SpeechClient


def _run(handler, text="Hello", model="aura-2-thalia-en", **kwargs):
    async def go():
        client = SpeechClient("dg-key", transport=httpx.MockTransport(handler), **kwargs)
        await client.start()
        try:
            return await client.synthesize(text, model)
        finally:
            await client.stop()

    return asyncio.run(go())


class TestRequest:
    """The outgoing request matches the provider contract."""

    def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = request.url
            seen["auth"] = request.headers["authorization"]
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b"mp3-bytes")

        result = _run(handler, text="Hello, world!", model="aura-2-orion-en")

        assert isinstance(result, Ok)
        assert result.value == b"mp3-bytes"
        assert seen["method"] == "POST"
        assert seen["url"].host == "api.deepgram.com"
        assert seen["url"].path == "/v1/speak"
        assert seen["url"].params["model"] == "aura-2-orion-en"
        assert seen["auth"] == "Token dg-key"
        assert seen["content_type"] == "application/json"
        assert seen["body"] == {"text": "Hello, world!"}

    def test_custom_base_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, content=b"x")

        _run(handler, base_url="http://localhost:5555/")
        assert seen["url"].startswith("http://localhost:5555/v1/speak?")

    def test_body_returned_unchanged(self):
        audio = bytes(range(256)) * 4
        result = _run(lambda request: httpx.Response(200, content=audio))
        assert result.value == audio


class TestErrorExtraction:
    """Non-2xx responses become Err(message)."""

    def test_err_msg_field(self):
        result = _run(lambda r: httpx.Response(400, json={"err_code": "X", "err_msg": "No such model"}))
        assert isinstance(result, Err)
        assert result.error == "No such model"

    def test_message_field(self):
        result = _run(lambda r: httpx.Response(422, json={"message": "Text too long"}))
        assert result.error == "Text too long"

    def test_err_msg_preferred(self):
        result = _run(lambda r: httpx.Response(400, json={"err_msg": "first", "message": "second"}))
        assert result.error == "first"

    def test_json_without_message(self):
        result = _run(lambda r: httpx.Response(503, json={"detail": "nope"}))
        assert result.error == "Deepgram API returned status 503"

    def test_plain_text_body(self):
        result = _run(lambda r: httpx.Response(502, text="Bad Gateway"))
        assert result.error == "Bad Gateway"

    def test_empty_body(self):
        result = _run(lambda r: httpx.Response(500))
        assert result.error == "Deepgram API returned status 500"


class TestTransportFailure:
    """Connection errors are reported, not raised."""

    def test_connect_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = _run(handler)
        assert isinstance(result, Err)
        assert result.error == "connection refused"

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("", request=request)

        result = _run(handler)
        assert isinstance(result, Err)
        assert result.error == "ReadTimeout"


class TestLifecycle:
    """start()/stop() manage the shared AsyncClient."""

    def test_synthesize_before_start(self):
        client = SpeechClient("dg-key")
        with pytest.raises(RuntimeError, match="not started"):
            asyncio.run(client.synthesize("Hello", "aura-2-thalia-en"))

    def test_stop_is_idempotent(self):
        async def go():
            client = SpeechClient("dg-key", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
            await client.start()
            await client.stop()
            await client.stop()

        asyncio.run(go())

    def test_from_config(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, content=b"ok")

        config = AppConfig(api_key="cfg-key", session_secret="x" * 64, upstream_base_url="http://upstream.test")

        async def go():
            client = SpeechClient.from_config(config, transport=httpx.MockTransport(handler))
            await client.start()
            try:
                return await client.synthesize("Hi", config.default_model)
            finally:
                await client.stop()

        assert asyncio.run(go()).value == b"ok"
        assert seen["url"].host == "upstream.test"
        assert seen["auth"] == "Token cfg-key"
