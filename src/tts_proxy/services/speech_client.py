"""Async client for the Deepgram text-to-speech REST API."""

from __future__ import annotations

import httpx

from tts_proxy.core.config import AppConfig, Defaults
from tts_proxy.core.logging import debug, get_logger, verbose
from tts_proxy.services.errors import Err, Ok, Result

_LOG = get_logger("tts-proxy.upstream")

SPEAK_PATH = "/v1/speak"


class SpeechClient:
    """
    Minimal async wrapper around Deepgram `/v1/speak`.

    One shared httpx.AsyncClient is opened by start() and closed by
    stop(); the application lifespan drives both. synthesize() never
    raises for provider or transport failures, it returns Err(message).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = Defaults.UPSTREAM_BASE_URL,
        connect_timeout_s: float = Defaults.UPSTREAM_CONNECT_TIMEOUT_S,
        read_timeout_s: float = Defaults.UPSTREAM_READ_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(read_timeout_s, connect=connect_timeout_s)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SpeechClient":
        return cls(
            api_key=config.api_key,
            base_url=config.upstream_base_url,
            connect_timeout_s=config.connect_timeout_s,
            read_timeout_s=config.read_timeout_s,
            transport=transport,
        )

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Authorization": f"Token {self._api_key}"},
            )

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("SpeechClient not started")
        return self._client

    async def synthesize(self, text: str, model: str) -> Result[bytes, str]:
        """
        Synthesize text with the given voice model.

        Returns:
            Ok(audio bytes) on a 2xx response, Err(message) otherwise.
        """
        client = self._require_client()
        verbose(_LOG, "upstream_request", model=model, chars=len(text))
        try:
            resp = await client.post(SPEAK_PATH, params={"model": model}, json={"text": text})
        except httpx.HTTPError as e:
            msg = str(e).strip() or e.__class__.__name__
            return Err(msg)

        if not resp.is_success:
            return Err(self._extract_error(resp))

        debug(_LOG, "upstream_response", status=resp.status_code, bytes=len(resp.content))
        return Ok(resp.content)

    @staticmethod
    def _extract_error(resp: httpx.Response) -> str:
        fallback = f"Deepgram API returned status {resp.status_code}"
        try:
            body = resp.json()
        except ValueError:
            return resp.text.strip() or fallback

        if isinstance(body, dict):
            for key in ("err_msg", "message"):
                value = body.get(key)
                if value:
                    return str(value)
        return fallback
