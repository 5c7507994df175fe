"""
tts-proxy API Routes.

Endpoints:
    GET  /api/session         - Issue a session token (no auth)
    POST /api/text-to-speech  - Synthesize text (Bearer token required)
    GET  /api/metadata        - [meta] table of the descriptor file
    GET  /health              - Liveness probe

Request Flow (POST /api/text-to-speech):
    1. Generate a request id for log correlation
    2. Validate the session token            -> 401 on failure
    3. Parse the JSON body                   -> 400 INVALID_TEXT
    4. Validate `text`                       -> 400 EMPTY_TEXT
    5. Call the provider with text + model   -> classified 400/500
    6. Return audio/mpeg bytes

Every stage returns Ok/Err; the first Err is rendered as the normalized
error body and nothing after it runs.

Example Usage:
    >>> import httpx
    >>> token = httpx.get("http://localhost:8081/api/session").json()["token"]
    >>> r = httpx.post(
    ...     "http://localhost:8081/api/text-to-speech",
    ...     params={"model": "aura-2-thalia-en"},
    ...     headers={"Authorization": f"Bearer {token}"},
    ...     json={"text": "Hello, world!"},
    ... )
    >>> open("hello.mp3", "wb").write(r.content)
"""
from __future__ import annotations

import time
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response
from fastapi.responses import JSONResponse

from tts_proxy.api.dependencies import get_config, get_issuer, get_speech_client
from tts_proxy.api.schemas import (
    TTS_RESPONSES,
    HealthResponse,
    MetadataErrorResponse,
    SessionResponse,
)
from tts_proxy.core.config import AppConfig
from tts_proxy.core.logging import error, fail, get_logger, info, set_request_id, success, warn
from tts_proxy.services.errors import Err, NormalizedError, normalize, upstream_error
from tts_proxy.services.metadata import load_metadata
from tts_proxy.services.session import SessionTokenIssuer
from tts_proxy.services.speech_client import SpeechClient
from tts_proxy.services.validators import extract_text, parse_json_body

router = APIRouter()

_LOG = get_logger("tts-proxy.api")

AUDIO_MEDIA_TYPE = "audio/mpeg"


def _error_response(err: NormalizedError, rid: Optional[str] = None) -> JSONResponse:
    headers = {"X-Request-Id": rid} if rid else None
    return JSONResponse(status_code=err.status_code, content=err.to_dict(), headers=headers)


@router.get("/api/session", response_model=SessionResponse)
def issue_session(issuer: SessionTokenIssuer = Depends(get_issuer)):
    """Issue a signed session token valid for one hour."""
    token = issuer.issue()
    info(_LOG, "session_issued", ttl=issuer.ttl_seconds)
    return SessionResponse(token=token)


@router.post("/api/text-to-speech", response_class=Response, responses=TTS_RESPONSES)
async def text_to_speech(
    request: Request,
    model: Optional[str] = Query(default=None, description="Voice model id"),
    authorization: Optional[str] = Header(default=None),
    config: AppConfig = Depends(get_config),
    issuer: SessionTokenIssuer = Depends(get_issuer),
    client: SpeechClient = Depends(get_speech_client),
):
    """
    Convert text to speech.

    Accepts:
        - Query parameter: model (optional, defaults to the configured voice)
        - Body: JSON object with a `text` field (required)

    Returns:
        - 200: binary audio (audio/mpeg)
        - 400/401/500: normalized error JSON
    """
    rid = str(uuid.uuid4())[:12]
    set_request_id(rid)

    auth = issuer.validate(authorization)
    if isinstance(auth, Err):
        warn(_LOG, "auth_rejected", status=auth.error.status_code, code=auth.error.code)
        return _error_response(auth.error, rid)

    body = parse_json_body(await request.body())
    if isinstance(body, Err):
        warn(_LOG, "bad_request", status=body.error.status_code, code=body.error.code)
        return _error_response(body.error, rid)

    text = extract_text(body.value)
    if isinstance(text, Err):
        warn(_LOG, "bad_request", status=text.error.status_code, code=text.error.code)
        return _error_response(text.error, rid)

    model = model or config.default_model
    info(_LOG, "tts_request", chars=len(text.value), model=model)

    t0 = time.perf_counter()
    try:
        audio = await client.synthesize(text.value, model)
    except Exception as e:
        error(_LOG, "tts_unexpected_error", exc_info=True, reason=str(e))
        return _error_response(normalize(str(e) or e.__class__.__name__, 500), rid)
    elapsed = time.perf_counter() - t0

    if isinstance(audio, Err):
        err = upstream_error(audio.error)
        fail(
            _LOG, "tts_failed",
            status=err.status_code,
            code=err.code,
            reason=audio.error,
            seconds=round(elapsed, 3),
        )
        return _error_response(err, rid)

    success(_LOG, "tts_success", bytes=len(audio.value), seconds=round(elapsed, 3))
    return Response(
        content=audio.value,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"X-Request-Id": rid},
    )


@router.get(
    "/api/metadata",
    responses={500: {"model": MetadataErrorResponse}},
)
def metadata(config: AppConfig = Depends(get_config)):
    """Return the [meta] table of the metadata descriptor."""
    result = load_metadata(config.metadata_path)
    if isinstance(result, Err):
        return JSONResponse(status_code=500, content=result.error)
    return result.value


@router.get("/health", response_model=HealthResponse)
def health():
    """Health check; does not touch the provider."""
    return HealthResponse(status="ok")
