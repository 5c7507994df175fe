"""
FastAPI Application Entry Point.

This module builds the tts-proxy application: it loads the immutable
configuration, creates the token issuer and upstream client, installs
the CORS middleware and registers the routes.

Usage:
    # Via the CLI (prints the route banner, exits cleanly on missing key)
    tts-proxy --port 8081

    # Or with uvicorn's factory mode
    uvicorn tts_proxy.main:create_app --factory --host 0.0.0.0 --port 8081
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response

from tts_proxy import __version__
from tts_proxy.api.routes import router
from tts_proxy.core.config import API_KEY_HELP, AppConfig, MissingApiKeyError, load_config
from tts_proxy.core.logging import configure_logging, get_logger, info
from tts_proxy.services.session import SessionTokenIssuer
from tts_proxy.services.speech_client import SpeechClient

_LOG = get_logger("tts-proxy.app")

# Sent on every response, including errors and preflight replies
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the upstream client on startup and close it on shutdown."""
    client = app.state.speech_client
    await client.start()
    info(_LOG, "tts-proxy starting up", upstream=app.state.config.upstream_base_url)
    try:
        yield
    finally:
        await client.stop()
        info(_LOG, "tts-proxy shutting down")


def create_app(
    config: Optional[AppConfig] = None,
    speech_client: Optional[SpeechClient] = None,
    issuer: Optional[SessionTokenIssuer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Service configuration. Loaded from settings/environment
            when omitted.
        speech_client: Upstream client. Built from config when omitted.
        issuer: Session token issuer. Built from config when omitted.

    Returns:
        FastAPI: Configured application instance.

    Raises:
        SystemExit: If config is loaded here and no provider key is set;
            the remediation text is printed to stderr first.
    """
    configure_logging()

    if config is None:
        try:
            config = load_config()
        except MissingApiKeyError:
            print(API_KEY_HELP, file=sys.stderr)
            raise SystemExit(1)

    app = FastAPI(title="tts-proxy", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.issuer = issuer or SessionTokenIssuer.from_config(config)
    app.state.speech_client = speech_client or SpeechClient.from_config(config)

    @app.middleware("http")
    async def cors(request: Request, call_next):
        """Answer preflight requests and add CORS headers everywhere."""
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.include_router(router)

    return app
