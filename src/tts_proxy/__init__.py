"""
tts-proxy: Session-gated text-to-speech proxy for the Deepgram API.

A small FastAPI service that issues short-lived session tokens, validates
caller input, forwards text to Deepgram's /v1/speak endpoint and returns
either the raw MP3 audio or a normalized JSON error.

Endpoints:
    - GET  /api/session         short-lived signed token
    - POST /api/text-to-speech  text -> audio/mpeg (Bearer token)
    - GET  /api/metadata        [meta] table of deepgram.toml
    - GET  /health              liveness

Example Usage:
    >>> from tts_proxy.core.config import load_config
    >>> from tts_proxy.main import create_app
    >>>
    >>> app = create_app(load_config())
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
