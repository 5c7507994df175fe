"""
FastAPI Dependency Providers.

Everything a handler needs is created once by create_app() and stored
on app.state. These providers hand those objects to route handlers via
Depends(), so handlers never touch module globals and tests can swap
any of them on a fresh app.

    app.state.config         -> AppConfig
    app.state.issuer         -> SessionTokenIssuer
    app.state.speech_client  -> SpeechClient (or a test double)
"""
from __future__ import annotations

from fastapi import Request

from tts_proxy.core.config import AppConfig
from tts_proxy.services.session import SessionTokenIssuer
from tts_proxy.services.speech_client import SpeechClient


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_issuer(request: Request) -> SessionTokenIssuer:
    return request.app.state.issuer


def get_speech_client(request: Request) -> SpeechClient:
    return request.app.state.speech_client
