"""
Session tokens.

Tokens are HS256 JWTs carrying only `iat` and `exp`. They are issued by
GET /api/session and checked on every protected request. Nothing is
stored: a token is valid while its signature matches the process secret
and `exp` has not passed. Restarting the process with a generated secret
invalidates all outstanding tokens.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import jwt

from tts_proxy.core.config import AppConfig
from tts_proxy.core.logging import debug, get_logger
from tts_proxy.services.errors import Err, ErrorCode, NormalizedError, Ok, Result, authentication_error

_LOG = get_logger("tts-proxy.session")

ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "

MISSING_TOKEN_MESSAGE = "Authorization header with Bearer token is required"
EXPIRED_TOKEN_MESSAGE = "Session expired, please refresh the page"
INVALID_TOKEN_MESSAGE = "Invalid session token"


class SessionTokenIssuer:
    """
    Issues and validates signed session tokens.

    Args:
        secret: HS256 signing secret.
        ttl_seconds: Token lifetime.
        clock: Returns the current epoch time; injectable for tests.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @classmethod
    def from_config(cls, config: AppConfig) -> "SessionTokenIssuer":
        return cls(config.session_secret, config.session_ttl_seconds)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self) -> str:
        """Create a token valid for ttl_seconds from now."""
        now = int(self._clock())
        payload = {
            "iat": now,
            "exp": now + self._ttl_seconds,
        }
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        debug(_LOG, "token_signed", exp=payload["exp"])
        return token

    def validate(self, authorization: Optional[str]) -> Result[Dict[str, Any], NormalizedError]:
        """
        Validate an Authorization header value.

        Args:
            authorization: Raw header value, or None when absent.

        Returns:
            Ok(claims) for a valid token; Err(AuthenticationError) with
            MISSING_TOKEN when there is no bearer token, or INVALID_TOKEN
            when it is expired, forged or malformed.
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return Err(authentication_error(ErrorCode.MISSING_TOKEN, MISSING_TOKEN_MESSAGE))

        token = authorization[len(BEARER_PREFIX):]
        try:
            # Time claims are checked below against self._clock
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError:
            return Err(authentication_error(ErrorCode.INVALID_TOKEN, INVALID_TOKEN_MESSAGE))

        exp = claims["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return Err(authentication_error(ErrorCode.INVALID_TOKEN, INVALID_TOKEN_MESSAGE))
        if exp <= self._clock():
            return Err(authentication_error(ErrorCode.INVALID_TOKEN, EXPIRED_TOKEN_MESSAGE))

        return Ok(claims)
