"""
Tests for SessionTokenIssuer.

Tests cover:
- issue() payload (iat/exp, HS256)
- validate() for valid, missing, malformed, forged and expired tokens
- from_config() wiring
"""
import time

import jwt
import pytest

from conftest import TEST_SECRET
from tts_proxy.core.config import AppConfig
from tts_proxy.services.errors import Err, ErrorCode, ErrorType, Ok
from tts_proxy.services.session import (
    EXPIRED_TOKEN_MESSAGE,
    INVALID_TOKEN_MESSAGE,
    MISSING_TOKEN_MESSAGE,
    SessionTokenIssuer,
)


@pytest.fixture
def issuer():
    return SessionTokenIssuer(TEST_SECRET, ttl_seconds=3600)


class TestIssue:
    """Tests for issue()."""

    def test_payload_has_iat_and_exp(self, issuer):
        before = int(time.time())
        token = issuer.issue()
        claims = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        assert before <= claims["iat"] <= int(time.time())
        assert claims["exp"] - claims["iat"] == 3600

    def test_uses_injected_clock(self):
        issuer = SessionTokenIssuer(TEST_SECRET, ttl_seconds=60, clock=lambda: 1_000_000.7)
        claims = jwt.decode(
            issuer.issue(), TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )
        assert claims == {"iat": 1_000_000, "exp": 1_000_060}

    def test_tokens_are_independent(self, issuer):
        assert isinstance(issuer.issue(), str)
        assert issuer.validate(f"Bearer {issuer.issue()}").ok
        assert issuer.validate(f"Bearer {issuer.issue()}").ok


class TestValidate:
    """Tests for validate()."""

    def test_valid_token(self, issuer):
        result = issuer.validate(f"Bearer {issuer.issue()}")
        assert isinstance(result, Ok)
        assert set(result.value) == {"iat", "exp"}

    @pytest.mark.parametrize("header", [None, "", "Token abc", "bearer abc", "Bearer"])
    def test_missing_token(self, issuer, header):
        result = issuer.validate(header)
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.MISSING_TOKEN
        assert result.error.type == ErrorType.AUTHENTICATION
        assert result.error.status_code == 401
        assert result.error.message == MISSING_TOKEN_MESSAGE

    @pytest.mark.parametrize("header", ["Bearer ", "Bearer garbage", "Bearer a.b.c"])
    def test_malformed_token(self, issuer, header):
        result = issuer.validate(header)
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN
        assert result.error.message == INVALID_TOKEN_MESSAGE

    def test_wrong_secret(self, issuer):
        other = SessionTokenIssuer("another-secret-" + "0" * 48)
        result = issuer.validate(f"Bearer {other.issue()}")
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN
        assert result.error.message == INVALID_TOKEN_MESSAGE

    def test_expired_token(self, issuer):
        past = time.time() - 3601
        stale = SessionTokenIssuer(TEST_SECRET, ttl_seconds=3600, clock=lambda: past - 10)
        result = issuer.validate(f"Bearer {stale.issue()}")
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN
        assert result.error.message == EXPIRED_TOKEN_MESSAGE

    def test_expiry_follows_injected_clock(self):
        now = [1_000_000.0]
        issuer = SessionTokenIssuer(TEST_SECRET, ttl_seconds=3600, clock=lambda: now[0])
        header = f"Bearer {issuer.issue()}"

        assert issuer.validate(header).ok
        now[0] += 3599
        assert issuer.validate(header).ok
        now[0] += 1
        result = issuer.validate(header)
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN
        assert result.error.message == EXPIRED_TOKEN_MESSAGE

    def test_future_clock_token_accepted_by_same_clock(self):
        future = time.time() + 86400
        issuer = SessionTokenIssuer(TEST_SECRET, ttl_seconds=60, clock=lambda: future)
        assert issuer.validate(f"Bearer {issuer.issue()}").ok

    def test_non_numeric_exp_rejected(self, issuer):
        token = jwt.encode({"iat": int(time.time()), "exp": "soon"}, TEST_SECRET, algorithm="HS256")
        result = issuer.validate(f"Bearer {token}")
        assert isinstance(result, Err)
        assert result.error.message == INVALID_TOKEN_MESSAGE

    def test_token_without_exp_rejected(self, issuer):
        token = jwt.encode({"iat": int(time.time())}, TEST_SECRET, algorithm="HS256")
        result = issuer.validate(f"Bearer {token}")
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN

    def test_none_algorithm_rejected(self, issuer):
        now = int(time.time())
        token = jwt.encode({"iat": now, "exp": now + 60}, None, algorithm="none")
        result = issuer.validate(f"Bearer {token}")
        assert isinstance(result, Err)
        assert result.error.code == ErrorCode.INVALID_TOKEN


class TestFromConfig:
    """Tests for from_config()."""

    def test_uses_config_secret_and_ttl(self):
        config = AppConfig(api_key="k", session_secret=TEST_SECRET, session_ttl_seconds=120)
        issuer = SessionTokenIssuer.from_config(config)
        assert issuer.ttl_seconds == 120
        claims = jwt.decode(issuer.issue(), TEST_SECRET, algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == 120
