"""
Error taxonomy, normalization and the pipeline Result type.

Every failure the proxy reports is a NormalizedError, serialized as:

    {
        "error": {
            "type": "ValidationError",
            "code": "EMPTY_TEXT",
            "message": "Text must be a non-empty string",
            "details": {"originalError": "Text must be a non-empty string"}
        }
    }

Pipeline stages (auth, body parsing, validation, upstream call) return
Ok(value) or Err(error); the handler stops at the first Err.

Upstream Classification:
    The provider reports failures as free text. classify_upstream_error()
    maps that text onto a status code and error code by substring. It is
    the only place that heuristic lives; replace it here if the provider
    ever exposes structured error codes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Generic, Optional, Tuple, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class ErrorType:
    """Error categories returned in error.type."""
    VALIDATION = "ValidationError"
    GENERATION = "GenerationError"
    AUTHENTICATION = "AuthenticationError"


class ErrorCode:
    """Error codes returned in error.code."""
    EMPTY_TEXT = "EMPTY_TEXT"
    INVALID_TEXT = "INVALID_TEXT"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful stage result."""
    value: T
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed stage result; stops the pipeline."""
    error: E
    ok: ClassVar[bool] = False


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class NormalizedError:
    """
    A client-facing error.

    Attributes:
        type: One of ErrorType.
        code: One of ErrorCode.
        message: Human-readable message.
        original_error: Raw validation/upstream message.
        status_code: HTTP status the error is reported with.
    """
    type: str
    code: str
    message: str
    original_error: str
    status_code: int = 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response body."""
        return {
            "error": {
                "type": self.type,
                "code": self.code,
                "message": self.message,
                "details": {
                    "originalError": self.original_error,
                },
            }
        }


def normalize(message: str, status_code: int = 500, code: Optional[str] = None) -> NormalizedError:
    """
    Build a validation or generation error.

    Args:
        message: Human-readable message (also kept as originalError).
        status_code: 400 for validation errors, anything else for
            generation errors.
        code: Explicit error code. When omitted, 400 errors are classified
            by message keywords and all others get INVALID_TEXT.

    Returns:
        NormalizedError with ValidationError type for 400, GenerationError
        otherwise.
    """
    err_type = ErrorType.VALIDATION if status_code == 400 else ErrorType.GENERATION

    if code is None:
        code = ErrorCode.INVALID_TEXT
        if status_code == 400:
            msg = message.lower()
            if "empty" in msg:
                code = ErrorCode.EMPTY_TEXT
            elif "model" in msg:
                code = ErrorCode.MODEL_NOT_FOUND
            elif "long" in msg:
                code = ErrorCode.TEXT_TOO_LONG

    return NormalizedError(
        type=err_type,
        code=code,
        message=message,
        original_error=message,
        status_code=status_code,
    )


def authentication_error(code: str, message: str) -> NormalizedError:
    """Build a 401 AuthenticationError."""
    return NormalizedError(
        type=ErrorType.AUTHENTICATION,
        code=code,
        message=message,
        original_error=message,
        status_code=401,
    )


_MODEL_KEYWORDS = ("model", "not found")
_LENGTH_KEYWORDS = ("too long", "length", "limit", "exceed")
_INVALID_KEYWORDS = ("invalid", "malformed")


def classify_upstream_error(message: str) -> Tuple[int, Optional[str]]:
    """
    Map a provider failure message to (status_code, error_code).

    Rules are checked in order; the first match wins:
        "model" / "not found"                   -> 400 MODEL_NOT_FOUND
        "too long" / "length" / "limit" / "exceed" -> 400 TEXT_TOO_LONG
        "invalid" / "malformed"                 -> 400 INVALID_TEXT
        anything else                           -> 500, no explicit code

    Examples:
        >>> classify_upstream_error("Model aura-x not found")
        (400, 'MODEL_NOT_FOUND')
        >>> classify_upstream_error("upstream connect error")
        (500, None)
    """
    msg = message.lower()
    if any(k in msg for k in _MODEL_KEYWORDS):
        return 400, ErrorCode.MODEL_NOT_FOUND
    if any(k in msg for k in _LENGTH_KEYWORDS):
        return 400, ErrorCode.TEXT_TOO_LONG
    if any(k in msg for k in _INVALID_KEYWORDS):
        return 400, ErrorCode.INVALID_TEXT
    return 500, None


def upstream_error(message: str) -> NormalizedError:
    """Classify and normalize a provider failure message."""
    status_code, code = classify_upstream_error(message)
    return normalize(message, status_code, code)
