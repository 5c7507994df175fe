"""
tts-proxy Services Layer.

Business logic between the HTTP layer and the upstream provider:
    - errors.py: NormalizedError, error codes, Ok/Err results
    - validators.py: request body and text validation
    - session.py: SessionTokenIssuer (JWT issue/validate)
    - speech_client.py: SpeechClient (Deepgram /v1/speak)
    - metadata.py: [meta] descriptor reader
"""
from .errors import (
    Err,
    ErrorCode,
    ErrorType,
    NormalizedError,
    Ok,
    Result,
    authentication_error,
    classify_upstream_error,
    normalize,
    upstream_error,
)
from .metadata import load_metadata
from .session import SessionTokenIssuer
from .speech_client import SpeechClient
from .validators import extract_text, parse_json_body, validate_text_input

__all__ = [
    "Err",
    "ErrorCode",
    "ErrorType",
    "NormalizedError",
    "Ok",
    "Result",
    "SessionTokenIssuer",
    "SpeechClient",
    "authentication_error",
    "classify_upstream_error",
    "extract_text",
    "load_metadata",
    "normalize",
    "parse_json_body",
    "upstream_error",
    "validate_text_input",
]
