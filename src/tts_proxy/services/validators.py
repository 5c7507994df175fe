"""
Input validation for the text-to-speech endpoint.

Validation Rules:
    - text: required, must be a str, non-empty after stripping whitespace.
      Any other JSON type (null, number, object, list, bool) is invalid.
    - body: must be valid JSON. A body that is valid JSON but not an
      object carries no `text` field.

Both checks return Results so the route can stop at the first failure
without raising.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from tts_proxy.services.errors import Err, ErrorCode, NormalizedError, Ok, Result, normalize


def validate_text_input(text: Any) -> bool:
    """
    Check that text is a non-empty string.

    Examples:
        >>> validate_text_input("Hello")
        True
        >>> validate_text_input("   ")
        False
        >>> validate_text_input(42)
        False
    """
    return isinstance(text, str) and bool(text.strip())


def parse_json_body(raw: bytes) -> Result[Dict[str, Any], NormalizedError]:
    """
    Parse a request body as JSON.

    Returns:
        Ok(mapping) for valid JSON (non-object JSON becomes an empty
        mapping), Err(INVALID_TEXT) otherwise.
    """
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError):
        return Err(normalize("Invalid JSON in request body", 400, ErrorCode.INVALID_TEXT))

    if not isinstance(body, dict):
        return Ok({})
    return Ok(body)


def extract_text(body: Dict[str, Any]) -> Result[str, NormalizedError]:
    """
    Pull a valid `text` field out of a parsed body.

    Returns:
        Ok(text) or Err(EMPTY_TEXT) when text is missing, null or invalid.
    """
    text = body.get("text")
    if text is None:
        return Err(normalize("Text parameter is required", 400, ErrorCode.EMPTY_TEXT))

    if not validate_text_input(text):
        return Err(normalize("Text must be a non-empty string", 400, ErrorCode.EMPTY_TEXT))

    return Ok(text)
