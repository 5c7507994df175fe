"""
Request context and configuration state for logging.

The request id lives in a ContextVar so each request handled on the
event loop logs with its own id. Level and configured flag are
process-wide.

Environment Variables:
    - TTS_PROXY_LOG_LEVEL: Log level (1-4 or name)
    - TTS_PROXY_LOG_DIR: Directory for the JSONL log file
    - TTS_PROXY_JSONL_FILE: JSONL filename (default tts-proxy.jsonl)
"""
from __future__ import annotations

import os
from contextvars import ContextVar
from typing import Any, Dict

from .levels import LogLevel

# "-" outside of a request
_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_configured: bool = False
_current_level: LogLevel = LogLevel.NORMAL


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(rid: str) -> None:
    """Set the request id used by every log line in the current context."""
    _request_id.set(rid)


def get_level() -> LogLevel:
    return _current_level


def set_level(level: LogLevel) -> None:
    global _current_level
    _current_level = level


def is_configured() -> bool:
    return _configured


def set_configured(value: bool) -> None:
    global _configured
    _configured = value


def read_logging_config() -> Dict[str, Any]:
    """
    Read logging options from the settings file and environment.

    The YAML `logging` section is optional; environment variables win.

    Returns:
        Dictionary with level, log_dir, jsonl_file and rotation options.
    """
    from tts_proxy.core.config import ConfigValidationError, Defaults, read_settings_file

    cfg: Dict[str, Any] = {}

    settings_path = os.getenv("TTS_PROXY_SETTINGS", Defaults.SETTINGS_PATH)
    try:
        cfg.update(read_settings_file(settings_path).get("logging", {}) or {})
    except (ConfigValidationError, OSError):
        # Broken settings are reported by load_config; logging still comes up
        pass

    if os.getenv("TTS_PROXY_LOG_LEVEL"):
        cfg["level"] = os.environ["TTS_PROXY_LOG_LEVEL"]
    if os.getenv("TTS_PROXY_LOG_DIR"):
        cfg["log_dir"] = os.environ["TTS_PROXY_LOG_DIR"]
    if os.getenv("TTS_PROXY_JSONL_FILE"):
        cfg["jsonl_file"] = os.environ["TTS_PROXY_JSONL_FILE"]

    return cfg
