"""
Configuration Management for tts-proxy.

This module builds the single immutable AppConfig the service runs with.
It is loaded once at process start and handed to handlers through the
application state, never read from module globals.

Configuration Hierarchy (highest priority first):
    1. Environment variables (DEEPGRAM_API_KEY, SESSION_SECRET, HOST, PORT, ...)
    2. Optional YAML file (config/settings.yaml or TTS_PROXY_SETTINGS)
    3. Defaults class values

A .env file in the working directory is loaded into the process
environment before anything is read.

Example settings.yaml:
    server:
      host: 0.0.0.0
      port: 8081

    upstream:
      base_url: https://api.deepgram.com
      default_model: aura-2-thalia-en
      connect_timeout_s: 30
      read_timeout_s: 120

    session:
      ttl_seconds: 3600

    metadata:
      path: deepgram.toml
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv


class ConfigValidationError(Exception):
    """
    Raised when configuration validation fails.

    This exception is thrown when a configuration value is outside
    acceptable bounds or of the wrong type.
    """
    pass


class MissingApiKeyError(ConfigValidationError):
    """Raised when the upstream provider API key is not configured."""

    def __init__(self, message: str = "Deepgram API key not found"):
        self.message = message
        super().__init__(message)


# Printed by the entry points before exiting on MissingApiKeyError
API_KEY_HELP = """
  ERROR: Deepgram API key not found!

Please set your API key using one of these methods:

1. Create a .env file (recommended):
   DEEPGRAM_API_KEY=your_api_key_here

2. Environment variable:
   export DEEPGRAM_API_KEY=your_api_key_here

Get your API key at: https://console.deepgram.com
"""


class Defaults:
    """
    Centralized default configuration values.

    Sections:
        - Server: bind address
        - Upstream: provider endpoint and timeouts
        - Session: token lifetime
        - Metadata: descriptor file location
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Server
    # ─────────────────────────────────────────────────────────────────────────
    SERVER_HOST = "0.0.0.0"
    SERVER_PORT = 8081

    # ─────────────────────────────────────────────────────────────────────────
    # Upstream provider
    # ─────────────────────────────────────────────────────────────────────────
    UPSTREAM_BASE_URL = "https://api.deepgram.com"
    UPSTREAM_DEFAULT_MODEL = "aura-2-thalia-en"
    UPSTREAM_CONNECT_TIMEOUT_S = 30.0   # TCP/TLS connect
    UPSTREAM_READ_TIMEOUT_S = 120.0     # Long texts take a while to synthesize

    # ─────────────────────────────────────────────────────────────────────────
    # Session tokens
    # ─────────────────────────────────────────────────────────────────────────
    SESSION_TTL_SECONDS = 3600          # 1 hour

    # ─────────────────────────────────────────────────────────────────────────
    # Metadata descriptor
    # ─────────────────────────────────────────────────────────────────────────
    METADATA_PATH = "deepgram.toml"

    SETTINGS_PATH = "config/settings.yaml"


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable service configuration.

    Attributes:
        api_key: Deepgram API key (required).
        session_secret: HS256 signing secret for session tokens.
        host: Bind host.
        port: Bind port.
        upstream_base_url: Provider base URL (no trailing slash).
        default_model: Voice model used when the request names none.
        connect_timeout_s: Upstream connect timeout.
        read_timeout_s: Upstream response timeout.
        session_ttl_seconds: Token lifetime.
        metadata_path: Path to the TOML descriptor served by /api/metadata.
    """
    api_key: str
    session_secret: str
    host: str = Defaults.SERVER_HOST
    port: int = Defaults.SERVER_PORT
    upstream_base_url: str = Defaults.UPSTREAM_BASE_URL
    default_model: str = Defaults.UPSTREAM_DEFAULT_MODEL
    connect_timeout_s: float = Defaults.UPSTREAM_CONNECT_TIMEOUT_S
    read_timeout_s: float = Defaults.UPSTREAM_READ_TIMEOUT_S
    session_ttl_seconds: int = Defaults.SESSION_TTL_SECONDS
    metadata_path: str = Defaults.METADATA_PATH

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"AppConfig(host={self.host!r}, port={self.port}, "
            f"upstream_base_url={self.upstream_base_url!r}, "
            f"default_model={self.default_model!r}, "
            f"metadata_path={self.metadata_path!r})"
        )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], env: Mapping[str, str]) -> "AppConfig":
        """
        Build a validated AppConfig from raw YAML data and an environment.

        Args:
            raw: Parsed YAML settings (may be empty).
            env: Environment mapping (usually os.environ).

        Returns:
            Validated AppConfig.

        Raises:
            MissingApiKeyError: If DEEPGRAM_API_KEY is absent or empty.
            ConfigValidationError: If any value fails validation.
        """
        api_key = (env.get("DEEPGRAM_API_KEY") or "").strip()
        if not api_key:
            raise MissingApiKeyError()

        # Generated once per process when not supplied
        session_secret = env.get("SESSION_SECRET") or secrets.token_hex(32)

        server_raw = raw.get("server", {}) or {}
        upstream_raw = raw.get("upstream", {}) or {}
        session_raw = raw.get("session", {}) or {}
        metadata_raw = raw.get("metadata", {}) or {}

        host = env.get("HOST") or str(server_raw.get("host", Defaults.SERVER_HOST))
        port = cls._parse_int("server.port", env.get("PORT") or server_raw.get("port", Defaults.SERVER_PORT))
        cls._validate_range("server.port", port, 1, 65535)

        connect_timeout_s = cls._parse_float(
            "upstream.connect_timeout_s",
            upstream_raw.get("connect_timeout_s", Defaults.UPSTREAM_CONNECT_TIMEOUT_S),
        )
        read_timeout_s = cls._parse_float(
            "upstream.read_timeout_s",
            upstream_raw.get("read_timeout_s", Defaults.UPSTREAM_READ_TIMEOUT_S),
        )
        cls._validate_positive("upstream.connect_timeout_s", connect_timeout_s)
        cls._validate_positive("upstream.read_timeout_s", read_timeout_s)

        ttl = cls._parse_int("session.ttl_seconds", session_raw.get("ttl_seconds", Defaults.SESSION_TTL_SECONDS))
        cls._validate_positive("session.ttl_seconds", ttl)

        metadata_path = env.get("TTS_PROXY_METADATA") or str(
            metadata_raw.get("path", Defaults.METADATA_PATH)
        )

        return cls(
            api_key=api_key,
            session_secret=session_secret,
            host=host,
            port=port,
            upstream_base_url=str(upstream_raw.get("base_url", Defaults.UPSTREAM_BASE_URL)).rstrip("/"),
            default_model=str(upstream_raw.get("default_model", Defaults.UPSTREAM_DEFAULT_MODEL)),
            connect_timeout_s=connect_timeout_s,
            read_timeout_s=read_timeout_s,
            session_ttl_seconds=ttl,
            metadata_path=metadata_path,
        )

    @staticmethod
    def _parse_int(name: str, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"{name} must be an integer, got {value!r}")

    @staticmethod
    def _parse_float(name: str, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigValidationError(f"{name} must be a number, got {value!r}")

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within a range [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")


def read_settings_file(path: str | Path) -> Dict[str, Any]:
    """
    Read an optional YAML settings file.

    A missing file is not an error; it yields an empty mapping so the
    service can run from environment variables alone.

    Raises:
        ConfigValidationError: If the file exists but is not a YAML mapping.
    """
    p = Path(path)
    if not p.exists():
        return {}

    with p.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"invalid settings file {p}: {e}")

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"settings file {p} must contain a mapping")
    return raw


def load_config(
    path: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load the service configuration.

    Args:
        path: YAML settings path. Defaults to TTS_PROXY_SETTINGS or
            config/settings.yaml.
        env: Environment mapping. When omitted, .env is loaded into
            os.environ and os.environ is used.

    Returns:
        Validated AppConfig.

    Raises:
        MissingApiKeyError: If the provider key is missing.
        ConfigValidationError: If a value fails validation.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    settings_path = path or env.get("TTS_PROXY_SETTINGS") or Defaults.SETTINGS_PATH
    raw = read_settings_file(settings_path)
    return AppConfig.from_raw(raw, env)
