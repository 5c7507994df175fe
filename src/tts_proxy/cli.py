"""
Command-Line Interface for tts-proxy.

Starts the HTTP server with uvicorn after loading and validating the
configuration. A missing DEEPGRAM_API_KEY is fatal: the remediation text
is printed to stderr and the process exits with status 1 instead of
serving degraded traffic.

Usage Examples:
    # Serve on the configured host/port (default 0.0.0.0:8081)
    tts-proxy

    # Override bind address
    tts-proxy --host 127.0.0.1 --port 9000

    # Validate configuration and print the route banner without serving
    tts-proxy --check

Environment Variables:
    DEEPGRAM_API_KEY: Provider key (required)
    SESSION_SECRET: Token signing secret (random per process if unset)
    HOST / PORT: Bind address
    TTS_PROXY_SETTINGS: YAML settings file
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from typing import List, Optional

from tts_proxy.core.config import API_KEY_HELP, AppConfig, ConfigValidationError, MissingApiKeyError, load_config
from tts_proxy.core.logging import configure_logging, fail, get_logger, info


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="tts-proxy CLI (text-to-speech proxy server)")
    parser.add_argument("--host", help="Bind host override")
    parser.add_argument("--port", type=int, help="Bind port override")
    parser.add_argument("--settings", help="YAML settings file")
    parser.add_argument("--log-level", help="Log level (1-4 or MINIMAL/NORMAL/VERBOSE/DEBUG)")
    parser.add_argument("--check", action="store_true",
                        help="Validate configuration and exit without serving")
    return parser.parse_args(argv)


def banner(config: AppConfig) -> str:
    """Startup banner listing the routes."""
    rule = "=" * 70
    return "\n".join([
        "",
        rule,
        f"  Backend API running at http://localhost:{config.port}",
        "  GET  /api/session",
        "  POST /api/text-to-speech (auth required)",
        "  GET  /api/metadata",
        "  GET  /health",
        rule,
        "",
    ])


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Process exit code.
    """
    args = _parse_args(argv)

    configure_logging(args.log_level, force=args.log_level is not None)
    log = get_logger("tts-proxy.cli")

    try:
        config = load_config(args.settings)
    except MissingApiKeyError:
        print(API_KEY_HELP, file=sys.stderr)
        return 1
    except ConfigValidationError as e:
        fail(log, "config_invalid", reason=str(e))
        return 1

    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if overrides:
        config = dataclasses.replace(config, **overrides)

    print(banner(config))

    if args.check:
        info(log, "config_ok", host=config.host, port=config.port)
        return 0

    import uvicorn

    from tts_proxy.main import create_app

    info(log, "server_starting", host=config.host, port=config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
