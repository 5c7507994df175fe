"""
Application metadata served by GET /api/metadata.

The descriptor is a TOML file (deepgram.toml by default) whose [meta]
table is returned verbatim. It is re-read on every call so edits show
up without a restart.
"""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict

from tts_proxy.core.logging import error, get_logger
from tts_proxy.services.errors import Err, Ok, Result

_LOG = get_logger("tts-proxy.metadata")

META_SECTION = "meta"


def load_metadata(path: str | Path) -> Result[Dict[str, Any], Dict[str, str]]:
    """
    Read the [meta] table of a TOML descriptor.

    Returns:
        Ok(meta table), or Err(error body) when the file cannot be read
        or parsed, or has no [meta] table.
    """
    p = Path(path)
    try:
        with p.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        error(_LOG, "metadata_failed", path=str(p), reason=str(e))
        return Err({
            "error": "INTERNAL_SERVER_ERROR",
            "message": f"Failed to read metadata from {p.name}",
        })

    meta = config.get(META_SECTION)
    if not isinstance(meta, dict):
        error(_LOG, "metadata_failed", path=str(p), reason="missing [meta] section")
        return Err({
            "error": "INTERNAL_SERVER_ERROR",
            "message": f"Missing [meta] section in {p.name}",
        })

    return Ok(meta)
