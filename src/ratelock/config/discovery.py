"""Config file discovery and reading.

Walk-up finder locates ratelock.toml, similar to how git finds .git/.
Supports RATELOCK_CONFIG env var and --config CLI flag overrides.

INVARIANT: Reading never fails. A missing or unreadable file yields an
empty mapping and a logged warning; validation and the fallback to
defaults happen in RateLockSettings.from_cli.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "ratelock.toml"
CONFIG_ENV_VAR = "RATELOCK_CONFIG"

logger = logging.getLogger(__name__)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ratelock.toml.

    Returns the path to the config file, or None if not found.
    Checks RATELOCK_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML, returning ``{}`` on any read or parse error."""
    try:
        raw = path.read_text(encoding="utf-8")
        return tomllib.loads(raw)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}

