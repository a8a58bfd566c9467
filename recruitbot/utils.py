"""Utility helpers for the recruitment bot."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Set, Tuple

logger = logging.getLogger("recruitbot.utils")


def str_from_env(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%s. Falling back to %s.", name, raw, default)
        return default


def path_from_env(name: str) -> Optional[Path]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()


def parse_channel_ids(raw: str) -> Set[int]:
    ids: Set[int] = set()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            ids.add(int(chunk))
        except ValueError:
            logger.warning("Ignoring invalid channel id %s", chunk)
    return ids


def parse_identifiers(raw: object) -> Tuple[str, ...]:
    """Normalize a config list (or comma separated string) of character ids."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple, set, frozenset)):
        items = [str(item) for item in raw]
    else:
        raise TypeError(f"expected a list of identifiers, got {type(raw).__name__}")
    seen = []
    for item in items:
        normalized = item.strip().lower()
        if normalized and normalized not in seen:
            seen.append(normalized)
    return tuple(seen)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = [
    "int_from_env",
    "parse_channel_ids",
    "parse_identifiers",
    "path_from_env",
    "str_from_env",
    "utc_now",
]
