"""Environment-driven settings shared by telemetry and the cursor engine."""

from __future__ import annotations

import os
from typing import Optional

ENV_PREFIX = "STRCURSOR_"

DEFAULT_SEGMENT_WINDOW = 64
MIN_SEGMENT_WINDOW = 4  # widest UTF-8 encoding

_SEGMENT_WINDOW: Optional[int] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
    return max(value, minimum)


def segment_window() -> int:
    """Initial number of bytes decoded when looking for the next cluster.

    Read from the environment once, then cached; call :func:`reset` after
    changing ``STRCURSOR_SEGMENT_WINDOW``.
    """

    global _SEGMENT_WINDOW
    if _SEGMENT_WINDOW is None:
        _SEGMENT_WINDOW = env_int(
            "SEGMENT_WINDOW", DEFAULT_SEGMENT_WINDOW, minimum=MIN_SEGMENT_WINDOW
        )
    return _SEGMENT_WINDOW


def reset() -> None:
    """Forget cached settings so the next read consults the environment."""

    global _SEGMENT_WINDOW
    _SEGMENT_WINDOW = None


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_SEGMENT_WINDOW",
    "MIN_SEGMENT_WINDOW",
    "env",
    "env_flag",
    "env_int",
    "segment_window",
    "reset",
]
