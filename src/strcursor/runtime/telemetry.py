"""Telemetry for strcursor built directly on telelog.

The rest of the package only touches a narrow surface:

``configure(...)`` -- override or preset the telelog configuration
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit a structured event at a chosen level
``span(name, ...)`` -- context manager marrying profiling + component tracking

Cursor stepping is a hot path and never logs; only one-off work (decoding
bytes into a buffer) and failures (invalid input, bad offsets, seeks past an
edge) are reported here.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

from .settings import env, env_flag, env_int

tl = cast(Any, telelog)

DEFAULT_LOGGER_NAME = env("LOGGER", "strcursor") or "strcursor"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


ConfigStep = Tuple[str, Any]

# Each preset is the ordered list of ``tl.Config`` builder calls it makes.
# STRCURSOR_LOG_FILE replaces the ``with_file_output`` path of any preset.
PRESETS: Dict[str, Tuple[ConfigStep, ...]] = {
    "development": (
        ("with_min_level", "DEBUG"),
        ("with_console_output", True),
        ("with_colored_output", True),
    ),
    "production": (
        ("with_min_level", "WARNING"),
        ("with_console_output", False),
        ("with_file_output", "strcursor.log"),
        ("with_buffering", True),
    ),
    "performance": (
        ("with_min_level", "DEBUG"),
        ("with_console_output", False),
        ("with_json_format", True),
        ("with_profiling", True),
        ("with_file_output", "strcursor-performance.log"),
    ),
}


def _apply(steps: Iterable[ConfigStep]) -> Any:
    config = tl.Config()
    for method, value in steps:
        getattr(config, method)(value)
    return config


def _preset_steps(preset: str) -> List[ConfigStep]:
    try:
        steps = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown preset '{preset}'; expected one of {sorted(PRESETS)}."
        ) from None
    log_file = env("LOG_FILE")
    return [
        (method, log_file) if method == "with_file_output" and log_file else (method, value)
        for method, value in steps
    ]


def _environment_steps() -> List[ConfigStep]:
    steps: List[ConfigStep] = [("with_min_level", (env("LOG_LEVEL") or "INFO").upper())]
    console = not env_flag("DISABLE_CONSOLE", False)
    steps.append(("with_console_output", console))
    if console:
        steps.append(("with_colored_output", not env_flag("NO_COLOR", False)))
    if env_flag("LOG_JSON", False):
        steps.append(("with_json_format", True))
    log_file = env("LOG_FILE")
    if log_file:
        steps.append(("with_file_output", log_file))
    if env_flag("LOG_BUFFERED", False):
        steps.append(("with_buffering", True))
        steps.append(
            ("with_buffer_size", env_int("LOG_BUFFER_SIZE", 2048, minimum=1))
        )
    return steps


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    With neither argument the configuration is rebuilt from the
    ``STRCURSOR_LOG_*`` environment. ``preset`` names an entry of
    :data:`PRESETS`; it cannot be combined with ``config``.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset is not None:
        config = _apply(_preset_steps(preset))
    elif config is None:
        config = _apply(_environment_steps())

    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def _ensure_config() -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = _apply(_environment_steps())
    return _ACTIVE_CONFIG


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` configured for strcursor."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ensure_config()
        )
    return _LOGGER_CACHE[logger_name]


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Log ``payload`` through ``<level>_with`` when the logger has it."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _format_pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` record with ``data`` attached."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by :func:`span`; metadata added here is logged if the block fails."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block with ``logger.profile(name)``.

    ``component`` additionally wraps it in ``track_component``; ``metadata``
    is attached as logger context while the block runs.
    """

    log = get_logger(logger_name)
    handle = SpanHandle(logger=log, span_name=name, component_name=component)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
