from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable, Iterator, List, Tuple

import pytest

from strcursor import Cursor, TextBuffer
from strcursor.runtime import settings, telemetry

LONG_CLUSTER = "e" + "\u0301" * 20


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    settings.reset()
    yield
    settings.reset()


def set_window(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("STRCURSOR_SEGMENT_WINDOW", value)
    settings.reset()


def test_segment_window_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STRCURSOR_SEGMENT_WINDOW", raising=False)

    assert settings.segment_window() == settings.DEFAULT_SEGMENT_WINDOW


def test_segment_window_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    set_window(monkeypatch, "16")
    assert settings.segment_window() == 16

    set_window(monkeypatch, "1")
    assert settings.segment_window() == settings.MIN_SEGMENT_WINDOW

    set_window(monkeypatch, "wide")
    with pytest.raises(ValueError):
        settings.segment_window()


def test_segment_window_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    set_window(monkeypatch, "16")
    assert settings.segment_window() == 16

    monkeypatch.setenv("STRCURSOR_SEGMENT_WINDOW", "32")
    assert settings.segment_window() == 16

    settings.reset()
    assert settings.segment_window() == 32


def test_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRCURSOR_LOG_JSON", "yes")
    assert settings.env_flag("LOG_JSON", False) is True

    monkeypatch.setenv("STRCURSOR_LOG_JSON", "0")
    assert settings.env_flag("LOG_JSON", True) is False

    monkeypatch.delenv("STRCURSOR_LOG_JSON")
    assert settings.env_flag("LOG_JSON", True) is True


@pytest.mark.parametrize("tail", ["", "x", "\u0301x"])
def test_small_window_grows_to_fit_cluster(monkeypatch: pytest.MonkeyPatch, tail: str) -> None:
    set_window(monkeypatch, "4")
    buffer = TextBuffer(LONG_CLUSTER + tail)

    cluster = Cursor.at_start(buffer).grapheme_after()

    assert cluster is not None
    assert cluster.as_str().startswith(LONG_CLUSTER)
    assert Cursor.at_start(buffer).step_right_grapheme() == Cursor(buffer, cluster.byte_len())


def test_small_window_matches_default_window(monkeypatch: pytest.MonkeyPatch) -> None:
    text = "a\U0001f468\u200d\U0001f469\u200d\U0001f467b" + LONG_CLUSTER

    set_window(monkeypatch, "4")
    narrow = [g.as_str() for g in Cursor.at_start(TextBuffer(text)).iter_after()]
    monkeypatch.delenv("STRCURSOR_SEGMENT_WINDOW")
    settings.reset()
    wide = [g.as_str() for g in Cursor.at_start(TextBuffer(text)).iter_after()]

    assert narrow == wide
    assert len(narrow) == 4


class RecordingLogger:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def warning_with(self, message: str, pairs: Any) -> None:
        self.calls.append((message, pairs))

    def info(self, message: str) -> None:
        self.calls.append((message, None))


def test_record_event_prefers_structured_method(monkeypatch: pytest.MonkeyPatch) -> None:
    logger = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)

    telemetry.record_event("cursor.sample", level="warning", data={"offset": 3})
    telemetry.record_event("cursor.plain", data={"offset": 4})

    assert logger.calls[0] == (
        "event::cursor.sample",
        [("event", "cursor.sample"), ("offset", "3")],
    )
    assert logger.calls[1][0].startswith("event::cursor.plain ")


def test_record_event_rejects_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: RecordingLogger())

    with pytest.raises(ValueError):
        telemetry.record_event("cursor.sample", level="shout")


def test_configure_validates_arguments() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


class RecordingConfig:
    """Stands in for ``telelog.Config`` and remembers every builder call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def __getattr__(self, name: str) -> Callable[[Any], None]:
        return lambda value: self.calls.append((name, value))


@pytest.fixture
def recorded_config(monkeypatch: pytest.MonkeyPatch) -> Callable[..., List[Tuple[str, Any]]]:
    monkeypatch.setattr(telemetry, "tl", SimpleNamespace(Config=RecordingConfig))
    monkeypatch.setattr(telemetry, "_ACTIVE_CONFIG", None)
    monkeypatch.setattr(telemetry, "_LOGGER_CACHE", {})
    for name in ("LOG_FILE", "LOG_LEVEL", "LOG_JSON", "DISABLE_CONSOLE", "NO_COLOR", "LOG_BUFFERED"):
        monkeypatch.delenv(f"STRCURSOR_{name}", raising=False)

    def build(**kwargs: Any) -> List[Tuple[str, Any]]:
        telemetry.configure(**kwargs)
        return telemetry._ACTIVE_CONFIG.calls

    return build


def test_development_preset(recorded_config: Callable[..., List[Tuple[str, Any]]]) -> None:
    assert recorded_config(preset="development") == [
        ("with_min_level", "DEBUG"),
        ("with_console_output", True),
        ("with_colored_output", True),
    ]


def test_production_preset(
    recorded_config: Callable[..., List[Tuple[str, Any]]], monkeypatch: pytest.MonkeyPatch
) -> None:
    assert recorded_config(preset="Production") == [
        ("with_min_level", "WARNING"),
        ("with_console_output", False),
        ("with_file_output", "strcursor.log"),
        ("with_buffering", True),
    ]

    monkeypatch.setenv("STRCURSOR_LOG_FILE", "/tmp/cursor.log")
    assert ("with_file_output", "/tmp/cursor.log") in recorded_config(preset="production")


def test_performance_preset(recorded_config: Callable[..., List[Tuple[str, Any]]]) -> None:
    calls = recorded_config(preset="performance")

    assert calls[0] == ("with_min_level", "DEBUG")
    assert ("with_profiling", True) in calls
    assert ("with_json_format", True) in calls
    assert ("with_console_output", False) in calls
    assert calls[-1] == ("with_file_output", "strcursor-performance.log")


def test_default_config_follows_environment(
    recorded_config: Callable[..., List[Tuple[str, Any]]], monkeypatch: pytest.MonkeyPatch
) -> None:
    assert recorded_config() == [
        ("with_min_level", "INFO"),
        ("with_console_output", True),
        ("with_colored_output", True),
    ]

    monkeypatch.setenv("STRCURSOR_LOG_LEVEL", "debug")
    monkeypatch.setenv("STRCURSOR_DISABLE_CONSOLE", "1")
    monkeypatch.setenv("STRCURSOR_LOG_BUFFERED", "yes")
    monkeypatch.setenv("STRCURSOR_LOG_BUFFER_SIZE", "512")

    assert recorded_config() == [
        ("with_min_level", "DEBUG"),
        ("with_console_output", False),
        ("with_buffering", True),
        ("with_buffer_size", 512),
    ]


def test_configure_drops_cached_loggers(
    recorded_config: Callable[..., List[Tuple[str, Any]]]
) -> None:
    telemetry._LOGGER_CACHE["stale"] = object()

    recorded_config(preset="development")

    assert telemetry._LOGGER_CACHE == {}
