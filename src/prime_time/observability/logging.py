from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from prime_time.ports.log_sink import LogSink
    from prime_time.usecases.config_models import LoggingConfig

LEVELS: dict[str, int] = {"debug": 10, "info": 20, "warning": 30, "error": 40}


@dataclass(frozen=True, slots=True)
class LogMessage:
    # Structured log payload; fields carry event context (peer, reason, counts).
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level or not self.message:
            raise ValueError("LogMessage requires non-empty level/message")


class StdoutLogSink:
    # Writes one compact JSON object per line; the lock keeps lines whole across session threads.
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = Lock()

    def emit(self, message: LogMessage) -> None:
        line = json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str)
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(line + "\n")
            stream.flush()

    def close(self) -> None:
        return


class JsonlLogSink:
    # File-backed structured log sink.
    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")
        self._lock = Lock()

    def emit(self, message: LogMessage) -> None:
        payload = json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str)
        with self._lock:
            if self._file.closed:
                return
            self._file.write(payload + "\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            self._file.close()


@dataclass(frozen=True, slots=True)
class FanoutLogSink:
    sinks: tuple[LogSink, ...]

    def emit(self, message: LogMessage) -> None:
        for sink in self.sinks:
            emit_log(sink, message)

    def close(self) -> None:
        for sink in self.sinks:
            close_log_sink(sink)


@dataclass(frozen=True, slots=True)
class LevelFilterLogSink:
    # Drops records below the configured threshold before they reach the wrapped sink.
    sink: LogSink
    level: str = "info"

    def emit(self, message: LogMessage) -> None:
        if LEVELS.get(message.level, 0) < LEVELS.get(self.level, 0):
            return
        emit_log(self.sink, message)

    def close(self) -> None:
        close_log_sink(self.sink)


def build_log_sink(config: LoggingConfig) -> LevelFilterLogSink:
    sinks: list[LogSink] = []
    for exporter in config.exporters:
        if exporter.kind == "stdout":
            sinks.append(StdoutLogSink())
            continue
        assert exporter.settings.path is not None
        sinks.append(JsonlLogSink(Path(exporter.settings.path)))

    if len(sinks) == 1:
        inner: LogSink = sinks[0]
    else:
        inner = FanoutLogSink(sinks=tuple(sinks))
    return LevelFilterLogSink(sink=inner, level=config.level)


def log_event(sink: LogSink | None, *, level: str, message: str, **fields: object) -> None:
    if sink is None:
        return
    emit_log(
        sink,
        LogMessage(level=level, message=message, timestamp=datetime.now(tz=UTC), fields=dict(fields)),
    )


def emit_log(sink: LogSink | None, message: LogMessage) -> None:
    # Logging must never break request handling.
    emit = getattr(sink, "emit", None)
    if not callable(emit):
        return
    try:
        emit(message)
    except Exception:
        return


def close_log_sink(sink: LogSink | None) -> None:
    close = getattr(sink, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            return


def _log_to_dict(message: LogMessage) -> dict[str, object]:
    return {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
