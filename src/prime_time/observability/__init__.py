from .logging import (
    FanoutLogSink,
    JsonlLogSink,
    LevelFilterLogSink,
    LogMessage,
    StdoutLogSink,
    build_log_sink,
    close_log_sink,
    emit_log,
    log_event,
)

__all__ = [
    "FanoutLogSink",
    "JsonlLogSink",
    "LevelFilterLogSink",
    "LogMessage",
    "StdoutLogSink",
    "build_log_sink",
    "close_log_sink",
    "emit_log",
    "log_event",
]
