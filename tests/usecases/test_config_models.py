from __future__ import annotations

import pytest
from pydantic import ValidationError

from prime_time.usecases.config_models import AppConfig, LogExporterConfig


def test_defaults_need_no_input() -> None:
    cfg = AppConfig.model_validate({})
    assert cfg.version == 1
    assert cfg.server.host == "127.0.0.1"
    assert cfg.server.port == 8080
    assert cfg.server.accept_poll_seconds == 0.5
    assert cfg.oracle.sieve_max == 100_000
    assert cfg.logging.level == "info"
    assert [e.kind for e in cfg.logging.exporters] == ["stdout"]


def test_unknown_top_level_key_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"persistence": {"enabled": True}})


def test_jsonl_exporter_requires_path() -> None:
    with pytest.raises(ValidationError):
        LogExporterConfig.model_validate({"kind": "jsonl"})
    exporter = LogExporterConfig.model_validate({"kind": "jsonl", "settings": {"path": "x.jsonl"}})
    assert exporter.settings.path == "x.jsonl"


def test_default_exporter_lists_are_not_shared() -> None:
    first = AppConfig()
    second = AppConfig()
    first.logging.exporters.append(LogExporterConfig(kind="stdout"))
    assert len(second.logging.exporters) == 1
