from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Config models map YAML sections to typed structures; every section has defaults.


class ServerConfig(BaseModel):
    # Listener settings; port 0 asks the OS for a free port.
    model_config = ConfigDict(extra="forbid")
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    backlog: int = Field(default=128, gt=0)
    accept_poll_seconds: float = Field(default=0.5, gt=0)


class OracleConfig(BaseModel):
    # Upper bound of the precomputed sieve; larger values use the exact tests.
    model_config = ConfigDict(extra="forbid")
    sieve_max: int = Field(default=100_000, ge=0)


class LogExporterSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")
    path: str | None = None


class LogExporterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["stdout", "jsonl"]
    settings: LogExporterSettings = Field(default_factory=LogExporterSettings)

    @model_validator(mode="after")
    def _jsonl_needs_path(self) -> LogExporterConfig:
        if self.kind == "jsonl" and not self.settings.path:
            raise ValueError("jsonl exporter requires settings.path")
        return self


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["debug", "info", "warning", "error"] = "info"
    exporters: list[LogExporterConfig] = Field(
        default_factory=lambda: [LogExporterConfig(kind="stdout")]
    )


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    version: int = 1
    server: ServerConfig = Field(default_factory=ServerConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
