from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from prime_time.adapters.server import PrimeTimeServer
from prime_time.config.loader import load_config
from prime_time.observability.logging import build_log_sink, close_log_sink
from prime_time.ports.log_sink import LogSink
from prime_time.services.prime_checker import SievePrimeChecker
from prime_time.usecases.config_models import (
    AppConfig,
    LogExporterConfig,
    LogExporterSettings,
)

# Thin wrapper around wiring: business logic lives in usecases/services.


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prime-time", description="Line-delimited JSON primality service")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument("--host", help="Override server.host")
    parser.add_argument("--port", type=int, help="Override server.port")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Override logging.level",
    )
    parser.add_argument("--log-path", help="Also write structured logs to this JSONL file")
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    # Parse CLI arguments; caller passes argv for testability.
    return build_parser().parse_args(argv)


def resolve_config(args: argparse.Namespace) -> AppConfig:
    if args.config is None:
        return AppConfig()
    return load_config(Path(args.config))


def apply_cli_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    # CLI flags take precedence over config values.
    if args.host is not None:
        config.server.host = args.host
    if args.port is not None:
        if args.port < 0 or args.port > 65535:
            raise ValueError("--port must be in range [0, 65535]")
        config.server.port = args.port
    if args.log_level is not None:
        config.logging.level = args.log_level
    if args.log_path is not None:
        config.logging.exporters.append(
            LogExporterConfig(kind="jsonl", settings=LogExporterSettings(path=args.log_path))
        )


def build_server(config: AppConfig, log_sink: LogSink | None = None) -> PrimeTimeServer:
    checker = SievePrimeChecker.from_max(config.oracle.sieve_max)
    return PrimeTimeServer(config=config.server, checker=checker, log_sink=log_sink)


def run(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    config = resolve_config(args)
    apply_cli_overrides(config, args)

    log_sink = build_log_sink(config.logging)
    server = build_server(config, log_sink)
    try:
        with server:
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                server.shutdown()
    finally:
        close_log_sink(log_sink)
    return 0
