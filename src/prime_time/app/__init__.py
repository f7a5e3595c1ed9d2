from .cli import apply_cli_overrides, build_parser, build_server, parse_args, resolve_config, run

# app package exports CLI helpers for reuse in tests and entrypoints.
__all__ = ["apply_cli_overrides", "build_parser", "build_server", "parse_args", "resolve_config", "run"]
