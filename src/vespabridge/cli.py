"""CLI entry point for the VespaBridge server."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from vespabridge.config.settings import CONFIG_ENV_VAR, Settings
from vespabridge.observability.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vespabridge",
        description="VespaBridge — OpenSearch-compatible REST facade for Vespa",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"VespaBridge {_get_version()}",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the VespaBridge server."""
    args = build_parser().parse_args(argv)

    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    # uvicorn calls the factory again in each worker process, which only sees
    # the environment; overrides travel as VESPABRIDGE_* variables.
    overrides = {
        "VESPABRIDGE_SERVER__HOST": args.host,
        "VESPABRIDGE_SERVER__PORT": args.port,
        "VESPABRIDGE_SERVER__WORKERS": args.workers,
        "VESPABRIDGE_OBSERVABILITY__LOG_LEVEL": args.log_level,
    }
    for name, value in overrides.items():
        if value is not None:
            os.environ[name] = str(value)
    if config_path is not None:
        os.environ[CONFIG_ENV_VAR] = str(config_path.resolve())

    settings = Settings.from_yaml(config_path) if config_path is not None else Settings()
    setup_logging(settings.observability)

    import uvicorn

    uvicorn.run(
        "vespabridge.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def _get_version() -> str:
    """Get the package version."""
    from vespabridge import __version__

    return __version__


if __name__ == "__main__":
    main()
