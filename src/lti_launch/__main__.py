"""Command line entry point: ``python -m lti_launch`` / ``lti-launch``."""

from __future__ import annotations

import argparse
import sys

import uvicorn

from lti_launch.servers.main import create_app
from lti_launch.utils.environment import LaunchSettings
from lti_launch.utils.logging import setup_logging


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lti-launch",
        description="Serve the LTI launch endpoint (configuration via LTI_* environment variables).",
    )
    parser.add_argument("--host", help="listen address (overrides LTI_HOST)")
    parser.add_argument("--port", type=int, help="listen port (overrides LTI_PORT)")
    parser.add_argument("--log-level", help="log level name (overrides LTI_LOG_LEVEL)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    try:
        settings = LaunchSettings.from_env()
        log_level = (args.log_level or settings.log_level).upper()
        setup_logging(log_level)
    except ValueError as exc:
        sys.exit(f"Invalid configuration: {exc}")

    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
