from __future__ import annotations

import argparse
import sys
from typing import Optional

from loguru import logger

from .config import ServiceConfig
from .server import create_app
from .server.api import build_token_service


# Levels uvicorn understands; loguru-only levels such as SUCCESS map to info
_UVICORN_LEVELS = {"trace", "debug", "info", "warning", "error", "critical"}


def _uvicorn_log_level(level: str) -> str:
    level = level.lower()
    return level if level in _UVICORN_LEVELS else "info"


def _configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure loguru logger with the specified level and optional file sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan> - "
            "{message}"
        ),
    )
    if log_file:
        logger.add(
            log_file,
            level=level.upper(),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}",
            enqueue=True,
        )


def _load_config(args: argparse.Namespace) -> ServiceConfig:
    config = ServiceConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file
    _configure_logging(config.log_level, config.log_file)
    return config


def _server(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        sys.stderr.write("Install server extras: pip install 'todo-service[server]'\n")
        return 1

    config = _load_config(args)
    app = create_app(config)
    logger.info("Server starting on {}:{}", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=_uvicorn_log_level(config.log_level))
    return 0


def _token(args: argparse.Namespace) -> int:
    config = _load_config(args)
    if args.username not in config.users:
        sys.stderr.write(f"Unknown user: {args.username}\n")
        return 1
    token = build_token_service(config).issue(args.username)
    sys.stdout.write(token + '\n')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Todo service CLI')
    parser.add_argument('--log-level', default=None, help='Log level (default: $TODO_LOG_LEVEL or INFO)')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    server = subparsers.add_parser('server', help='Start the web server')
    server.add_argument('--host', default='127.0.0.1')
    server.add_argument('--port', default=8000, type=int)
    server.set_defaults(func=_server)

    token = subparsers.add_parser('token', help='Print a bearer token for a configured user')
    token.add_argument('username')
    token.set_defaults(func=_token)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)
