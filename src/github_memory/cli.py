"""Command-line entry point.

Usage:
    github-memory              # MCP server on stdio (default)
    github-memory mcp
    github-memory webhook --port 3000
"""

import argparse
import sys

import structlog

from github_memory.config import MemoryConfig
from github_memory.errors import StorageUnavailable
from github_memory.log import configure_logging
from github_memory.store import open_store

logger = structlog.get_logger(__name__)

MODES = ("mcp", "webhook")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-memory",
        description="Index GitHub pull requests and commits and search them over MCP.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="mcp",
        choices=MODES,
        help="mcp: serve query tools on stdio; webhook: receive GitHub events over HTTP",
    )
    parser.add_argument("--db-path", help="SQLite database file (env: GITHUB_MEMORY_DB_PATH)")
    parser.add_argument("--host", help="Webhook bind address (env: WEBHOOK_HOST)")
    parser.add_argument("--port", type=int, help="Webhook port (env: WEBHOOK_PORT)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = MemoryConfig.from_env()
    if args.db_path:
        config.db_path = args.db_path
    if args.host:
        config.webhook_host = args.host
    if args.port:
        config.webhook_port = args.port

    configure_logging(config.log_level)
    logger.info("Starting GitHub memory", mode=args.mode, db_path=config.db_path)

    try:
        with open_store(config.db_path) as store:
            if args.mode == "webhook":
                from github_memory.webhook.app import run as run_webhook

                run_webhook(
                    store,
                    webhook_secret=config.webhook_secret,
                    host=config.webhook_host,
                    port=config.webhook_port,
                    log_level=config.log_level.lower(),
                )
            else:
                from github_memory.mcp.server import run as run_mcp

                run_mcp(store, name=config.server_name)
    except StorageUnavailable as e:
        logger.error("Memory store unavailable", error=str(e))
        return 1
    except KeyboardInterrupt:
        pass

    logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
