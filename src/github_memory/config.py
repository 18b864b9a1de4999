"""Configuration management for the GitHub memory service."""

import os
from dataclasses import dataclass

from github_memory.store.sqlite import DEFAULT_DB_PATH


@dataclass
class MemoryConfig:
    """Process configuration.

    Read once at startup; the store path and webhook secret are handed to
    the components explicitly rather than read from the environment later.
    """

    # Storage
    db_path: str = DEFAULT_DB_PATH

    # Webhook listener
    webhook_secret: str | None = None  # None disables signature checks
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 3000

    # MCP server
    server_name: str = "mcp-github-memory"

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "MemoryConfig":
        """Create configuration from environment variables."""
        return cls(
            db_path=os.getenv("GITHUB_MEMORY_DB_PATH", DEFAULT_DB_PATH),
            webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET") or None,
            webhook_host=os.getenv("WEBHOOK_HOST", "0.0.0.0"),
            webhook_port=int(os.getenv("WEBHOOK_PORT", "3000")),
            log_level=os.getenv("GITHUB_MEMORY_LOG_LEVEL", "INFO").upper(),
        )
