"""GitHub memory: webhook ingestion of pull requests and commits, searchable over MCP."""

__version__ = "0.1.0"
