"""MCP tool server for querying indexed pull requests and commits.

- facade: argument coercion and outcome mapping over the store
- server: FastMCP tool registration
"""

from github_memory.mcp.facade import QueryFacade, QueryResult
from github_memory.mcp.server import create_mcp_server

__all__ = ["QueryFacade", "QueryResult", "create_mcp_server"]
