"""GitHub Memory MCP Server.

FastMCP server exposing the indexed pull requests and commits as four tools.
Each tool calls the :class:`QueryFacade` on a worker thread; not-found and
failed calls come back as error-flagged tool results instead of stopping the
server.

Usage:
    github-memory mcp
"""

from __future__ import annotations

import structlog
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from starlette.concurrency import run_in_threadpool

from github_memory.mcp.facade import QueryFacade, QueryResult
from github_memory.store.base import MemoryStore

logger = structlog.get_logger(__name__)

SERVER_NAME = "mcp-github-memory"


def _unwrap(result: QueryResult):
    if result.is_error:
        raise ToolError(result.message or "Query failed")
    return result.data


def create_mcp_server(store: MemoryStore, name: str = SERVER_NAME) -> FastMCP:
    """Build a FastMCP server bound to ``store``.

    Args:
        store: Open store to read from
        name: Server name announced to MCP clients

    Returns:
        Configured FastMCP instance; call ``run()`` to serve over stdio
    """
    facade = QueryFacade(store)
    mcp = FastMCP(name)

    # =========================================================================
    # Pull requests
    # =========================================================================

    @mcp.tool()
    async def search_pull_requests(
        query: str | None = None,
        repository: str | None = None,
        author: str | None = None,
        state: str | None = None,
    ) -> list[dict]:
        """Search indexed pull requests by query, repository, author, or state.

        Args:
            query: Search query to match against PR title and body
            repository: Filter by repository (e.g., "owner/repo")
            author: Filter by author username
            state: Filter by state (open, closed, merged)

        Returns:
            Up to 50 pull requests, most recently updated first
        """
        return _unwrap(await run_in_threadpool(facade.search_pull_requests, query, repository, author, state))

    @mcp.tool()
    async def get_pull_request(repository: str, number: int) -> dict:
        """Get details of a specific pull request by repository and number.

        Args:
            repository: Repository name (e.g., "owner/repo")
            number: Pull request number
        """
        return _unwrap(await run_in_threadpool(facade.get_pull_request, repository, number))

    # =========================================================================
    # Commits
    # =========================================================================

    @mcp.tool()
    async def search_commits(
        query: str | None = None,
        repository: str | None = None,
        author: str | None = None,
    ) -> list[dict]:
        """Search indexed commits by message, repository, or author.

        Args:
            query: Search query to match against commit messages
            repository: Filter by repository (e.g., "owner/repo")
            author: Filter by author username

        Returns:
            Up to 50 commits, newest first
        """
        return _unwrap(await run_in_threadpool(facade.search_commits, query, repository, author))

    @mcp.tool()
    async def get_commit(id: str) -> dict:
        """Get details of a specific commit by its SHA.

        Args:
            id: Commit SHA
        """
        return _unwrap(await run_in_threadpool(facade.get_commit, id))

    return mcp


def run(store: MemoryStore, name: str = SERVER_NAME) -> None:
    """Serve the MCP tools over stdio until the client disconnects."""
    logger.info("Starting GitHub Memory MCP server", name=name, transport="stdio")
    create_mcp_server(store, name).run()
