"""Query facade between MCP tool calls and the memory store.

Tool arguments arrive loosely typed. The facade coerces them into the
store's shapes, runs the lookup or search, and folds every outcome into a
:class:`QueryResult` so no exception ever reaches the serving loop.
"""

from __future__ import annotations

from typing import Any, Callable, Literal

import structlog
from pydantic import BaseModel

from github_memory.errors import ValidationError
from github_memory.store.base import MemoryStore

logger = structlog.get_logger(__name__)


class QueryResult(BaseModel):
    """Outcome of one query call.

    ``not_found`` is kept apart from ``ok`` with empty data: an empty search
    is a success, a missing point lookup is not.
    """

    status: Literal["ok", "not_found", "error"]
    data: Any = None
    message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status != "ok"

    @classmethod
    def ok(cls, data: Any) -> QueryResult:
        return cls(status="ok", data=data)

    @classmethod
    def not_found(cls, message: str) -> QueryResult:
        return cls(status="not_found", message=message)

    @classmethod
    def error(cls, message: str) -> QueryResult:
        return cls(status="error", message=message)


def _text(value: Any) -> str:
    """Coerce a free-text argument; absent means no text filter."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> str | None:
    text = _text(value)
    return text or None


def _required_text(value: Any, name: str) -> str:
    text = _text(value)
    if not text:
        raise ValidationError(f"'{name}' is required", fields=[name])
    return text


def _positive_int(value: Any, name: str) -> int:
    """Accept ints, integral floats and digit strings."""
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    else:
        number = None

    if number is None or number < 1:
        raise ValidationError(f"'{name}' must be a positive integer, got {value!r}", fields=[name])
    return number


class QueryFacade:
    """The four read operations exposed to tool callers."""

    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    def search_pull_requests(
        self,
        query: Any = None,
        repository: Any = None,
        author: Any = None,
        state: Any = None,
    ) -> QueryResult:
        def search() -> QueryResult:
            records = self.store.search_pull_requests(
                _text(query),
                repository=_optional_text(repository),
                author=_optional_text(author),
                state=_optional_text(state),
            )
            return QueryResult.ok([r.model_dump() for r in records])

        return self._run("search_pull_requests", search)

    def get_pull_request(self, repository: Any = None, number: Any = None) -> QueryResult:
        def lookup() -> QueryResult:
            pr = self.store.get_pull_request(
                _required_text(repository, "repository"),
                _positive_int(number, "number"),
            )
            if pr is None:
                return QueryResult.not_found("Pull request not found")
            return QueryResult.ok(pr.model_dump())

        return self._run("get_pull_request", lookup)

    def search_commits(self, query: Any = None, repository: Any = None, author: Any = None) -> QueryResult:
        def search() -> QueryResult:
            records = self.store.search_commits(
                _text(query),
                repository=_optional_text(repository),
                author=_optional_text(author),
            )
            return QueryResult.ok([r.model_dump() for r in records])

        return self._run("search_commits", search)

    def get_commit(self, commit_id: Any = None) -> QueryResult:
        def lookup() -> QueryResult:
            commit = self.store.get_commit(_required_text(commit_id, "id"))
            if commit is None:
                return QueryResult.not_found("Commit not found")
            return QueryResult.ok(commit.model_dump())

        return self._run("get_commit", lookup)

    def _run(self, operation: str, call: Callable[[], QueryResult]) -> QueryResult:
        try:
            result = call()
        except ValidationError as e:
            logger.warning("Rejected query arguments", operation=operation, error=str(e))
            return QueryResult.error(f"Error: {e}")
        except Exception as e:
            logger.exception("Query failed", operation=operation)
            return QueryResult.error(f"Error: {e}")

        logger.debug("Query complete", operation=operation, status=result.status)
        return result
