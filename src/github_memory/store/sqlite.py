"""SQLite-backed memory store.

Schema:
  pull_requests  one row per (repository, number); the GitHub surface id is
                 stored but does not take part in conflict resolution
  commits        one row per commit SHA, shared across repositories

Upserts are a single ``INSERT ... ON CONFLICT DO UPDATE`` statement, so two
concurrent writes to the same key leave exactly one of them in place and a
reader never sees a half-written row.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping

import structlog
from sqlalchemy import Table, create_engine, literal_column, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.pool import StaticPool

from github_memory.errors import StorageUnavailable
from github_memory.store.models import CommitRecord, PullRequestRecord, parse_record
from github_memory.store.query import FilterBuilder
from github_memory.store.tables import (
    COMMIT_KEY,
    PULL_REQUEST_KEY,
    commits,
    metadata,
    pull_requests,
)

logger = structlog.get_logger(__name__)

DEFAULT_DB_PATH = "./github-memory.db"
MEMORY_DB_PATH = ":memory:"
SEARCH_LIMIT = 50

# Storage order, used to break ties between equal sort keys.
_ROWID = literal_column("rowid")


def create_sqlite_engine(db_path: str | Path) -> Engine:
    """Create an engine for ``db_path``, creating its directory if needed.

    ``:memory:`` gets a single shared connection so every thread sees the
    same database.
    """
    db_path_str = str(db_path)
    if db_path_str == MEMORY_DB_PATH:
        return create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    Path(db_path_str).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite+pysqlite:///{db_path_str}")


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into StorageUnavailable."""
    try:
        yield
    except DBAPIError as e:
        logger.error("Storage operation failed", operation=operation, error=str(e.orig))
        raise StorageUnavailable(f"{operation} failed: {e.orig}") from e


class GitHubMemoryStore:
    """Stores pull requests and commits in a local SQLite database file.

    The database file defaults to ``./github-memory.db``. Open it once per
    process, preferably through :func:`open_store`, and share the instance
    with the webhook translator and the query facade.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = str(db_path)
        try:
            self._engine = create_sqlite_engine(self.db_path)
        except OSError as e:
            raise StorageUnavailable(f"Cannot create database directory for {self.db_path}: {e}") from e

        with _storage_errors("initialize schema"):
            metadata.create_all(self._engine)

        logger.info("Opened memory store", db_path=self.db_path)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert_pull_request(self, record: PullRequestRecord | Mapping[str, Any]) -> None:
        pr = parse_record(PullRequestRecord, record)
        self._upsert(pull_requests, pr.model_dump(), PULL_REQUEST_KEY)

    def upsert_commit(self, record: CommitRecord | Mapping[str, Any]) -> None:
        commit = parse_record(CommitRecord, record)
        self._upsert(commits, commit.model_dump(), COMMIT_KEY)

    def _upsert(self, table: Table, values: dict[str, Any], index_elements: list[str]) -> None:
        stmt = insert(table).values(**values)
        update = {k: v for k, v in values.items() if k not in index_elements}
        stmt = stmt.on_conflict_do_update(index_elements=index_elements, set_=update)

        with _storage_errors(f"upsert into {table.name}"):
            with self._engine.begin() as conn:
                conn.execute(stmt)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_pull_request(self, repository: str, number: int) -> PullRequestRecord | None:
        stmt = select(pull_requests).where(
            pull_requests.c.repository == repository,
            pull_requests.c.number == number,
        )
        row = self._fetch_one(stmt, "get pull request")
        return PullRequestRecord.model_validate(row) if row else None

    def get_commit(self, commit_id: str) -> CommitRecord | None:
        stmt = select(commits).where(commits.c.id == commit_id)
        row = self._fetch_one(stmt, "get commit")
        return CommitRecord.model_validate(row) if row else None

    def search_pull_requests(
        self,
        query: str = "",
        repository: str | None = None,
        author: str | None = None,
        state: str | None = None,
    ) -> list[PullRequestRecord]:
        """Search pull requests by title/body substring and exact filters.

        Args:
            query: Substring matched case-insensitively against title or body
            repository: Exact "owner/name" filter
            author: Exact author login filter
            state: Exact state filter (open, closed, ...)

        Returns:
            Up to ``SEARCH_LIMIT`` records, most recently updated first
        """
        c = pull_requests.c
        stmt = (
            FilterBuilder()
            .contains(query, c.title, c.body)
            .equals(c.repository, repository)
            .equals(c.author, author)
            .equals(c.state, state)
            .apply(select(pull_requests))
            .order_by(c.updated_at.desc(), _ROWID)
            .limit(SEARCH_LIMIT)
        )
        rows = self._fetch_all(stmt, "search pull requests")
        return [PullRequestRecord.model_validate(row) for row in rows]

    def search_commits(
        self,
        query: str = "",
        repository: str | None = None,
        author: str | None = None,
    ) -> list[CommitRecord]:
        """Search commits by message substring and exact filters.

        Returns:
            Up to ``SEARCH_LIMIT`` records, newest timestamp first
        """
        c = commits.c
        stmt = (
            FilterBuilder()
            .contains(query, c.message)
            .equals(c.repository, repository)
            .equals(c.author, author)
            .apply(select(commits))
            .order_by(c.timestamp.desc(), _ROWID)
            .limit(SEARCH_LIMIT)
        )
        rows = self._fetch_all(stmt, "search commits")
        return [CommitRecord.model_validate(row) for row in rows]

    def _fetch_one(self, stmt, operation: str) -> dict[str, Any] | None:
        with _storage_errors(operation):
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        return dict(row) if row else None

    def _fetch_all(self, stmt, operation: str) -> list[dict[str, Any]]:
        with _storage_errors(operation):
            with self._engine.connect() as conn:
                return [dict(row) for row in conn.execute(stmt).mappings()]

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Closed memory store", db_path=self.db_path)

    def __enter__(self) -> GitHubMemoryStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@contextmanager
def open_store(db_path: str | Path = DEFAULT_DB_PATH) -> Iterator[GitHubMemoryStore]:
    """Open a store for the duration of a ``with`` block.

    Example:
        with open_store(config.db_path) as store:
            run_server(store)
    """
    store = GitHubMemoryStore(db_path)
    try:
        yield store
    finally:
        store.close()
