"""Abstract store interface."""

from typing import Any, Mapping, Protocol

from github_memory.store.models import CommitRecord, PullRequestRecord


class MemoryStore(Protocol):
    """Protocol for the persistence layer behind ingestion and search.

    The event translator writes through it and the query facade reads
    through it; neither depends on a concrete backend.
    """

    def upsert_pull_request(self, record: PullRequestRecord | Mapping[str, Any]) -> None:
        """Insert or fully replace the pull request keyed by (repository, number).

        Raises:
            ValidationError: If the record is malformed
            StorageUnavailable: If the database cannot be written
        """
        ...

    def upsert_commit(self, record: CommitRecord | Mapping[str, Any]) -> None:
        """Insert or fully replace the commit keyed by its SHA."""
        ...

    def get_pull_request(self, repository: str, number: int) -> PullRequestRecord | None:
        """Return the pull request, or None if it was never indexed."""
        ...

    def get_commit(self, commit_id: str) -> CommitRecord | None:
        """Return the commit, or None if it was never indexed."""
        ...

    def search_pull_requests(
        self,
        query: str = "",
        repository: str | None = None,
        author: str | None = None,
        state: str | None = None,
    ) -> list[PullRequestRecord]:
        """Search pull requests, newest ``updated_at`` first.

        Returns an empty list if nothing matches; never raises for no results.
        """
        ...

    def search_commits(
        self,
        query: str = "",
        repository: str | None = None,
        author: str | None = None,
    ) -> list[CommitRecord]:
        """Search commits, newest ``timestamp`` first."""
        ...

    def close(self) -> None:
        """Release the underlying database connections."""
        ...
