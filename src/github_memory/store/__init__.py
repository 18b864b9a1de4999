"""Persistence layer for indexed pull requests and commits.

- models: pydantic records and boundary validation
- tables: SQLAlchemy Core schema
- query: conjunctive search filter builder
- sqlite: the SQLite-backed store
"""

from github_memory.store.base import MemoryStore
from github_memory.store.models import CommitRecord, PullRequestRecord, parse_record
from github_memory.store.sqlite import SEARCH_LIMIT, GitHubMemoryStore, open_store

__all__ = [
    "MemoryStore",
    "GitHubMemoryStore",
    "open_store",
    "PullRequestRecord",
    "CommitRecord",
    "parse_record",
    "SEARCH_LIMIT",
]
