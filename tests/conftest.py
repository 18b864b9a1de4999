"""Pytest configuration and fixtures for GitHub memory tests."""

from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from github_memory.store import GitHubMemoryStore, open_store


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a fresh database file."""
    return tmp_path / "data" / "github-memory.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[GitHubMemoryStore]:
    """Open store on a temporary database file."""
    with open_store(db_path) as s:
        yield s


@pytest.fixture
def make_pull_request() -> Callable[..., dict[str, Any]]:
    """Factory for pull request records with overridable fields."""

    def factory(**overrides: Any) -> dict[str, Any]:
        number = overrides.get("number", 42)
        record = {
            "id": 1000 + number,
            "number": number,
            "title": "Add new feature",
            "body": "This PR adds a new feature",
            "state": "open",
            "author": "testuser",
            "repository": "test/repo",
            "url": f"https://github.com/test/repo/pull/{number}",
            "created_at": "2025-11-03T10:00:00Z",
            "updated_at": "2025-11-03T10:00:00Z",
        }
        record.update(overrides)
        return record

    return factory


@pytest.fixture
def make_commit() -> Callable[..., dict[str, Any]]:
    """Factory for commit records with overridable fields."""

    def factory(**overrides: Any) -> dict[str, Any]:
        sha = overrides.get("id", "abc123")
        record = {
            "id": sha,
            "message": "Fix bug in authentication",
            "author": "testuser",
            "repository": "test/repo",
            "url": f"https://github.com/test/repo/commit/{sha}",
            "timestamp": "2025-11-03T11:00:00Z",
        }
        record.update(overrides)
        return record

    return factory


@pytest.fixture
def pull_request_payload() -> dict[str, Any]:
    """Trimmed GitHub ``pull_request`` webhook payload."""
    return {
        "action": "opened",
        "number": 7,
        "pull_request": {
            "id": 987654321,
            "number": 7,
            "title": "Add webhook ingestion",
            "body": "Stores PRs and commits for later search",
            "state": "open",
            "html_url": "https://github.com/octo/memory/pull/7",
            "user": {"login": "octocat", "id": 1},
            "created_at": "2025-11-03T10:00:00Z",
            "updated_at": "2025-11-03T12:30:00Z",
            "merged": False,
        },
        "repository": {"id": 42, "full_name": "octo/memory", "name": "memory"},
        "sender": {"login": "octocat"},
    }


@pytest.fixture
def push_payload() -> dict[str, Any]:
    """Trimmed GitHub ``push`` webhook payload with two commits."""
    return {
        "ref": "refs/heads/main",
        "after": "def4567890",
        "repository": {"id": 42, "full_name": "octo/memory", "name": "memory"},
        "commits": [
            {
                "id": "abc1234567",
                "message": "Add store schema",
                "timestamp": "2025-11-03T09:00:00Z",
                "url": "https://github.com/octo/memory/commit/abc1234567",
                "author": {"name": "Octo Cat", "email": "octo@example.com", "username": "octocat"},
            },
            {
                "id": "def4567890",
                "message": "Wire webhook route",
                "timestamp": "2025-11-03T09:05:00Z",
                "url": "https://github.com/octo/memory/commit/def4567890",
                "author": {"name": "Mona Lisa", "email": "mona@example.com"},
            },
        ],
    }
