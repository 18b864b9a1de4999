"""
Translation of GitHub webhook payloads into store writes.

Only ``pull_request`` and ``push`` events are indexed; everything else is
acknowledged and ignored. Payloads are untyped JSON, so every field read here
goes through record validation before it reaches the store.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from github_memory.errors import ValidationError
from github_memory.store.base import MemoryStore
from github_memory.store.models import CommitRecord, PullRequestRecord, parse_record

logger = structlog.get_logger(__name__)

UNKNOWN_AUTHOR = "unknown"

PULL_REQUEST_EVENT = "pull_request"
PUSH_EVENT = "push"


def _mapping(value: Any, field: str) -> Mapping[str, Any] | None:
    """Return ``value`` as a mapping, None when absent."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValidationError(f"Expected object for '{field}'", fields=[field])
    return value


def pull_request_record(pr: Mapping[str, Any], repository: Mapping[str, Any]) -> PullRequestRecord:
    """Map a webhook ``pull_request`` object to a record."""
    user = _mapping(pr.get("user"), "pull_request.user") or {}
    return parse_record(
        PullRequestRecord,
        {
            "id": pr.get("id"),
            "number": pr.get("number"),
            "title": pr.get("title"),
            "body": pr.get("body"),
            "state": pr.get("state"),
            "author": user.get("login") or UNKNOWN_AUTHOR,
            "repository": repository.get("full_name"),
            "url": pr.get("html_url"),
            "created_at": pr.get("created_at"),
            "updated_at": pr.get("updated_at"),
        },
    )


def commit_author(commit: Mapping[str, Any]) -> str:
    """Resolve a push commit's author: username, then display name."""
    author = _mapping(commit.get("author"), "commits.author") or {}
    return author.get("username") or author.get("name") or UNKNOWN_AUTHOR


def commit_record(commit: Mapping[str, Any], repository: Mapping[str, Any]) -> CommitRecord:
    """Map one entry of a push event's ``commits`` list to a record."""
    return parse_record(
        CommitRecord,
        {
            "id": commit.get("id"),
            "message": commit.get("message"),
            "author": commit_author(commit),
            "repository": repository.get("full_name"),
            "url": commit.get("url"),
            "timestamp": commit.get("timestamp"),
        },
    )


class EventTranslator:
    """Turns one webhook delivery into zero or more store writes.

    The translator never retries: validation and storage errors propagate to
    the caller, which decides how to answer the delivery.
    """

    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    def handle(self, event: str | None, payload: Mapping[str, Any]) -> int:
        """Index a webhook payload.

        Args:
            event: X-GitHub-Event header value
            payload: Decoded JSON body

        Returns:
            Number of records written

        Raises:
            ValidationError: If a present part of the payload is malformed
            StorageUnavailable: If the store cannot be written
        """
        if event == PULL_REQUEST_EVENT:
            return self.handle_pull_request(payload)
        if event == PUSH_EVENT:
            return self.handle_push(payload)

        logger.info("Ignoring event type", github_event=event)
        return 0

    def handle_pull_request(self, payload: Mapping[str, Any]) -> int:
        pr = _mapping(payload.get("pull_request"), "pull_request")
        repository = _mapping(payload.get("repository"), "repository")
        if pr is None or repository is None:
            logger.info("Missing pull_request or repository data", github_event=PULL_REQUEST_EVENT)
            return 0

        record = pull_request_record(pr, repository)
        self.store.upsert_pull_request(record)

        logger.info(
            "Indexed pull request",
            repository=record.repository,
            number=record.number,
            action=payload.get("action"),
        )
        return 1

    def handle_push(self, payload: Mapping[str, Any]) -> int:
        commits = payload.get("commits")
        repository = _mapping(payload.get("repository"), "repository")
        if commits is None or repository is None:
            logger.info("Missing commits or repository data", github_event=PUSH_EVENT)
            return 0
        if not isinstance(commits, list):
            raise ValidationError("Expected list for 'commits'", fields=["commits"])

        # Batch order is kept; a repeated SHA later in the batch wins.
        written = 0
        for index, entry in enumerate(commits):
            commit = _mapping(entry, f"commits.{index}")
            if commit is None:
                raise ValidationError(f"Empty entry in 'commits' at {index}", fields=[f"commits.{index}"])

            record = commit_record(commit, repository)
            self.store.upsert_commit(record)
            written += 1

            logger.info(
                "Indexed commit",
                repository=record.repository,
                sha=record.id[:7],
            )

        return written
