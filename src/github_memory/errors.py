"""Error taxonomy for the GitHub memory service.

A missing record on a point lookup is an outcome (``None`` from the store,
``not_found`` from the query facade), not an exception.
"""

from __future__ import annotations


class GitHubMemoryError(Exception):
    """Base class for all errors raised by github_memory."""


class ValidationError(GitHubMemoryError):
    """A record or payload part is missing required fields or is ill-typed.

    Attributes:
        fields: Dotted names of the offending fields, when known
    """

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class Unauthorized(GitHubMemoryError):
    """A webhook request failed signature verification."""


class StorageUnavailable(GitHubMemoryError):
    """The underlying database could not be opened, read or written."""
