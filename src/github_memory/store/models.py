"""Pydantic models for the records kept in the memory store."""

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from github_memory.errors import ValidationError


class PullRequestRecord(BaseModel):
    """Normalized pull request, unique per (repository, number)."""

    id: int = Field(description="Provider-assigned id, not used as a key")
    number: int = Field(ge=1)
    title: str = Field(min_length=1)
    body: str | None = None
    state: str  # open vocabulary: open, closed, merged, ...
    author: str
    repository: str = Field(description='"owner/name"')
    url: str
    created_at: str  # ISO-8601
    updated_at: str  # ISO-8601


class CommitRecord(BaseModel):
    """Normalized commit, unique per hash across all repositories."""

    id: str = Field(min_length=1, description="Commit SHA")
    message: str
    author: str
    repository: str
    url: str
    timestamp: str  # ISO-8601


RecordT = TypeVar("RecordT", PullRequestRecord, CommitRecord)


def parse_record(model: type[RecordT], data: RecordT | Mapping[str, Any]) -> RecordT:
    """Validate ``data`` into ``model``.

    Args:
        model: Record class to build
        data: An instance of ``model`` or a mapping of its fields

    Returns:
        A validated record

    Raises:
        ValidationError: If a required field is missing or ill-typed
    """
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"{model.__name__} expects a mapping, got {type(data).__name__}"
        )

    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(
            f"Invalid {model.__name__}: {', '.join(fields)}",
            fields=fields,
        ) from e
