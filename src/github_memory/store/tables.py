"""SQLAlchemy Core table definitions for the memory store."""

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text, UniqueConstraint

metadata = MetaData()

# No primary key on ``id``: GitHub's surface id is stored verbatim but the
# natural key (repository, number) alone resolves conflicts.
pull_requests = Table(
    "pull_requests",
    metadata,
    Column("id", Integer, nullable=False),
    Column("number", Integer, nullable=False),
    Column("title", Text, nullable=False),
    Column("body", Text),
    Column("state", Text, nullable=False),
    Column("author", Text, nullable=False),
    Column("repository", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    UniqueConstraint("repository", "number", name="uq_pr_repository_number"),
    Index("idx_pr_repository", "repository"),
    Index("idx_pr_author", "author"),
    Index("idx_pr_state", "state"),
)

commits = Table(
    "commits",
    metadata,
    Column("id", Text, primary_key=True),
    Column("message", Text, nullable=False),
    Column("author", Text, nullable=False),
    Column("repository", Text, nullable=False),
    Column("url", Text, nullable=False),
    Column("timestamp", Text, nullable=False),
    Index("idx_commit_repository", "repository"),
    Index("idx_commit_author", "author"),
)

PULL_REQUEST_KEY = ["repository", "number"]
COMMIT_KEY = ["id"]
