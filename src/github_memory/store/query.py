"""Conjunctive filter builder for store searches.

Each criterion becomes a SQLAlchemy predicate whose user-supplied value is a
bound parameter, so no search text is ever spliced into the SQL string.
``%`` and ``_`` inside a substring query are not escaped and act as LIKE
wildcards.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, Select, or_


class FilterBuilder:
    """Accumulates AND-ed predicates for a search query.

    Empty or ``None`` values are skipped, so callers can pass optional
    criteria straight through.

    Example:
        stmt = (
            FilterBuilder()
            .contains(query, table.c.title, table.c.body)
            .equals(table.c.author, author)
            .apply(select(table))
        )
    """

    def __init__(self) -> None:
        self._clauses: list[ColumnElement[bool]] = []

    def contains(self, text: str | None, *columns: ColumnElement[Any]) -> FilterBuilder:
        """Require ``text`` as a substring of any of ``columns``."""
        if text:
            pattern = f"%{text}%"
            self._clauses.append(or_(*(column.like(pattern) for column in columns)))
        return self

    def equals(self, column: ColumnElement[Any], value: str | None) -> FilterBuilder:
        """Require ``column`` to equal ``value`` exactly."""
        if value:
            self._clauses.append(column == value)
        return self

    def apply(self, stmt: Select) -> Select:
        """Attach the accumulated predicates to ``stmt``."""
        if not self._clauses:
            return stmt
        return stmt.where(*self._clauses)

    def __len__(self) -> int:
        return len(self._clauses)
