"""Safe SQL query builder with validation and parameter binding.

This module provides a fluent interface for building INSERT statements with
one or more rows of values.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from querykit.builder._base import QueryBuilder

if TYPE_CHECKING:
    from sqlglot import exp

    from querykit.builder._renderer import StatementRenderer
    from querykit.config import BuilderConfig
    from querykit.typing import Record

__all__ = ("InsertQuery",)


class InsertQuery(QueryBuilder):
    """Builder for INSERT statements.

    The first row fixes the column set and order. Every later row must carry
    exactly the same columns, in any order; this is checked at render.

    Example:
        ```python
        query = InsertQuery("users").values(
            [
                {"name": "Ann", "email": "ann@example.com"},
                {"name": "Bob", "email": "bob@example.com"},
            ]
        )
        sql, bindings = query.render()
        # INSERT INTO users (name, email) VALUES (?, ?), (?, ?)
        ```
    """

    statement_kind = "INSERT"

    def __init__(self, table: Optional[str] = None, *, config: "Optional[BuilderConfig]" = None) -> None:
        super().__init__(table, config=config)
        self._rows: list[dict[str, Any]] = []

    def into(self, table: str) -> Self:
        """Set the target table for the INSERT statement."""
        self._set_table(table)
        return self

    def values(self, rows: "Union[Record, Iterable[Record]]") -> Self:
        """Add one record or a batch of records to the statement.

        Repeated calls extend the batch.

        Args:
            rows: A column to value mapping, or an iterable of such mappings.

        Raises:
            ValidationError: If ``rows`` is not a mapping or an iterable of
                mappings, or a row is empty.

        Returns:
            The current builder instance for method chaining.
        """
        if isinstance(rows, (str, bytes)) or not isinstance(rows, (Mapping, Iterable)):
            msg = f"INSERT values() expects a mapping or an iterable of mappings, got {type(rows).__name__}"
            self._raise_validation_error(msg)
        batch = [rows] if isinstance(rows, Mapping) else list(rows)
        for row in batch:
            if not isinstance(row, Mapping):
                self._raise_validation_error(f"INSERT rows must be mappings of column to value, got {type(row).__name__}")
            if not row:
                self._raise_validation_error("INSERT rows must contain at least one column")
            for column in row:
                if not isinstance(column, str) or not column.strip():
                    self._raise_validation_error(f"INSERT column must be a non-empty string, got {column!r}")
            self._rows.append(dict(row))
        return self

    @property
    def columns(self) -> "tuple[str, ...]":
        """The column order fixed by the first row."""
        return tuple(self._rows[0]) if self._rows else ()

    def _checked_rows(self) -> "tuple[tuple[str, ...], list[dict[str, Any]]]":
        if not self._rows:
            self._raise_validation_error("INSERT requires at least one row of values")
        columns = self.columns
        expected = set(columns)
        for position, row in enumerate(self._rows[1:], start=2):
            missing = [column for column in columns if column not in row]
            if missing:
                self._raise_validation_error(f"INSERT row {position} is missing column(s): {', '.join(missing)}")
            extra = [column for column in row if column not in expected]
            if extra:
                self._raise_validation_error(f"INSERT row {position} has unexpected column(s): {', '.join(extra)}")
        return columns, self._rows

    def _render_with(self, renderer: "StatementRenderer") -> "exp.Expression":
        return renderer.insert_expression(self)
