"""Safe SQL query builder with validation and parameter binding.

This module provides a fluent interface for building UPDATE statements.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import Self

from querykit.builder._base import QueryBuilder
from querykit.builder.mixins import WhereClauseMixin

if TYPE_CHECKING:
    from sqlglot import exp

    from querykit.builder._clauses import Condition
    from querykit.builder._renderer import StatementRenderer
    from querykit.config import BuilderConfig
    from querykit.typing import Record

__all__ = ("UpdateQuery",)


class UpdateQuery(QueryBuilder, WhereClauseMixin):
    """Builder for UPDATE statements.

    WHERE is optional. Without it the statement updates every row of the
    table.

    Example:
        ```python
        query = UpdateQuery().table("users").set({"status": "active"}).where("id", 7)
        sql, bindings = query.render()
        # UPDATE users SET status = ? WHERE id = ?
        ```
    """

    statement_kind = "UPDATE"

    def __init__(self, table: Optional[str] = None, *, config: "Optional[BuilderConfig]" = None) -> None:
        super().__init__(table, config=config)
        self._assignments: dict[str, Any] = {}
        self._wheres: list[Condition] = []

    def table(self, table: str) -> Self:
        """Set the table to update."""
        self._set_table(table)
        return self

    def set(self, record: "Optional[Record]" = None, **values: Any) -> Self:
        """Assign column values.

        Repeated calls merge. A later value for a column already assigned
        replaces the earlier one and keeps its original position.

        Args:
            record: A column to value mapping.
            **values: Further assignments given as keyword arguments.

        Raises:
            ValidationError: If nothing is assigned or a column name is invalid.

        Returns:
            The current builder instance for method chaining.
        """
        if record is not None and not isinstance(record, Mapping):
            self._raise_validation_error(f"UPDATE set() expects a mapping, got {type(record).__name__}")
        assignments = {**(record or {}), **values}
        if not assignments:
            self._raise_validation_error("UPDATE set() requires at least one column")
        for column, value in assignments.items():
            if not isinstance(column, str) or not column.strip():
                self._raise_validation_error(f"UPDATE column must be a non-empty string, got {column!r}")
            self._assignments[column.strip()] = value
        return self

    @property
    def assignments(self) -> "dict[str, Any]":
        return dict(self._assignments)

    def _render_with(self, renderer: "StatementRenderer") -> "exp.Expression":
        return renderer.update_expression(self)
