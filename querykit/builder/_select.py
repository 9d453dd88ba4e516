# ruff: noqa: SLF001
"""Safe SQL query builder with validation and parameter binding.

This module provides a fluent interface for building SELECT queries safely,
with automatic positional parameter binding and validation.
"""

from typing import TYPE_CHECKING, Optional

from typing_extensions import Self

from querykit.builder._base import QueryBuilder
from querykit.builder.mixins import (
    AggregateFunctionsMixin,
    CaseBuilderMixin,
    GroupByClauseMixin,
    HavingClauseMixin,
    JoinClauseMixin,
    LimitOffsetClauseMixin,
    OrderByClauseMixin,
    SelectColumnsMixin,
    SetOperationMixin,
    WhereClauseMixin,
)

if TYPE_CHECKING:
    from sqlglot import exp

    from querykit.builder._clauses import Condition, Join, OrderBy, UnionPart
    from querykit.builder._renderer import StatementRenderer
    from querykit.builder.mixins._select_columns import Projection
    from querykit.config import BuilderConfig

__all__ = ("SelectQuery",)


class SelectQuery(
    QueryBuilder,
    SelectColumnsMixin,
    AggregateFunctionsMixin,
    CaseBuilderMixin,
    JoinClauseMixin,
    WhereClauseMixin,
    GroupByClauseMixin,
    HavingClauseMixin,
    OrderByClauseMixin,
    LimitOffsetClauseMixin,
    SetOperationMixin,
):
    """Builds SELECT queries.

    Example:
        ```python
        query = (
            SelectQuery("users")
            .select("id", "name")
            .where("age", ">", 18)
            .where("country", "USA")
            .order_by("name")
            .page(2, 10)
        )
        sql, bindings = query.render()
        # SELECT id, name FROM users WHERE age > ? AND country = ?
        #   ORDER BY name ASC LIMIT 10 OFFSET 10
        # (18, "USA")
        ```
    """

    statement_kind = "SELECT"

    def __init__(self, table: Optional[str] = None, *, config: "Optional[BuilderConfig]" = None) -> None:
        super().__init__(table, config=config)
        self._projections: list[Projection] = []
        self._joins: list[Join] = []
        self._wheres: list[Condition] = []
        self._group_by: list[str] = []
        self._havings: list[Condition] = []
        self._order_by: list[OrderBy] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None
        self._unions: list[UnionPart] = []

    def from_(self, table: str) -> Self:
        """Set or replace the table to select from.

        Args:
            table: The table name, optionally followed by an alias.

        Returns:
            The current builder instance for method chaining.
        """
        self._set_table(table)
        return self

    def _render_with(self, renderer: "StatementRenderer") -> "exp.Expression":
        return renderer.select_expression(self)
