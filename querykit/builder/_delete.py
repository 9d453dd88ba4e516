"""Safe SQL query builder with validation and parameter binding.

This module provides a fluent interface for building DELETE statements.
"""

from typing import TYPE_CHECKING, Optional

from typing_extensions import Self

from querykit.builder._base import QueryBuilder
from querykit.builder.mixins import WhereClauseMixin

if TYPE_CHECKING:
    from sqlglot import exp

    from querykit.builder._clauses import Condition
    from querykit.builder._renderer import StatementRenderer
    from querykit.config import BuilderConfig

__all__ = ("DeleteQuery",)


class DeleteQuery(QueryBuilder, WhereClauseMixin):
    """Builder for DELETE statements.

    WHERE is optional. Without it the statement deletes every row of the
    table.

    Example:
        ```python
        query = DeleteQuery().from_("users").where("status", "inactive")
        sql, bindings = query.render()
        # DELETE FROM users WHERE status = ?
        ```
    """

    statement_kind = "DELETE"

    def __init__(self, table: Optional[str] = None, *, config: "Optional[BuilderConfig]" = None) -> None:
        super().__init__(table, config=config)
        self._wheres: list[Condition] = []

    def from_(self, table: str) -> Self:
        """Set the target table for the DELETE statement.

        Args:
            table: The table name to delete from.

        Returns:
            The current builder instance for method chaining.
        """
        self._set_table(table)
        return self

    def _render_with(self, renderer: "StatementRenderer") -> "exp.Expression":
        return renderer.delete_expression(self)
