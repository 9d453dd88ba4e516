"""Safe SQL query builder base with validation and positional parameter binding.

This module provides the shared foundation of the fluent statement builders:
table handling, configuration, rendering entry points and error helpers.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NoReturn, Optional

from typing_extensions import Self

from querykit.config import BuilderConfig
from querykit.exceptions import QueryKitError, SQLBuilderError, ValidationError

if TYPE_CHECKING:
    from sqlglot import exp

    from querykit.builder._renderer import StatementRenderer
    from querykit.typing import Bindings

__all__ = ("QueryBuilder", "SafeQuery")


@dataclass(frozen=True)
class SafeQuery:
    """A rendered SQL statement with its positional bindings.

    ``bindings[i]`` is the value for the i-th ``?`` in ``sql``. Unpacks as
    ``sql, bindings = query.render()``.
    """

    sql: str
    bindings: "Bindings" = ()

    def __iter__(self) -> "Iterator[Any]":
        return iter((self.sql, self.bindings))


class QueryBuilder(ABC):
    """Abstract base class for SQL statement builders.

    A builder is a single-writer accumulator. Its methods mutate the clause
    model and return ``self``; :meth:`render` reads the model without changing
    it and may be called any number of times once configuration is done.
    """

    statement_kind: str = "STATEMENT"

    def __init__(self, table: Optional[str] = None, *, config: Optional[BuilderConfig] = None) -> None:
        self._table: Optional[str] = None
        self.config = config if config is not None else BuilderConfig()
        if table is not None:
            self._set_table(table)

    @property
    def table_name(self) -> Optional[str]:
        """The target table, or None while unset."""
        return self._table

    def _set_table(self, table: str) -> None:
        if not isinstance(table, str) or not table.strip():
            self._raise_validation_error(f"{self.statement_kind} table must be a non-empty string, got {table!r}")
        self._table = table.strip()

    def _require_table(self) -> str:
        if self._table is None:
            self._raise_validation_error(f"{self.statement_kind} requires a table")
        return self._table

    @abstractmethod
    def _render_with(self, renderer: "StatementRenderer") -> "exp.Expression":
        """Lower this builder's clause model to a sqlglot expression.

        Implementations call back into ``renderer`` so bindings are collected
        in the order the placeholders are created.
        """

    @staticmethod
    def _raise_sql_builder_error(message: str, cause: Optional[BaseException] = None) -> NoReturn:
        """Helper to raise SQLBuilderError, potentially with a cause.

        Raises:
            SQLBuilderError: Always raises this exception.
        """
        raise SQLBuilderError(message) from cause

    @staticmethod
    def _raise_validation_error(message: str) -> NoReturn:
        """Helper to raise ValidationError.

        Raises:
            ValidationError: Always raises this exception.
        """
        raise ValidationError(message)

    def render(self) -> SafeQuery:
        """Render the statement into SQL text and ordered bindings.

        Raises:
            ValidationError: If the clause model is incomplete or inconsistent.
            SQLBuilderError: If SQL generation fails.

        Returns:
            SafeQuery: The SQL string and its bindings.
        """
        from querykit.builder._renderer import StatementRenderer

        return StatementRenderer(self.config).render(self)

    def to_sql(self) -> str:
        return self.render().sql

    @property
    def bindings(self) -> "Bindings":
        return self.render().bindings

    def copy(self) -> Self:
        """Return an independent deep copy sharing the same configuration."""
        memo: dict[int, Any] = {id(self.config): self.config}
        return copy.deepcopy(self, memo)

    def __str__(self) -> str:
        try:
            return self.to_sql()
        except QueryKitError:
            return super().__str__()
