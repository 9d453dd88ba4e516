from typing import Any

from typing_extensions import Self

from querykit.builder._clauses import Join, JoinKind, normalize_operator
from querykit.exceptions import ValidationError

__all__ = ("JoinClauseMixin",)


def _check_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"Join {what} must be a non-empty string, got {value!r}"
        raise ValidationError(msg)
    return value.strip()


class JoinClauseMixin:
    """Mixin providing JOIN clause methods for SELECT builders.

    Tables may carry an alias (``"users u"`` or ``"users AS u"``).
    """

    _joins: "list[Join]"

    def _add_join(self, kind: JoinKind, table: str, left_column: str, operator: str, right_column: str) -> Self:
        self._joins.append(
            Join(
                kind=kind,
                table=_check_name(table, "table"),
                left_column=_check_name(left_column, "column"),
                operator=normalize_operator(operator),
                right_column=_check_name(right_column, "column"),
            )
        )
        return self

    def join(self, table: str, left_column: str, operator: str, right_column: str) -> Self:
        """Add an ``INNER JOIN table ON left_column <operator> right_column`` clause.

        Raises:
            UnsupportedOperatorError: If the operator is not recognized.
        """
        return self._add_join(JoinKind.INNER, table, left_column, operator, right_column)

    def inner_join(self, table: str, left_column: str, operator: str, right_column: str) -> Self:
        return self._add_join(JoinKind.INNER, table, left_column, operator, right_column)

    def left_join(self, table: str, left_column: str, operator: str, right_column: str) -> Self:
        return self._add_join(JoinKind.LEFT, table, left_column, operator, right_column)

    def right_join(self, table: str, left_column: str, operator: str, right_column: str) -> Self:
        return self._add_join(JoinKind.RIGHT, table, left_column, operator, right_column)

    def cross_join(self, table: str) -> Self:
        """Add a ``CROSS JOIN table`` clause, which takes no predicate."""
        self._joins.append(Join(kind=JoinKind.CROSS, table=_check_name(table, "table")))
        return self
