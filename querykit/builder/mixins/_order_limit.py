from typing import Any, Optional

from typing_extensions import Self

from querykit.builder._clauses import OrderBy, SortDirection
from querykit.exceptions import ValidationError

__all__ = ("GroupByClauseMixin", "LimitOffsetClauseMixin", "OrderByClauseMixin")


def _check_column(column: Any, clause: str) -> str:
    if not isinstance(column, str) or not column.strip():
        msg = f"{clause} column must be a non-empty string, got {column!r}"
        raise ValidationError(msg)
    return column.strip()


def _check_count(value: Any, clause: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{clause} must be an integer, got {value!r}"
        raise ValidationError(msg)
    if value < 0:
        msg = f"{clause} must not be negative, got {value}"
        raise ValidationError(msg)
    return value


class OrderByClauseMixin:
    """Mixin providing ORDER BY clause for SELECT builders."""

    _order_by: "list[OrderBy]"

    def order_by(self, column: str, direction: str = "ASC") -> Self:
        """Add an ORDER BY item.

        Args:
            column: The column or expression to sort by.
            direction: ``"ASC"`` or ``"DESC"``, case-insensitive.

        Raises:
            ValidationError: If the direction is not ASC or DESC.

        Returns:
            The current builder instance for method chaining.
        """
        normalized = str(direction).strip().upper()
        if normalized not in SortDirection.__members__:
            msg = f"Sort direction must be ASC or DESC, got {direction!r}"
            raise ValidationError(msg)
        self._order_by.append(OrderBy(_check_column(column, "ORDER BY"), SortDirection(normalized)))
        return self

    def order_by_desc(self, column: str) -> Self:
        return self.order_by(column, "DESC")


class GroupByClauseMixin:
    """Mixin providing GROUP BY clause for SELECT builders."""

    _group_by: "list[str]"

    def group_by(self, *columns: str) -> Self:
        self._group_by.extend(_check_column(column, "GROUP BY") for column in columns)
        return self


class LimitOffsetClauseMixin:
    """Mixin providing LIMIT, OFFSET and page-based pagination for SELECT builders."""

    _limit: Optional[int]
    _offset: Optional[int]

    def limit(self, value: int) -> Self:
        """Set the LIMIT, rendered as an integer literal.

        Raises:
            ValidationError: If ``value`` is negative or not an integer.
        """
        self._limit = _check_count(value, "LIMIT")
        return self

    def offset(self, value: int) -> Self:
        self._offset = _check_count(value, "OFFSET")
        return self

    def page(self, number: int, per_page: int) -> Self:
        """Select one page of results: ``limit(per_page).offset((number - 1) * per_page)``.

        Raises:
            ValidationError: If ``number`` is below 1 or ``per_page`` is not positive.
        """
        if isinstance(number, bool) or not isinstance(number, int) or number < 1:
            msg = f"Page number must be an integer of at least 1, got {number!r}"
            raise ValidationError(msg)
        if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
            msg = f"Page size must be a positive integer, got {per_page!r}"
            raise ValidationError(msg)
        return self.limit(per_page).offset((number - 1) * per_page)
