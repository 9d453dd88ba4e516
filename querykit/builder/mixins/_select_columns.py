from typing import TYPE_CHECKING, Any, Optional, Union

from typing_extensions import Self

from querykit.builder._clauses import Aggregate, AggregateFunction
from querykit.exceptions import ValidationError
from querykit.protocols import Renderable

if TYPE_CHECKING:
    from querykit.config import BuilderConfig

__all__ = ("AggregateFunctionsMixin", "CaseBuilderMixin", "SelectColumnsMixin")

Projection = Union[str, Aggregate, Renderable]


class SelectColumnsMixin:
    """Mixin providing the projection list of SELECT builders."""

    _projections: "list[Projection]"

    def select(self, *columns: "Union[str, Renderable]") -> Self:
        """Append columns or expressions to the projection list.

        Repeated calls append. A query that never calls ``select`` renders
        ``SELECT *``.

        Args:
            *columns: Column names, SQL expressions such as ``"COUNT(*) AS n"``,
                or any object implementing ``render() -> (text, bindings)``.

        Raises:
            ValidationError: If a column is neither text nor renderable.

        Returns:
            The current builder instance for method chaining.
        """
        for column in columns:
            if isinstance(column, str):
                if not column.strip():
                    msg = "Projection column must be a non-empty string"
                    raise ValidationError(msg)
                self._projections.append(column.strip())
            elif isinstance(column, Renderable):
                self._projections.append(column)
            else:
                msg = f"Cannot select {type(column).__name__}: expected a column name or a renderable expression"
                raise ValidationError(msg)
        return self


class AggregateFunctionsMixin:
    """Aggregate shortcuts. Each appends one aggregate projection; nothing is executed."""

    _projections: "list[Projection]"

    def _add_aggregate(self, function: AggregateFunction, column: str, alias: Optional[str]) -> Self:
        if not isinstance(column, str) or not column.strip():
            msg = f"{function.value}() requires a column name"
            raise ValidationError(msg)
        if alias is not None and (not isinstance(alias, str) or not alias.strip()):
            msg = f"{function.value}() alias must be a non-empty string"
            raise ValidationError(msg)
        self._projections.append(Aggregate(function, column.strip(), alias.strip() if alias else None))
        return self

    def count(self, column: str = "*", alias: Optional[str] = None) -> Self:
        """Add ``COUNT(column)`` to the projection, ``COUNT(*)`` by default."""
        return self._add_aggregate(AggregateFunction.COUNT, column, alias)

    def avg(self, column: str, alias: Optional[str] = None) -> Self:
        return self._add_aggregate(AggregateFunction.AVG, column, alias)

    def sum(self, column: str, alias: Optional[str] = None) -> Self:
        return self._add_aggregate(AggregateFunction.SUM, column, alias)

    def min(self, column: str, alias: Optional[str] = None) -> Self:
        return self._add_aggregate(AggregateFunction.MIN, column, alias)

    def max(self, column: str, alias: Optional[str] = None) -> Self:
        return self._add_aggregate(AggregateFunction.MAX, column, alias)


class CaseBuilderMixin:
    """Mixin providing CASE expression support through the extension registry."""

    config: "BuilderConfig"

    def select_case(self, subject: Optional[str] = None) -> Any:
        """Create a CASE expression bound to this builder's configuration.

        The expression is not added to the projection; pass it to
        :meth:`select` once its branches are defined::

            case = query.select_case().when("age", "<", 18).then("Minor").else_("Adult").as_("group")
            query.select("name", case)

        Args:
            subject: Optional subject column for the simple ``CASE x WHEN ...`` form.

        Returns:
            A new CASE expression.
        """
        return self.config.extensions.create("case", subject)
