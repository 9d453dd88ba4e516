from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Union

from typing_extensions import Self

from querykit.builder._clauses import (
    Cmp,
    Condition,
    ConditionKind,
    Conjunction,
    Eq,
    FromRecord,
    WhereShape,
    normalize_operator,
)
from querykit.exceptions import ValidationError

if TYPE_CHECKING:
    from querykit.config import BuilderConfig

__all__ = ("HavingClauseMixin", "WhereClauseMixin", "expand_shape", "normalize_condition")

MAX_WHERE_ARGS = 3


def normalize_condition(args: "tuple[Any, ...]") -> WhereShape:
    """Resolve the positional forms of ``where``/``having`` into a call shape.

    - ``(mapping,)`` -> FromRecord
    - ``(column, value)`` -> Eq
    - ``(column, operator, value)`` -> Cmp

    Raises:
        ValidationError: For any other argument count or a malformed record.
        UnsupportedOperatorError: If the operator is not recognized.
    """
    if len(args) == 1:
        record = args[0]
        if not isinstance(record, Mapping):
            msg = f"A single condition argument must be a mapping of column to value, got {type(record).__name__}"
            raise ValidationError(msg)
        if not record:
            msg = "Condition record must contain at least one column"
            raise ValidationError(msg)
        return FromRecord(dict(record))
    if len(args) == 2:  # noqa: PLR2004
        return Eq(_check_column(args[0]), args[1])
    if len(args) == MAX_WHERE_ARGS:
        return Cmp(_check_column(args[0]), normalize_operator(args[1]), args[2])
    msg = f"Condition takes 1 to {MAX_WHERE_ARGS} arguments ({len(args)} given)"
    raise ValidationError(msg)


def expand_shape(shape: WhereShape, conjunction: Conjunction) -> "list[Condition]":
    """Turn a call shape into comparison conditions.

    Record entries keep the record's own order. The first entry carries
    ``conjunction``; the remaining entries are AND-conjoined.
    """
    if isinstance(shape, Eq):
        return [Condition(ConditionKind.COMPARISON, shape.column, "=", shape.value, conjunction)]
    if isinstance(shape, Cmp):
        return [Condition(ConditionKind.COMPARISON, shape.column, shape.operator, shape.value, conjunction)]
    conditions = []
    for index, (column, value) in enumerate(shape.record.items()):
        conditions.append(
            Condition(
                ConditionKind.COMPARISON,
                _check_column(column),
                "=",
                value,
                conjunction if index == 0 else Conjunction.AND,
            )
        )
    return conditions


def _check_column(column: Any) -> str:
    if not isinstance(column, str) or not column.strip():
        msg = f"Column must be a non-empty string, got {column!r}"
        raise ValidationError(msg)
    return column.strip()


def _is_select_query(value: Any) -> bool:
    from querykit.builder._select import SelectQuery

    return isinstance(value, SelectQuery)


def _in_values(values: Any, method: str) -> Any:
    if _is_select_query(values):
        return values
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        msg = f"{method}() requires a non-string sequence of values or a select query"
        raise ValidationError(msg)
    materialized = tuple(values)
    if not materialized:
        msg = f"{method}() requires at least one value"
        raise ValidationError(msg)
    return materialized


def _raw_condition(config: "BuilderConfig", fragment: str, values: "tuple[Any, ...]", conjunction: Conjunction) -> Condition:
    if not isinstance(fragment, str) or not fragment.strip():
        msg = "Raw condition fragment must be a non-empty string"
        raise ValidationError(msg)
    if config.check_raw_placeholders and fragment.count("?") != len(values):
        msg = f"Raw fragment {fragment!r} has {fragment.count('?')} placeholder(s) but {len(values)} value(s) were given"
        raise ValidationError(msg)
    return Condition(ConditionKind.RAW, value=values, conjunction=conjunction, fragment=fragment)


def _exists_target(subquery: Any) -> Any:
    if _is_select_query(subquery):
        return subquery
    if isinstance(subquery, str) and subquery.strip():
        return subquery.strip()
    msg = f"EXISTS requires a select query or SQL text, got {type(subquery).__name__}"
    raise ValidationError(msg)


class WhereClauseMixin:
    """Mixin providing WHERE clause methods for SELECT, UPDATE, and DELETE builders.

    Note: This mixin expects the including class to have:
    - a ``_wheres`` list of conditions
    - a ``config`` attribute
    """

    _wheres: "list[Condition]"
    config: "BuilderConfig"

    def where(self, *args: Any) -> Self:
        """Add an AND-conjoined condition to the WHERE clause.

        Accepts ``where(column, value)`` (implied ``=``),
        ``where(column, operator, value)`` or ``where({column: value, ...})``.
        A select query as the value renders as a sub-query.

        Raises:
            ValidationError: If the arguments do not form a condition.
            UnsupportedOperatorError: If the operator is not recognized.

        Returns:
            The current builder instance for method chaining.
        """
        self._wheres.extend(expand_shape(normalize_condition(args), Conjunction.AND))
        return self

    def or_where(self, *args: Any) -> Self:
        """Like :meth:`where`, but joins the new condition with OR."""
        self._wheres.extend(expand_shape(normalize_condition(args), Conjunction.OR))
        return self

    def where_in(self, column: str, values: Any) -> Self:
        """Add a ``column IN (...)`` condition.

        Args:
            column: The column to test.
            values: A non-empty sequence of values, or a select query.

        Raises:
            ValidationError: If ``values`` is empty or not a sequence.
        """
        self._wheres.append(
            Condition(ConditionKind.IN, _check_column(column), value=_in_values(values, "where_in"))
        )
        return self

    def where_not_in(self, column: str, values: Any) -> Self:
        self._wheres.append(
            Condition(ConditionKind.NOT_IN, _check_column(column), value=_in_values(values, "where_not_in"))
        )
        return self

    def where_null(self, column: str) -> Self:
        self._wheres.append(Condition(ConditionKind.NULL, _check_column(column)))
        return self

    def where_not_null(self, column: str) -> Self:
        self._wheres.append(Condition(ConditionKind.NOT_NULL, _check_column(column)))
        return self

    def where_between(self, column: str, low: Any, high: Any) -> Self:
        """Add a ``column BETWEEN ? AND ?`` condition binding ``low`` then ``high``."""
        self._wheres.append(Condition(ConditionKind.BETWEEN, _check_column(column), value=(low, high)))
        return self

    def where_raw(self, fragment: str, *values: Any) -> Self:
        """Add a verbatim SQL fragment, binding ``values`` at its position.

        The fragment's own ``?`` placeholders must line up with ``values``;
        that is only checked when ``config.check_raw_placeholders`` is set.
        """
        self._wheres.append(_raw_condition(self.config, fragment, values, Conjunction.AND))
        return self

    def or_where_raw(self, fragment: str, *values: Any) -> Self:
        self._wheres.append(_raw_condition(self.config, fragment, values, Conjunction.OR))
        return self

    def where_exists(self, subquery: "Union[str, Any]") -> Self:
        """Add a WHERE EXISTS clause.

        Args:
            subquery: A select query, whose bindings are spliced in at this
                position, or raw SQL text.
        """
        self._wheres.append(Condition(ConditionKind.EXISTS, value=_exists_target(subquery)))
        return self

    def where_not_exists(self, subquery: "Union[str, Any]") -> Self:
        self._wheres.append(Condition(ConditionKind.NOT_EXISTS, value=_exists_target(subquery)))
        return self


class HavingClauseMixin:
    """Mixin providing HAVING clause methods; conditions share the WHERE shape."""

    _havings: "list[Condition]"
    config: "BuilderConfig"

    def having(self, *args: Any) -> Self:
        self._havings.extend(expand_shape(normalize_condition(args), Conjunction.AND))
        return self

    def or_having(self, *args: Any) -> Self:
        self._havings.extend(expand_shape(normalize_condition(args), Conjunction.OR))
        return self

    def having_raw(self, fragment: str, *values: Any) -> Self:
        self._havings.append(_raw_condition(self.config, fragment, values, Conjunction.AND))
        return self
