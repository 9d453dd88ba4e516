"""Clause model shared by all statement builders.

These are plain value types. Builders create and mutate them; the renderer
reads them. Nothing here knows about SQL text generation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from querykit.exceptions import UnsupportedOperatorError

__all__ = (
    "COMPARISON_OPERATORS",
    "Aggregate",
    "AggregateFunction",
    "Cmp",
    "Condition",
    "ConditionKind",
    "Conjunction",
    "Eq",
    "FromRecord",
    "Join",
    "JoinKind",
    "OrderBy",
    "SortDirection",
    "UnionPart",
    "WhereShape",
    "normalize_operator",
)

COMPARISON_OPERATORS = frozenset({"=", ">", "<", ">=", "<=", "!=", "LIKE"})


def normalize_operator(operator: Any) -> str:
    """Return the canonical spelling of a comparison operator.

    Raises:
        UnsupportedOperatorError: If the operator is not recognized.
    """
    if not isinstance(operator, str):
        raise UnsupportedOperatorError(repr(operator))
    canonical = operator.strip().upper()
    if canonical not in COMPARISON_OPERATORS:
        raise UnsupportedOperatorError(operator)
    return canonical


class Conjunction(str, Enum):
    AND = "AND"
    OR = "OR"


class ConditionKind(str, Enum):
    COMPARISON = "comparison"
    IN = "in"
    NOT_IN = "not_in"
    NULL = "null"
    NOT_NULL = "not_null"
    BETWEEN = "between"
    RAW = "raw"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


@dataclass
class Condition:
    """One predicate in a WHERE or HAVING list.

    ``conjunction`` joins this condition to the previous one in its list and is
    ignored for the first condition.

    ``value`` holds the comparison operand, the IN sequence or sub-query, the
    ``(low, high)`` pair for BETWEEN, the bound values of a raw fragment, or
    the sub-query (builder or SQL text) for EXISTS.
    """

    kind: ConditionKind
    column: Optional[str] = None
    operator: Optional[str] = None
    value: Any = None
    conjunction: Conjunction = Conjunction.AND
    fragment: Optional[str] = None


class JoinKind(str, Enum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CROSS = "CROSS"


@dataclass
class Join:
    kind: JoinKind
    table: str
    left_column: Optional[str] = None
    operator: Optional[str] = None
    right_column: Optional[str] = None


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass
class OrderBy:
    column: str
    direction: SortDirection = SortDirection.ASC


class AggregateFunction(str, Enum):
    COUNT = "COUNT"
    AVG = "AVG"
    SUM = "SUM"
    MIN = "MIN"
    MAX = "MAX"


@dataclass
class Aggregate:
    """An aggregate projection such as ``COUNT(*)`` or ``AVG(age) AS avg_age``."""

    function: AggregateFunction
    column: str = "*"
    alias: Optional[str] = None


@dataclass
class UnionPart:
    """A set-operation branch; ``query`` is another select builder held by reference."""

    query: Any
    all: bool = False


# Call shapes accepted by ``where``/``having``. Builders normalize user calls
# into one of these before producing Condition nodes.
@dataclass(frozen=True)
class Eq:
    column: str
    value: Any


@dataclass(frozen=True)
class Cmp:
    column: str
    operator: str
    value: Any


@dataclass(frozen=True)
class FromRecord:
    record: "dict[str, Any]" = field(default_factory=dict)


WhereShape = Union[Eq, Cmp, FromRecord]
