"""SQL query builders for safe SQL construction.

This package provides fluent interfaces for building SQL queries with
positional ``?`` parameter binding and validation.
"""

from querykit.builder._base import QueryBuilder, SafeQuery
from querykit.builder._case import CaseBuilder
from querykit.builder._clauses import (
    COMPARISON_OPERATORS,
    Aggregate,
    AggregateFunction,
    Condition,
    ConditionKind,
    Conjunction,
    Join,
    JoinKind,
    OrderBy,
    SortDirection,
    UnionPart,
)
from querykit.builder._delete import DeleteQuery
from querykit.builder._insert import InsertQuery
from querykit.builder._renderer import StatementRenderer, render
from querykit.builder._select import SelectQuery
from querykit.builder._update import UpdateQuery

__all__ = (
    "COMPARISON_OPERATORS",
    "Aggregate",
    "AggregateFunction",
    "CaseBuilder",
    "Condition",
    "ConditionKind",
    "Conjunction",
    "DeleteQuery",
    "InsertQuery",
    "Join",
    "JoinKind",
    "OrderBy",
    "QueryBuilder",
    "SafeQuery",
    "SelectQuery",
    "SortDirection",
    "StatementRenderer",
    "UnionPart",
    "UpdateQuery",
    "render",
)
