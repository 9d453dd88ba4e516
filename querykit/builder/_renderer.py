# ruff: noqa: SLF001
"""Statement renderer shared by all builders.

The renderer lowers a builder's clause model into a sqlglot expression tree in
which every bound value is an anonymous ``?`` placeholder, then generates the
SQL text. Nodes are created in the order their text is emitted, and each
placeholder appends its value to the binding list as it is created, so
``bindings[i]`` always belongs to the i-th ``?`` of the output.

UNION branches are generated one at a time and joined as text in call order,
so each branch keeps its own ORDER BY and LIMIT exactly where it was written.
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlglot import exp

from querykit.builder._base import SafeQuery
from querykit.builder._clauses import Aggregate, AggregateFunction, Condition, ConditionKind, Conjunction, JoinKind
from querykit.builder._parsing_utils import parse_column_expression, parse_table_expression
from querykit.exceptions import QueryKitError, SQLBuilderError, UnsupportedOperatorError, ValidationError
from querykit.protocols import Renderable
from querykit.utils.logging import get_logger

if TYPE_CHECKING:
    from querykit.builder._base import QueryBuilder
    from querykit.builder._clauses import Join
    from querykit.builder._delete import DeleteQuery
    from querykit.builder._insert import InsertQuery
    from querykit.builder._select import SelectQuery
    from querykit.builder._update import UpdateQuery
    from querykit.config import BuilderConfig

__all__ = ("StatementRenderer", "comparison_expression", "render")

logger = get_logger("builder.renderer")

_COMPARISON_NODES: "dict[str, type[exp.Binary]]" = {
    "=": exp.EQ,
    ">": exp.GT,
    "<": exp.LT,
    ">=": exp.GTE,
    "<=": exp.LTE,
    "!=": exp.NEQ,
    "LIKE": exp.Like,
}

_AGGREGATE_NODES: "dict[AggregateFunction, type[exp.Func]]" = {
    AggregateFunction.COUNT: exp.Count,
    AggregateFunction.AVG: exp.Avg,
    AggregateFunction.SUM: exp.Sum,
    AggregateFunction.MIN: exp.Min,
    AggregateFunction.MAX: exp.Max,
}


def comparison_expression(operator: str, left: exp.Expression, right: exp.Expression) -> exp.Expression:
    """Build the sqlglot node for ``left <operator> right``.

    Raises:
        UnsupportedOperatorError: If the operator is not recognized.
    """
    node_type = _COMPARISON_NODES.get(operator)
    if node_type is None:
        raise UnsupportedOperatorError(operator)
    return node_type(this=left, expression=right)


def _is_select_query(value: Any) -> bool:
    from querykit.builder._select import SelectQuery

    return isinstance(value, SelectQuery)


class StatementRenderer:
    """Turns builders into ``SafeQuery`` objects.

    A renderer instance is cheap and holds per-render state; builders create a
    fresh one for every call to ``render()``.
    """

    __slots__ = ("_active", "_bindings", "config")

    def __init__(self, config: "BuilderConfig") -> None:
        self.config = config
        self._bindings: list[Any] = []
        self._active: set[int] = set()

    def render(self, builder: "QueryBuilder") -> SafeQuery:
        """Render a builder into SQL text and ordered bindings.

        Raises:
            ValidationError: If the builder's clause model is incomplete.
            SQLBuilderError: If SQL generation fails.
        """
        self._bindings = []
        self._active = set()
        sql = self._generate(builder, builder._render_with(self))
        bindings = tuple(self._bindings)
        logger.debug(
            "Rendered %s statement with %d bindings",
            builder.statement_kind,
            len(bindings),
            extra={"extra_fields": {"statement_kind": builder.statement_kind, "binding_count": len(bindings)}},
        )
        return SafeQuery(sql=sql, bindings=bindings)

    def _generate(self, builder: "QueryBuilder", expression: exp.Expression) -> str:
        try:
            return expression.sql(pretty=self.config.pretty)
        except QueryKitError:
            raise
        except Exception as e:  # noqa: BLE001
            msg = f"Failed to generate SQL for {builder.statement_kind} statement: {e}"
            builder._raise_sql_builder_error(msg, e)

    def _param(self, value: Any) -> exp.Expression:
        self._bindings.append(value)
        return exp.Placeholder()

    def _operand(self, value: Any) -> exp.Expression:
        if _is_select_query(value):
            return exp.Subquery(this=self.select_expression(value))
        return self._param(value)

    def select_expression(self, query: "SelectQuery") -> exp.Expression:
        """Lower a SELECT builder, including any UNION branches.

        Raises:
            ValidationError: If the table is unset or the query references
                itself through unions or sub-queries.
        """
        if id(query) in self._active:
            msg = "Cyclic reference between queries detected while rendering"
            raise ValidationError(msg)
        self._active.add(id(query))
        try:
            table = query._require_table()
            select = exp.Select()
            projections = [self._projection(entry) for entry in query._projections] or [exp.Star()]
            select = select.select(*projections, copy=False)
            select = select.from_(parse_table_expression(table), copy=False)
            for join in query._joins:
                select.append("joins", self._join(join))
            where = self._conditions(query._wheres)
            if where is not None:
                select.set("where", exp.Where(this=where))
            if query._group_by:
                select = select.group_by(*(parse_column_expression(column) for column in query._group_by), copy=False)
            having = self._conditions(query._havings)
            if having is not None:
                select.set("having", exp.Having(this=having))
            if query._order_by:
                select = select.order_by(
                    *(
                        exp.Ordered(
                            this=parse_column_expression(order.column),
                            desc=order.direction.value == "DESC",
                            nulls_first=order.direction.value == "ASC",
                        )
                        for order in query._order_by
                    ),
                    copy=False,
                )
            if query._limit is not None:
                select = select.limit(exp.Literal.number(query._limit), copy=False)
            if query._offset is not None:
                select = select.offset(exp.Literal.number(query._offset), copy=False)

            if not query._unions:
                return select
            separator = "\n" if self.config.pretty else " "
            parts = [self._generate(query, select)]
            for part in query._unions:
                keyword = "UNION ALL" if part.all else "UNION"
                parts.append(f"{keyword}{separator}{self._generate(part.query, self.select_expression(part.query))}")
            return exp.var(separator.join(parts))
        finally:
            self._active.discard(id(query))

    def insert_expression(self, query: "InsertQuery") -> exp.Expression:
        table = query._require_table()
        columns, rows = query._checked_rows()
        tuples = [exp.Tuple(expressions=[self._operand(row[column]) for column in columns]) for row in rows]
        return exp.Insert(
            this=exp.Schema(
                this=parse_table_expression(table), expressions=[exp.to_identifier(column) for column in columns]
            ),
            expression=exp.Values(expressions=tuples),
        )

    def update_expression(self, query: "UpdateQuery") -> exp.Expression:
        table = query._require_table()
        if not query._assignments:
            query._raise_validation_error("UPDATE requires at least one set() assignment")
        update = exp.Update(
            this=parse_table_expression(table),
            expressions=[
                exp.EQ(this=exp.to_column(column), expression=self._operand(value))
                for column, value in query._assignments.items()
            ],
        )
        where = self._conditions(query._wheres)
        if where is not None:
            update.set("where", exp.Where(this=where))
        return update

    def delete_expression(self, query: "DeleteQuery") -> exp.Expression:
        delete = exp.Delete(this=parse_table_expression(query._require_table()))
        where = self._conditions(query._wheres)
        if where is not None:
            delete.set("where", exp.Where(this=where))
        return delete

    def _projection(self, entry: Any) -> exp.Expression:
        if isinstance(entry, str):
            return parse_column_expression(entry)
        if isinstance(entry, Aggregate):
            argument = exp.Star() if entry.column == "*" else parse_column_expression(entry.column)
            node: exp.Expression = _AGGREGATE_NODES[entry.function](this=argument)
            return exp.alias_(node, entry.alias) if entry.alias else node
        if _is_select_query(entry):
            return exp.Subquery(this=self.select_expression(entry))
        if isinstance(entry, Renderable):
            text, bindings = entry.render()
            self._bindings.extend(bindings)
            return exp.var(text)
        msg = f"Cannot render projection of type {type(entry).__name__}"
        raise SQLBuilderError(msg)

    def _join(self, join: "Join") -> exp.Join:
        table = parse_table_expression(join.table)
        if join.kind is JoinKind.CROSS:
            return exp.Join(this=table, kind="CROSS")
        on = comparison_expression(
            join.operator or "=",
            parse_column_expression(join.left_column or ""),
            parse_column_expression(join.right_column or ""),
        )
        if join.kind is JoinKind.INNER:
            return exp.Join(this=table, on=on, kind="INNER")
        return exp.Join(this=table, on=on, side=join.kind.value)

    def _conditions(self, conditions: "list[Condition]") -> Optional[exp.Expression]:
        """Fold a condition list left to right; the first conjunction is ignored."""
        result: Optional[exp.Expression] = None
        for condition in conditions:
            node = self._condition(condition)
            if result is None:
                result = node
            elif condition.conjunction is Conjunction.OR:
                result = exp.Or(this=result, expression=node)
            else:
                result = exp.And(this=result, expression=node)
        return result

    def _condition(self, condition: Condition) -> exp.Expression:  # noqa: PLR0911
        kind = condition.kind
        if kind is ConditionKind.RAW:
            self._bindings.extend(condition.value or ())
            return exp.var(condition.fragment or "")
        if kind in {ConditionKind.EXISTS, ConditionKind.NOT_EXISTS}:
            target = condition.value
            body = self.select_expression(target) if _is_select_query(target) else exp.var(str(target))
            exists: exp.Expression = exp.Exists(this=body)
            return exp.Not(this=exists) if kind is ConditionKind.NOT_EXISTS else exists

        column = parse_column_expression(condition.column or "")
        if kind is ConditionKind.COMPARISON:
            return comparison_expression(condition.operator or "=", column, self._operand(condition.value))
        if kind in {ConditionKind.IN, ConditionKind.NOT_IN}:
            values = condition.value
            if _is_select_query(values):
                members = [self.select_expression(values)]
            else:
                members = [self._param(value) for value in values]
            node: exp.Expression = exp.In(this=column, expressions=members)
            return exp.Not(this=node) if kind is ConditionKind.NOT_IN else node
        if kind in {ConditionKind.NULL, ConditionKind.NOT_NULL}:
            is_null: exp.Expression = exp.Is(this=column, expression=exp.Null())
            return exp.Not(this=is_null) if kind is ConditionKind.NOT_NULL else is_null
        if kind is ConditionKind.BETWEEN:
            low, high = condition.value
            return exp.Between(this=column, low=self._param(low), high=self._param(high))
        msg = f"Unknown condition kind: {kind!r}"
        raise SQLBuilderError(msg)


def render(builder: "QueryBuilder") -> SafeQuery:
    """Render ``builder`` into ``(sql, bindings)``.

    Equivalent to ``builder.render()``.
    """
    return StatementRenderer(builder.config).render(builder)
