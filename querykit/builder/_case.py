"""CASE expressions for SELECT projections.

``CaseBuilder`` is registered as the ``"case"`` expression kind of the default
extension registry. It renders itself, so SELECT builders only see a value
implementing ``render() -> (text, bindings)``.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sqlglot import exp
from typing_extensions import Self

from querykit.builder._clauses import normalize_operator
from querykit.builder._parsing_utils import parse_column_expression
from querykit.builder._renderer import comparison_expression
from querykit.exceptions import SQLBuilderError, ValidationError
from querykit.typing import Bindings

__all__ = ("CaseBuilder",)


@dataclass
class _WhenBranch:
    column: Optional[str]
    operator: Optional[str]
    value: Any
    raw: Optional[str] = None
    result: Any = None
    has_result: bool = False


class CaseBuilder:
    """Builder for CASE expressions.

    Two forms are supported:

    - simple: ``CaseBuilder("status").when("A").then("Active")`` renders
      ``CASE status WHEN ? THEN ? END``;
    - searched: ``CaseBuilder().when("age", "<", 18).then("Minor")`` renders
      ``CASE WHEN age < ? THEN ? END``. ``when(column, value)`` implies ``=``
      and ``when("raw predicate")`` is inserted verbatim.

    Every ``when`` must be followed by exactly one ``then`` before the next
    ``when``, ``else_`` or render.
    """

    def __init__(self, subject: Optional[str] = None) -> None:
        if subject is not None and (not isinstance(subject, str) or not subject.strip()):
            msg = f"CASE subject must be a non-empty column name, got {subject!r}"
            raise ValidationError(msg)
        self._subject = subject.strip() if subject is not None else None
        self._branches: list[_WhenBranch] = []
        self._else: Any = None
        self._has_else = False
        self._alias: Optional[str] = None

    @property
    def is_simple(self) -> bool:
        """Whether this is the ``CASE <subject> WHEN <value>`` form."""
        return self._subject is not None

    @property
    def _pending(self) -> bool:
        return bool(self._branches) and not self._branches[-1].has_result

    def when(self, *args: Any) -> Self:
        """Open a WHEN branch.

        Raises:
            ValidationError: If the previous branch has no ``then`` yet, or the
                arguments do not match the expression's form.
            UnsupportedOperatorError: If the operator is not recognized.
        """
        if self._pending:
            msg = "when() called before then() of the previous branch"
            raise ValidationError(msg)
        if self.is_simple:
            if len(args) != 1:
                msg = f"Simple CASE when() takes exactly one value ({len(args)} given)"
                raise ValidationError(msg)
            self._branches.append(_WhenBranch(None, None, args[0]))
            return self
        if len(args) == 1:
            raw = args[0]
            if not isinstance(raw, str) or not raw.strip():
                msg = "Searched CASE when() with one argument requires a raw SQL predicate"
                raise ValidationError(msg)
            self._branches.append(_WhenBranch(None, None, None, raw=raw.strip()))
        elif len(args) == 2:  # noqa: PLR2004
            self._branches.append(_WhenBranch(self._check_column(args[0]), "=", args[1]))
        elif len(args) == 3:  # noqa: PLR2004
            self._branches.append(_WhenBranch(self._check_column(args[0]), normalize_operator(args[1]), args[2]))
        else:
            msg = f"Searched CASE when() takes 1 to 3 arguments ({len(args)} given)"
            raise ValidationError(msg)
        return self

    def then(self, value: Any) -> Self:
        """Set the result of the most recent ``when``.

        Raises:
            ValidationError: If there is no ``when`` waiting for a result.
        """
        if not self._pending:
            msg = "then() must directly follow when()"
            raise ValidationError(msg)
        self._branches[-1].result = value
        self._branches[-1].has_result = True
        return self

    def else_(self, value: Any) -> Self:
        if self._pending:
            msg = "else_() called before then() of the previous branch"
            raise ValidationError(msg)
        self._else = value
        self._has_else = True
        return self

    def as_(self, alias: str) -> Self:
        if not isinstance(alias, str) or not alias.strip():
            msg = "CASE alias must be a non-empty string"
            raise ValidationError(msg)
        self._alias = alias.strip()
        return self

    @staticmethod
    def _check_column(column: Any) -> str:
        if not isinstance(column, str) or not column.strip():
            msg = f"CASE column must be a non-empty string, got {column!r}"
            raise ValidationError(msg)
        return column.strip()

    def render(self) -> "tuple[str, Bindings]":
        """Render the expression and its bindings.

        Bindings follow the text: each branch's WHEN value then its THEN value,
        then the ELSE value.

        Raises:
            ValidationError: If there are no complete branches.
            SQLBuilderError: If SQL generation fails.
        """
        if not self._branches:
            msg = "CASE requires at least one when()/then() pair"
            raise ValidationError(msg)
        if self._pending:
            msg = "CASE has a when() without then()"
            raise ValidationError(msg)

        bindings: list[Any] = []

        def bind(value: Any) -> exp.Placeholder:
            bindings.append(value)
            return exp.Placeholder()

        ifs = []
        for branch in self._branches:
            condition: exp.Expression
            if branch.raw is not None:
                condition = exp.var(branch.raw)
            elif branch.column is None:
                condition = bind(branch.value)
            else:
                condition = comparison_expression(
                    branch.operator or "=", parse_column_expression(branch.column), bind(branch.value)
                )
            ifs.append(exp.If(this=condition, true=bind(branch.result)))

        case = exp.Case(
            this=parse_column_expression(self._subject) if self._subject else None,
            ifs=ifs,
            default=bind(self._else) if self._has_else else None,
        )
        node: exp.Expression = exp.alias_(case, self._alias) if self._alias else case
        try:
            return node.sql(), tuple(bindings)
        except Exception as e:
            msg = f"Failed to render CASE expression: {e}"
            raise SQLBuilderError(msg) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(subject={self._subject!r}, branches={len(self._branches)})"
