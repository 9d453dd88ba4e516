"""Parsing helpers turning user-supplied column and table text into sqlglot nodes.

Plain identifiers take a fast path; anything else goes through sqlglot's
parser. Text sqlglot cannot parse is kept verbatim.
"""

import re
from typing import Union

from sqlglot import exp
from sqlglot.errors import ParseError as SQLGlotParseError

__all__ = ("parse_column_expression", "parse_table_expression")

_IDENTIFIER_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_TABLE_WITH_ALIAS = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)"
    r"(?:\s+(?:AS\s+)?(?P<alias>[A-Za-z_][A-Za-z0-9_]*))?$",
    re.IGNORECASE,
)


def parse_column_expression(column_input: Union[str, exp.Expression]) -> exp.Expression:
    """Parse a column input that might be a complex expression.

    Handles cases like:
    - Simple column names: "name" -> Column(this=name)
    - Qualified names: "users.name" -> Column(table=users, this=name)
    - Aliased columns: "users.name AS author" -> Alias(...)
    - Function calls and literals: "COUNT(*)", "1"

    Args:
        column_input: String or sqlglot expression representing a column/expression

    Returns:
        exp.Expression: Parsed sqlglot expression, or a verbatim ``exp.Var`` for
        text sqlglot cannot parse.
    """
    if isinstance(column_input, exp.Expression):
        return column_input

    text = str(column_input).strip()
    if _IDENTIFIER_PATH.match(text):
        return exp.to_column(text)
    try:
        parsed = exp.maybe_parse(text)
    except SQLGlotParseError:
        return exp.var(text)
    return parsed if parsed is not None else exp.var(text)


def parse_table_expression(table_input: Union[str, exp.Expression]) -> exp.Expression:
    """Parse a table input that may contain an alias.

    Handles cases like:
    - Simple table names: "users" -> Table(this=users)
    - Qualified names: "main.users" -> Table(db=main, this=users)
    - Table with alias: "users u" or "users AS u" -> Table(this=users, alias=u)

    Anything else, such as a parenthesised sub-select, is emitted verbatim.
    """
    if isinstance(table_input, exp.Expression):
        return table_input

    text = str(table_input).strip()
    match = _TABLE_WITH_ALIAS.match(text)
    if match is None:
        return exp.var(text)
    table = exp.to_table(match.group("name"))
    alias = match.group("alias")
    if alias:
        return exp.alias_(table, alias, table=True)
    return table
