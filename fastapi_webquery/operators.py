# fastapi_webquery/operators.py

from collections.abc import Sequence
from typing import Any

from sqlalchemy import literal_column, or_
from sqlalchemy.sql import ColumnElement

# Pseudo-symbols accepted by StringFilter: the SQL operator they render as and
# how the bound value is wrapped in wildcards.
LIKE_SYMBOLS = {
    "LIKE": ("LIKE", "%{}%"),
    "LIKER": ("LIKE", "{}%"),
    "LIKEL": ("LIKE", "%{}"),
}

# Symbols that take one placeholder per element of a sequence value.
SEQUENCE_OPERATORS = {
    "IN": lambda col, v: col.in_(v),
    "NOT IN": lambda col, v: col.not_in(v),
}


def normalize_symbol(symbol: str) -> str:
    return " ".join(symbol.split()).upper()


def wrap_like(symbol: str, value: str) -> str:
    if not value or symbol not in LIKE_SYMBOLS:
        return value
    return LIKE_SYMBOLS[symbol][1].format(value)


def sql_operator(symbol: str) -> str:
    if symbol in LIKE_SYMBOLS:
        return LIKE_SYMBOLS[symbol][0]
    return symbol


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def compare(field: str, symbol: str, value: Any) -> ColumnElement[bool]:
    """Build ``field SYMBOL ?`` with ``value`` as a bound parameter."""
    column = literal_column(field)
    if _is_sequence(value) and symbol in SEQUENCE_OPERATORS:
        return SEQUENCE_OPERATORS[symbol](column, list(value))
    return column.op(sql_operator(symbol), is_comparison=True)(value)


def build_predicate(fields: list[str], symbol: str, value: Any) -> ColumnElement[bool]:
    """One comparison per field, OR-ed together when there is more than one."""
    clauses = [compare(field, symbol, value) for field in fields]
    if len(clauses) == 1:
        return clauses[0]
    return or_(*clauses)
