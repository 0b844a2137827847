# fastapi_webquery/core.py

import re

from .exceptions import EmptyKeyError, RequiredValueMissingError
from .params import ParamSource

# Stripped from every filter value and sort key before it reaches a query.
SQL_ANTI_INJECT_CHARS = ("%", "#", "-", "'", '"', "/", "*")

_INT_RE = re.compile(r"[+-]?[0-9]+")


def sql_anti_inject(value: str) -> str:
    """Remove SQL metacharacters from untrusted input and trim whitespace."""
    for char in SQL_ANTI_INJECT_CHARS:
        value = value.replace(char, "")
    return value.strip()


def parse_raw_value(key: str, required: bool, params: ParamSource) -> str:
    """
    Read the raw value for ``key``.

    Returns the trimmed value, or ``""`` when the parameter is absent and not
    required.

    Raises:
        EmptyKeyError: ``key`` is empty
        RequiredValueMissingError: the parameter is absent and ``required``
    """
    if not key:
        raise EmptyKeyError()
    value = params.query(key).strip()
    if not value:
        if required:
            raise RequiredValueMissingError(key)
        return ""
    return value


def atoi(raw: str) -> int:
    """Base-10 integer with an optional sign; no whitespace or underscores."""
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"invalid integer literal: {raw!r}")
    return int(raw)
