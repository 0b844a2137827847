# fastapi_webquery/filters.py

"""
Declarative request filters.

Each filter reads one request parameter, converts it to a typed value and
contributes a ``field SYMBOL ?`` predicate to a SQLAlchemy ``Select``. The
variants form a closed set (``FILTER_TYPES``): the binder relies on knowing
whether a variant carries a scalar or a sequence.

A filter holds per-request state once parsed; build a fresh instance for
every request.
"""

import abc
import dataclasses
from collections.abc import Callable
from datetime import datetime
from typing import Any, ClassVar, Optional

from sqlalchemy import Select

from .core import atoi, parse_raw_value, sql_anti_inject
from .exceptions import ValueConversionError
from .operators import build_predicate, normalize_symbol, wrap_like
from .params import ParamSource

ParseFunc = Callable[["Filter", ParamSource], None]
BindFunc = Callable[["Filter", Select], Select]

DEFAULT_SEP = ","
DEFAULT_TIME_LAYOUT = "%Y-%m-%d %H:%M:%S"

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


@dataclasses.dataclass(kw_only=True)
class Filter(abc.ABC):
    key: str
    field: str = ""
    fields: list[str] = dataclasses.field(default_factory=list)
    symbol: str = ""
    value: Any = None
    required: bool = False
    parse_func: Optional[ParseFunc] = None
    bind_func: Optional[BindFunc] = None

    parse_value: Any = dataclasses.field(default=None, init=False)
    _parsed: bool = dataclasses.field(default=False, init=False, repr=False)

    default_symbol: ClassVar[str] = "="

    @property
    def populated(self) -> bool:
        return self._parsed or self.value is not None

    def get_key(self) -> str:
        return self.key

    def get_fields(self) -> list[str]:
        if self.fields:
            return self.fields
        if not self.field:
            self.field = self.key
        self.fields = [self.field]
        return self.fields

    def get_symbol(self) -> str:
        self.symbol = normalize_symbol(self.symbol or self.default_symbol)
        return self.symbol

    def is_required(self) -> bool:
        return self.required

    def get_value(self) -> Any:
        if self.value is not None:
            return self.value
        return self.parse_value

    def set_value(self, value: Any) -> None:
        self.parse_value = value
        self._parsed = True

    def parse(self, params: ParamSource) -> None:
        if self.parse_func is not None:
            self.parse_func(self, params)
            return
        raw = parse_raw_value(self.key, self.required, params)
        if raw:
            self.set_value(self.convert(raw))

    @abc.abstractmethod
    def convert(self, raw: str) -> Any: ...

    def bind(self, stmt: Select) -> Select:
        if not self.populated:
            return stmt
        if self.bind_func is not None:
            return self.bind_func(self, stmt)
        return stmt.where(build_predicate(self.get_fields(), self.get_symbol(), self.get_value()))


@dataclasses.dataclass(kw_only=True)
class StringFilter(Filter):
    """Matches a sanitized string; ``LIKE``, ``LIKER`` and ``LIKEL`` add wildcards."""

    parse_value: str = dataclasses.field(default="", init=False)

    def get_value(self) -> str:
        value = self.value or self.parse_value
        if not value:
            return ""
        return wrap_like(self.get_symbol(), value)

    def convert(self, raw: str) -> str:
        return sql_anti_inject(raw)


@dataclasses.dataclass(kw_only=True)
class StringArrayFilter(Filter):
    sep: str = ""
    parse_value: list[str] = dataclasses.field(default_factory=list, init=False)

    default_symbol: ClassVar[str] = "IN"

    def get_sep(self) -> str:
        if not self.sep:
            self.sep = DEFAULT_SEP
        return self.sep

    def convert(self, raw: str) -> list[str]:
        return [part.strip() for part in sql_anti_inject(raw).split(self.get_sep())]


@dataclasses.dataclass(kw_only=True)
class IntFilter(Filter):
    parse_value: int = dataclasses.field(default=0, init=False)

    def convert(self, raw: str) -> int:
        return _to_int(self.key, raw)


@dataclasses.dataclass(kw_only=True)
class IntArrayFilter(Filter):
    sep: str = ""
    parse_value: list[int] = dataclasses.field(default_factory=list, init=False)

    default_symbol: ClassVar[str] = "IN"

    def get_sep(self) -> str:
        if not self.sep:
            self.sep = DEFAULT_SEP
        return self.sep

    def convert(self, raw: str) -> list[int]:
        return [_to_int(self.key, part) for part in raw.split(self.get_sep())]

    def append_value(self, value: int) -> None:
        self.parse_value.append(value)
        self._parsed = True

    def parse(self, params: ParamSource) -> None:
        if self.parse_func is not None:
            self.parse_func(self, params)
            return
        raw = parse_raw_value(self.key, self.required, params)
        if not raw:
            return
        # Convert everything before touching state so a bad piece leaves
        # the filter unpopulated.
        for value in self.convert(raw):
            self.append_value(value)


@dataclasses.dataclass(kw_only=True)
class BoolFilter(Filter):
    parse_value: bool = dataclasses.field(default=False, init=False)

    def convert(self, raw: str) -> bool:
        if raw in _TRUE_LITERALS:
            return True
        if raw in _FALSE_LITERALS:
            return False
        raise ValueConversionError(self.key, "bool", raw)


@dataclasses.dataclass(kw_only=True)
class TimeFilter(Filter):
    """Parses ``layout`` (strptime syntax) in the local timezone."""

    layout: str = ""
    parse_value: Optional[datetime] = dataclasses.field(default=None, init=False)

    def get_layout(self) -> str:
        if not self.layout:
            self.layout = DEFAULT_TIME_LAYOUT
        return self.layout

    def convert(self, raw: str) -> datetime:
        try:
            return datetime.strptime(raw, self.get_layout()).astimezone()
        except ValueError:
            raise ValueConversionError(self.key, "time", raw) from None


def _to_int(key: str, raw: str) -> int:
    try:
        return atoi(raw)
    except ValueError:
        raise ValueConversionError(key, "int", raw) from None


FILTER_TYPES = (
    StringFilter,
    StringArrayFilter,
    IntFilter,
    IntArrayFilter,
    BoolFilter,
    TimeFilter,
)
