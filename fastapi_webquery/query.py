# fastapi_webquery/query.py

import dataclasses
from collections.abc import Mapping
from typing import Any, Optional

from sqlalchemy import Select, literal_column

from .config import Config
from .core import atoi, sql_anti_inject
from .exceptions import FilterParseError
from .filters import Filter
from .log import get_logger
from .params import ParamSource, as_param_source

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class Sort:
    """Whitelist entry: the external sort ``key`` and the column it orders by."""

    key: str
    field: str = ""


@dataclasses.dataclass(kw_only=True)
class Query:
    """
    Pagination, sorting and filters for one list request.

    Call ``parse`` once with the request parameters, then ``bind`` (or the
    individual ``bind_*`` steps) to apply everything to a ``Select``. Parsing
    mutates the filters, so a ``Query`` must not be shared between requests.
    """

    filters: list[Filter] = dataclasses.field(default_factory=list)
    page: int = 1
    page_size: int = 0
    sorts: list[Sort] = dataclasses.field(default_factory=list)
    config: Optional[Config] = None

    sort: str = dataclasses.field(default="", init=False)

    def parse(self, params: ParamSource | Mapping[str, Any]) -> None:
        params = as_param_source(params)
        self.config = (self.config or Config()).merge()
        self._parse_page(params)
        self._parse_sort(params)
        self._parse_filters(params)

    def _parse_page(self, params: ParamSource) -> None:
        config = self.config
        self.page = max(_to_int(params.query(config.page_param)) or 1, 1)

        page_size = _to_int(params.query(config.page_size_param))
        if page_size is None:
            page_size = config.default_page_size
        self.page_size = max(page_size, 1)
        if config.max_page_size > 0 and self.page_size > config.max_page_size:
            self.page_size = config.max_page_size
        logger.debug("Parsed page=%d page_size=%d", self.page, self.page_size)

    def _parse_sort(self, params: ParamSource) -> None:
        self.sort = params.query(self.config.sort_param).strip()

    def _parse_filters(self, params: ParamSource) -> None:
        for f in self.filters:
            try:
                f.parse(params)
            except FilterParseError as exc:
                logger.warning("Filter %r failed to parse: %s", f.get_key(), exc)
                raise

    def bind(self, stmt: Select) -> Select:
        stmt = self.bind_filter(stmt)
        stmt = self.bind_page(stmt)
        stmt = self.bind_sort(stmt)
        return stmt

    def bind_filter(self, stmt: Select) -> Select:
        for f in self.filters:
            stmt = f.bind(stmt)
        return stmt

    def bind_page(self, stmt: Select) -> Select:
        offset = (self.page - 1) * self.page_size
        return stmt.offset(offset).limit(self.page_size)

    def bind_sort(self, stmt: Select) -> Select:
        if not self.sort:
            return stmt
        for token in self.sort.split(","):
            token = token.strip()
            if not token:
                continue
            descending = token.startswith("-")
            if descending:
                token = token[1:]
            # sql anti-inject, only after the direction prefix is gone
            key = sql_anti_inject(token)

            entry = next((s for s in self.sorts if s.key == key), None)
            if entry is None:
                logger.debug("Dropping sort key %r: not whitelisted", key)
                continue
            column = literal_column(entry.field or key)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        return stmt


def _to_int(raw: str) -> Optional[int]:
    try:
        return atoi(raw)
    except ValueError:
        return None
