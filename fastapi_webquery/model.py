# fastapi_webquery/model.py

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Mapper, Session

from .log import get_logger
from .query import Query

logger = get_logger(__name__)


class Model:
    """
    Runs a parsed ``Query`` against ``entity`` through ``session``.

    ``entity`` is whatever ``select()`` accepts: a mapped class (rows come
    back as instances), a ``Table`` or a column list (rows come back as
    ``Row`` tuples).
    """

    def __init__(self, session: Session, entity: Any):
        self.session = session
        self.entity = entity
        self._scalars = isinstance(inspect(entity, raiseerr=False), Mapper)

    def select(self) -> Select:
        if isinstance(self.entity, (list, tuple)):
            return select(*self.entity)
        return select(self.entity)

    def list(self, query: Query) -> list[Any]:
        return self._fetch(query.bind(self.select()))

    def list_and_count(self, query: Query) -> tuple[list[Any], int]:
        stmt = query.bind_filter(self.select())
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        count = self.session.execute(count_stmt).scalar_one()
        logger.debug("Counted %d rows for %r", count, self.entity)

        stmt = query.bind_page(stmt)
        stmt = query.bind_sort(stmt)
        return self._fetch(stmt), count

    def _fetch(self, stmt: Select) -> list[Any]:
        try:
            result = self.session.execute(stmt)
            rows = result.scalars().all() if self._scalars else result.all()
        except NoResultFound:
            return []
        logger.debug("Fetched %d rows for %r", len(rows), self.entity)
        return list(rows)
