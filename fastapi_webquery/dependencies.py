# fastapi_webquery/dependencies.py

from typing import Any, Callable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .exceptions import FilterParseError
from .model import Model
from .params import RequestParams
from .query import Query


def WebQuery(factory: Callable[[], Query]):
    """Depends() yielding a freshly parsed ``Query`` for every request."""
    def wrapper(request: Request) -> Query:
        query = factory()
        try:
            query.parse(RequestParams(request))
        except FilterParseError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return query
    return Depends(wrapper)


def ListModel(entity: Any, get_db: Callable[[], Session]):
    def wrapper(db: Session = Depends(get_db)) -> Model:
        return Model(db, entity)
    return Depends(wrapper)
