"""Shared fixtures: an in-memory SQLite store with a seeded ``items`` table."""

from __future__ import annotations

import pytest
from sqlalchemy import String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.sql.elements import BooleanClauseList, Grouping

from fastapi_webquery.config import get_default_config, get_settings


class Base(DeclarativeBase):
    pass


class Item(Base):
    __tablename__ = "items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(20))
    score: Mapped[int] = mapped_column()


def _status(i: int) -> str:
    return "inactive" if i % 6 == 0 else "active"


# ids 1..30, every sixth row inactive -> 25 active rows
ITEMS = [
    {"id": i, "name": f"item{i:02d}", "status": _status(i), "score": i * 10}
    for i in range(1, 31)
]
ACTIVE_IDS = [row["id"] for row in ITEMS if row["status"] == "active"]


@pytest.fixture()
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        s.add_all(Item(**row) for row in ITEMS)
        s.commit()
        yield s
    engine.dispose()


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    get_default_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_config.cache_clear()


def unwrap(clause):
    while isinstance(clause, Grouping):
        clause = clause.element
    return clause


def describe(clause) -> tuple[str, str]:
    """``(column, operator)`` of a single ``column OP ?`` comparison."""
    clause = unwrap(clause)
    return clause.left.name, clause.operator.opstring


def conditions(clause, operator) -> list:
    """Terms of a flat AND / OR, asserting the conjunction used."""
    clause = unwrap(clause)
    assert isinstance(clause, BooleanClauseList)
    assert clause.operator is operator
    return list(clause.clauses)
