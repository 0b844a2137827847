from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Depends
import sqlalchemy
from sqlalchemy import String, ForeignKey, create_engine, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from fastapi_webquery.dependencies import ListModel, WebQuery
from fastapi_webquery.filters import BoolFilter, IntArrayFilter, IntFilter, StringArrayFilter, StringFilter, TimeFilter
from fastapi_webquery.model import Model
from fastapi_webquery.query import Query, Sort
from examples.schemas import StatusEnum, UserPage, UserResponse

# ───── App & DB Setup ───────────────────────────

DATABASE_URL = "sqlite://"

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
Base = declarative_base()


def get_db():
    with SessionLocal() as session:
        yield session


# ───── Models ────────────────────────────────────

class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    users: Mapped[list["User"]] = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    role_id: Mapped[int] = mapped_column(ForeignKey("roles.id"))
    age: Mapped[int] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    status: Mapped[StatusEnum] = mapped_column(
        sqlalchemy.Enum(StatusEnum, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=StatusEnum.ACTIVE,
        nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.now)

    role: Mapped["Role"] = relationship("Role", back_populates="users", lazy="selectin")


# ───── Query declarations ────────────────────────
# Built per request: filters hold parsed state.

def user_query() -> Query:
    return Query(
        filters=[
            StringFilter(key="q", fields=["name", "email"], symbol="like"),
            StringArrayFilter(key="status"),
            IntFilter(key="minAge", field="age", symbol=">="),
            IntArrayFilter(key="role", field="role_id"),
            BoolFilter(key="active", field="is_active"),
            TimeFilter(key="createdAfter", field="created_at", symbol=">="),
        ],
        sorts=[
            Sort(key="id"),
            Sort(key="name"),
            Sort(key="age"),
            Sort(key="created", field="created_at"),
        ],
    )


# ───── Lifespan / Seed Data ─────────────────────

def seed(session: Session) -> None:
    if session.execute(select(Role)).scalars().first():
        return
    admin = Role(name="admin")
    user = Role(name="user")
    manager = Role(name="manager")
    session.add_all([admin, user, manager])
    session.add_all([
        User(name="Alice", email="alice@example.com", role=admin,
             status=StatusEnum.ACTIVE, age=30, is_active=True),
        User(name="Bob", email="bob@example.com", role=user,
             status=StatusEnum.INACTIVE, age=25, is_active=False),
        User(name="Carol", email="carol@example.com", role=manager,
             status=StatusEnum.SUSPENDED, age=40, is_active=False),
        User(name="Dave", email="dave@example.com", role=admin,
             status=StatusEnum.ACTIVE, age=35, is_active=True),
        User(name="Eve", email="eve@example.com", role=user,
             status=StatusEnum.ACTIVE, age=28, is_active=True),
    ])
    session.commit()


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(engine)
    with SessionLocal() as session:
        seed(session)
    yield

# ───── FastAPI App ───────────────────────────────

app = FastAPI(lifespan=lifespan)


@app.get("/users", response_model=list[UserResponse])
def get_users(query: Query = WebQuery(user_query), users: Model = ListModel(User, get_db)):
    return users.list(query)


@app.get("/users/paginated", response_model=UserPage)
def get_users_paginated(query: Query = WebQuery(user_query), users: Model = ListModel(User, get_db)):
    items, total = users.list_and_count(query)
    return UserPage(items=items, total=total, page=query.page, page_size=query.page_size)


# ───── Run Server ────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("examples.main:app", host="0.0.0.0", port=8000, reload=True)
