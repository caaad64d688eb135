from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """
    Build the SQLAlchemy engine for the configured database.

    SQLite connections are shared across threads, and an in-memory database is pinned
    to a single connection so every session sees the same tables.
    """
    kwargs = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # Registers the models on Base.metadata before creating tables.
    from signup_auth_svc.models import user  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency yielding one session per request from the app's session factory.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
