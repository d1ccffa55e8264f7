"""
SQLAlchemy engine, session factory and declarative base for the SQL backend.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .core.config import settings

IN_MEMORY_SQLITE = ("sqlite://", "sqlite:///:memory:")


def build_engine(url: str):
    """
    Creates the engine for `url`.

    SQLite connections are shared across FastAPI's worker threads, and a pure
    in-memory SQLite database has to live on a single connection.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    sqlite_args = {"check_same_thread": False}
    if url in IN_MEMORY_SQLITE:
        return create_engine(url, connect_args=sqlite_args, poolclass=StaticPool)
    return create_engine(url, connect_args=sqlite_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Every ORM model in models.py derives from this
Base = declarative_base()


def get_db():
    """
    Yields a session bound to the current request.

    The session is closed once the response is sent, whether or not the
    endpoint raised.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
