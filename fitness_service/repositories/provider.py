"""
FastAPI dependency that hands each request its repository set.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from .base import Repositories
from .memory import InMemoryStore
from .sql import sql_repositories


# Process-wide store for demo mode
demo_store = InMemoryStore()


def get_repositories(db: Session = Depends(get_db)) -> Repositories:
    """
    Returns the repositories for the configured storage backend.

    With STORAGE_BACKEND=memory the per-request session is opened but never
    used; the shared in-memory store answers every call.
    """
    if settings.STORAGE_BACKEND == "memory":
        return demo_store.repositories()
    return sql_repositories(db)
