"""
In-memory implementation of the repository contracts.

Used for demo mode (STORAGE_BACKEND=memory) and as a test double. Records are
plain ORM instances that are never attached to a session. The store lives in
this process only; running several workers gives each its own copy.
"""

import itertools
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from .. import models
from .base import ListQuery, OwnedRepository, Repositories, UserRepository


def _sort_key(name: str):
    def key(record):
        value = getattr(record, name)
        return (value is None, value if value is not None else 0)
    return key


def _with_column_defaults(model, data: Dict[str, Any]) -> Dict[str, Any]:
    """Fills in client-side column defaults, which only a flush would apply."""
    filled = dict(data)
    for column in model.__table__.columns:
        default = column.default
        if column.key in filled or default is None:
            continue
        if default.is_scalar:
            filled[column.key] = default.arg
        elif default.is_callable:
            filled[column.key] = default.arg(None)
    return filled


class _Collection:
    """A dict of records with its own id sequence."""

    def __init__(self, model):
        self.model = model
        self.records: Dict[int, Any] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, data: Dict[str, Any]):
        with self._lock:
            record_id = next(self._ids)
        now = datetime.now()
        record = self.model(**_with_column_defaults(self.model, data))
        record.id = record_id
        if hasattr(self.model, "created_at"):
            record.created_at = now
        if hasattr(self.model, "updated_at"):
            record.updated_at = now
        self.records[record_id] = record
        return record

    def touch(self, record, data: Dict[str, Any]):
        for name, value in data.items():
            setattr(record, name, value)
        if hasattr(self.model, "updated_at"):
            record.updated_at = datetime.now()
        return record


class InMemoryOwnedRepository(OwnedRepository):

    def __init__(self, collection: _Collection):
        self.collection = collection

    def _matches(self, record, owner_id: int, query: Optional[ListQuery]) -> bool:
        if record.user_id != owner_id:
            return False
        if query is None:
            return True
        for name, value in query.equals.items():
            if getattr(record, name) != value:
                return False
        if query.date_field:
            moment = getattr(record, query.date_field)
            if query.start is not None and (moment is None or moment < query.start):
                return False
            if query.end is not None and (moment is None or moment > query.end):
                return False
        return True

    def get(self, owner_id: int, record_id: int):
        record = self.collection.records.get(record_id)
        if record is None or record.user_id != owner_id:
            return None
        return record

    def list(self, owner_id: int, query: Optional[ListQuery] = None) -> List:
        records = [r for r in self.collection.records.values() if self._matches(r, owner_id, query)]
        if query is None:
            return records
        # Sort by the least significant key first; sorted() is stable
        for name, descending in reversed(list(query.order_by)):
            records = sorted(records, key=_sort_key(name), reverse=descending)
        end = query.offset + query.limit if query.limit is not None else None
        return records[query.offset:end]

    def count(self, owner_id: int, query: Optional[ListQuery] = None) -> int:
        return sum(1 for r in self.collection.records.values() if self._matches(r, owner_id, query))

    def create(self, owner_id: int, data: Dict[str, Any]):
        return self.collection.insert({**data, "user_id": owner_id})

    def update(self, owner_id: int, record_id: int, data: Dict[str, Any]):
        record = self.get(owner_id, record_id)
        if record is None:
            return None
        return self.collection.touch(record, data)

    def delete(self, owner_id: int, record_id: int) -> bool:
        if self.get(owner_id, record_id) is None:
            return False
        del self.collection.records[record_id]
        return True


class InMemoryUserRepository(UserRepository):

    def __init__(self, collection: _Collection):
        self.collection = collection

    def get(self, user_id: int):
        return self.collection.records.get(user_id)

    def get_by_email(self, email: str):
        return next((u for u in self.collection.records.values() if u.email == email), None)

    def create(self, data: Dict[str, Any]):
        return self.collection.insert(data)

    def update(self, user_id: int, data: Dict[str, Any]):
        user = self.get(user_id)
        if user is None:
            return None
        return self.collection.touch(user, data)


class InMemoryStore:
    """All collections of one in-memory database."""

    def __init__(self):
        self.users = _Collection(models.User)
        self.workouts = _Collection(models.Workout)
        self.meals = _Collection(models.Meal)
        self.progress = _Collection(models.Progress)
        self.reminders = _Collection(models.Reminder)

    def repositories(self) -> Repositories:
        return Repositories(
            users=InMemoryUserRepository(self.users),
            workouts=InMemoryOwnedRepository(self.workouts),
            meals=InMemoryOwnedRepository(self.meals),
            progress=InMemoryOwnedRepository(self.progress),
            reminders=InMemoryOwnedRepository(self.reminders),
        )
