"""
Persistence contracts shared by the SQL store and the in-memory store.

Every workout, meal, progress entry and reminder belongs to exactly one user,
so each operation on those collections takes the owner's id and only ever
sees that owner's records. A record that exists but belongs to someone else
behaves exactly like a record that does not exist.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass
class ListQuery:
    """
    Filtering, ordering and paging options for a list call.

    Attributes:
        equals: Column name to required value.
        date_field: Column that `start`/`end` apply to (inclusive bounds).
        order_by: (column, descending) pairs, most significant first.
        offset / limit: Paging window applied after ordering.
    """
    equals: Dict[str, Any] = field(default_factory=dict)
    date_field: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    order_by: Sequence[Tuple[str, bool]] = ()
    offset: int = 0
    limit: Optional[int] = None


class OwnedRepository(ABC):
    """CRUD over one collection of user-owned records."""

    @abstractmethod
    def get(self, owner_id: int, record_id: int):
        """Returns the record, or None if it is missing or not owned by `owner_id`."""

    @abstractmethod
    def list(self, owner_id: int, query: Optional[ListQuery] = None) -> List:
        """Returns the owner's records matching the query."""

    @abstractmethod
    def count(self, owner_id: int, query: Optional[ListQuery] = None) -> int:
        """Counts matching records, ignoring ordering and paging."""

    @abstractmethod
    def create(self, owner_id: int, data: Dict[str, Any]):
        """Stores a new record for the owner and returns it."""

    @abstractmethod
    def update(self, owner_id: int, record_id: int, data: Dict[str, Any]):
        """Applies the given fields and returns the record, or None if not found."""

    @abstractmethod
    def delete(self, owner_id: int, record_id: int) -> bool:
        """Deletes the record; False if it was not found."""


class UserRepository(ABC):
    """Account storage. Users are never deleted."""

    @abstractmethod
    def get(self, user_id: int):
        pass

    @abstractmethod
    def get_by_email(self, email: str):
        pass

    @abstractmethod
    def create(self, data: Dict[str, Any]):
        pass

    @abstractmethod
    def update(self, user_id: int, data: Dict[str, Any]):
        pass


@dataclass
class Repositories:
    """The full set of stores a request works with."""
    users: UserRepository
    workouts: OwnedRepository
    meals: OwnedRepository
    progress: OwnedRepository
    reminders: OwnedRepository
