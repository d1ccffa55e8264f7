"""
SQLAlchemy implementation of the repository contracts.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .. import models
from .base import ListQuery, OwnedRepository, Repositories, UserRepository


class SqlOwnedRepository(OwnedRepository):
    """Owner-scoped CRUD over a single ORM model."""

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _filtered(self, owner_id: int, query: Optional[ListQuery]):
        q = self.db.query(self.model).filter(self.model.user_id == owner_id)
        if query is None:
            return q
        for name, value in query.equals.items():
            q = q.filter(getattr(self.model, name) == value)
        if query.date_field:
            column = getattr(self.model, query.date_field)
            if query.start is not None:
                q = q.filter(column >= query.start)
            if query.end is not None:
                q = q.filter(column <= query.end)
        return q

    def get(self, owner_id: int, record_id: int):
        return (
            self.db.query(self.model)
            .filter(self.model.id == record_id, self.model.user_id == owner_id)
            .first()
        )

    def list(self, owner_id: int, query: Optional[ListQuery] = None) -> List:
        q = self._filtered(owner_id, query)
        if query is not None:
            for name, descending in query.order_by:
                column = getattr(self.model, name)
                q = q.order_by(column.desc() if descending else column.asc())
            if query.offset:
                q = q.offset(query.offset)
            if query.limit is not None:
                q = q.limit(query.limit)
        return q.all()

    def count(self, owner_id: int, query: Optional[ListQuery] = None) -> int:
        return self._filtered(owner_id, query).count()

    def create(self, owner_id: int, data: Dict[str, Any]):
        record = self.model(**data, user_id=owner_id)
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update(self, owner_id: int, record_id: int, data: Dict[str, Any]):
        record = self.get(owner_id, record_id)
        if record is None:
            return None
        for name, value in data.items():
            setattr(record, name, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, owner_id: int, record_id: int) -> bool:
        record = self.get(owner_id, record_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.commit()
        return True


class SqlUserRepository(UserRepository):

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int):
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def get_by_email(self, email: str):
        return self.db.query(models.User).filter(models.User.email == email).first()

    def create(self, data: Dict[str, Any]):
        user = models.User(**data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user_id: int, data: Dict[str, Any]):
        user = self.get(user_id)
        if user is None:
            return None
        for name, value in data.items():
            setattr(user, name, value)
        self.db.commit()
        self.db.refresh(user)
        return user


def sql_repositories(db: Session) -> Repositories:
    """Builds the repository set bound to one database session."""
    return Repositories(
        users=SqlUserRepository(db),
        workouts=SqlOwnedRepository(db, models.Workout),
        meals=SqlOwnedRepository(db, models.Meal),
        progress=SqlOwnedRepository(db, models.Progress),
        reminders=SqlOwnedRepository(db, models.Reminder),
    )
