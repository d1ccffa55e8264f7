"""
Defines the SQLAlchemy ORM models for the database.

Each class in this file represents a table in the database and its columns.
Records reference their owner through `user_id` only; there are no
relationship collections, every lookup is an owner-filtered query.

Derived columns (meal totals, workout calories, BMI, next trigger) are
written explicitly by the routes through the functions in `services/`.
"""

from sqlalchemy import Column, Integer, String, Float, JSON, ForeignKey, Boolean, DateTime, Text, func
from .database import Base
from .database_types import EncryptedJSON


class User(Base):
    """
    Represents the 'users' table in the database.
    """
    __tablename__ = "users"

    # Core user identification fields
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String(50), nullable=False)
    avatar = Column(String, default="")

    # Basic profile information
    height_cm = Column(Float, default=0)
    weight_kg = Column(Float, default=0)
    age = Column(Integer, default=0)
    gender = Column(String, default="other")
    activity_level = Column(String, default="moderate")
    goal_weight_kg = Column(Float, default=0)
    fitness_goal = Column(String, default="maintain")

    # UI preferences: notifications, dark_mode, units
    settings = Column(JSON, nullable=True)

    # Identifier of the user at the wearable provider, set once a device is authorized
    terra_user_id = Column(String, index=True, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    @property
    def profile(self) -> dict:
        """The profile columns grouped the way the API exposes them."""
        return {
            "height": self.height_cm or 0,
            "weight": self.weight_kg or 0,
            "age": self.age or 0,
            "gender": self.gender or "other",
            "activity_level": self.activity_level or "moderate",
            "goal_weight": self.goal_weight_kg or 0,
            "fitness_goal": self.fitness_goal or "maintain",
        }


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(100), nullable=False)
    type = Column(String, default="mixed", index=True)
    exercises = Column(JSON, default=list)
    duration = Column(Integer, default=0)  # minutes
    total_calories_burned = Column(Float, default=0)
    intensity = Column(String, default="moderate")
    mood = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    is_completed = Column(Boolean, default=True)
    scheduled_for = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, index=True)

    # Device sync metadata
    source = Column(String, default="manual", index=True)
    source_device = Column(String, nullable=True)
    heart_rate_avg = Column(Float, nullable=True)
    heart_rate_max = Column(Float, nullable=True)
    distance = Column(Float, nullable=True)  # meters
    steps = Column(Integer, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # breakfast / lunch / dinner / snack
    foods = Column(JSON, default=list)
    total_nutrition = Column(JSON, nullable=True)
    date = Column(DateTime, index=True)
    time = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    is_favorite = Column(Boolean, default=False)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Progress(Base):
    """Represents the 'progress' table: one body check-in per row."""
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    date = Column(DateTime, index=True, nullable=False)
    weight = Column(Float, nullable=False)  # kg

    # Tape measurements are sensitive, so they are encrypted at rest
    body_measurements = Column(EncryptedJSON, nullable=True)

    body_fat_percentage = Column(Float, default=0)
    bmi = Column(Float, default=0)
    muscle_mass = Column(Float, default=0)
    water_percentage = Column(Float, default=0)
    notes = Column(Text, nullable=True)
    photo_url = Column(String, nullable=True)
    energy_level = Column(Integer, default=5)
    sleep_hours = Column(Float, default=0)
    sleep_quality = Column(String, default="good")

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, default="custom")
    time = Column(String(5), nullable=False)  # "HH:MM"
    days = Column(JSON, default=list)  # weekday names, empty means every day
    is_recurring = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True, index=True)
    sound = Column(String, default="default")
    last_triggered = Column(DateTime, nullable=True)
    next_trigger = Column(DateTime, nullable=True, index=True)
    icon = Column(String, default="🔔")
    color = Column(String, default="#6366f1")

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
