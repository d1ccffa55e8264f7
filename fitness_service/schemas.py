"""
Defines Pydantic schemas for API data validation and serialization.

These schemas determine the shape of the data for API requests and responses,
ensuring that data is valid and formatted correctly. JSON keys are camelCase;
request bodies may also use the snake_case field names.
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils.dates import to_naive

# Timestamps are normalized to naive local time before they reach storage
LocalDatetime = Annotated[datetime, AfterValidator(to_naive)]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, ORM reads, enums stored as plain strings."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


# --- Enums ---

class WorkoutType(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    HIIT = "hiit"
    YOGA = "yoga"
    MIXED = "mixed"
    SPORTS = "sports"
    OTHER = "other"


class ExerciseCategory(str, Enum):
    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    SPORTS = "sports"


class Intensity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class MoodLevel(str, Enum):
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    TIRED = "tired"
    EXHAUSTED = "exhausted"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodUnit(str, Enum):
    GRAM = "g"
    MILLILITER = "ml"
    OUNCE = "oz"
    CUP = "cup"
    PIECE = "piece"
    SERVING = "serving"


class SleepQuality(str, Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class ReminderType(str, Enum):
    WORKOUT = "workout"
    MEAL = "meal"
    WATER = "water"
    SLEEP = "sleep"
    MEDICATION = "medication"
    WEIGHT_CHECK = "weight_check"
    CUSTOM = "custom"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class ReminderSound(str, Enum):
    DEFAULT = "default"
    GENTLE = "gentle"
    ENERGETIC = "energetic"
    SILENT = "silent"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class FitnessGoal(str, Enum):
    LOSE_WEIGHT = "lose_weight"
    MAINTAIN = "maintain"
    GAIN_MUSCLE = "gain_muscle"
    IMPROVE_FITNESS = "improve_fitness"


class Units(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class StatsPeriod(str, Enum):
    """Calendar-relative periods for workout and nutrition stats."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class AnalyticsWindow(str, Enum):
    """Fixed-length windows for progress analytics."""
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "3months"
    YEAR = "year"


# --- Generic Envelopes ---

class Envelope(CamelModel, Generic[DataT]):
    """Standard success envelope."""
    success: bool = True
    data: DataT


class Page(CamelModel, Generic[DataT]):
    """Envelope for paginated list endpoints."""
    success: bool = True
    count: int
    total: int
    total_pages: int
    current_page: int
    data: List[DataT]


class ListEnvelope(CamelModel, Generic[DataT]):
    """Envelope for unpaginated lists."""
    success: bool = True
    count: int
    data: List[DataT]


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    mode: str
    timestamp: datetime


# --- Users & Authentication ---

class UserCreate(CamelModel):
    """Schema for validating new user registration data."""
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(CamelModel):
    """Schema for validating user login credentials."""
    email: EmailStr
    password: str


class ProfileData(CamelModel):
    height: float = 0  # cm
    weight: float = 0  # kg
    age: int = 0
    gender: Gender = Gender.OTHER
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    goal_weight: float = 0
    fitness_goal: FitnessGoal = FitnessGoal.MAINTAIN


class ProfilePatch(CamelModel):
    """Partial profile update; omitted fields keep their stored values."""
    height: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    age: Optional[int] = Field(None, ge=0, le=130)
    gender: Optional[Gender] = None
    activity_level: Optional[ActivityLevel] = None
    goal_weight: Optional[float] = Field(None, ge=0)
    fitness_goal: Optional[FitnessGoal] = None


class UserSettings(CamelModel):
    notifications: bool = True
    dark_mode: bool = True
    units: Units = Units.METRIC


class SettingsPatch(CamelModel):
    notifications: Optional[bool] = None
    dark_mode: Optional[bool] = None
    units: Optional[Units] = None


class UserProfileUpdate(CamelModel):
    """Schema for validating incoming user profile update data."""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    profile: Optional[ProfilePatch] = None
    settings: Optional[SettingsPatch] = None


class PasswordUpdate(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserResponse(CamelModel):
    """Schema for formatting user data in API responses (excludes sensitive info)."""
    id: int
    name: str
    email: str
    avatar: Optional[str] = ""
    profile: ProfileData
    settings: UserSettings = Field(default_factory=UserSettings)
    device_connected: bool = False
    created_at: Optional[datetime] = None

    @field_validator("settings", mode="before")
    @classmethod
    def default_settings(cls, value):
        return value if value is not None else {}


class AuthResponse(CamelModel):
    """Token plus the authenticated user's public data."""
    success: bool = True
    token: str
    data: UserResponse


# --- Workouts ---

class Exercise(CamelModel):
    name: str = Field(..., min_length=1)
    category: ExerciseCategory
    sets: int = Field(0, ge=0)
    reps: int = Field(0, ge=0)
    weight: float = Field(0, ge=0)  # kg
    duration: float = Field(0, ge=0)  # minutes
    distance: float = Field(0, ge=0)  # km
    calories_burned: float = Field(0, ge=0)
    notes: Optional[str] = None


class Mood(CamelModel):
    before: MoodLevel = MoodLevel.OKAY
    after: MoodLevel = MoodLevel.GREAT


class WorkoutCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    type: WorkoutType = WorkoutType.MIXED
    exercises: List[Exercise] = Field(default_factory=list)
    duration: int = Field(0, ge=0)
    total_calories_burned: float = Field(0, ge=0)
    intensity: Intensity = Intensity.MODERATE
    mood: Mood = Field(default_factory=Mood)
    notes: Optional[str] = None
    is_completed: bool = True
    scheduled_for: Optional[LocalDatetime] = None
    completed_at: Optional[LocalDatetime] = None


class WorkoutUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[WorkoutType] = None
    exercises: Optional[List[Exercise]] = None
    duration: Optional[int] = Field(None, ge=0)
    total_calories_burned: Optional[float] = Field(None, ge=0)
    intensity: Optional[Intensity] = None
    mood: Optional[Mood] = None
    notes: Optional[str] = None
    is_completed: Optional[bool] = None
    scheduled_for: Optional[LocalDatetime] = None
    completed_at: Optional[LocalDatetime] = None


class WorkoutResponse(CamelModel):
    id: int
    user_id: int
    title: str
    type: WorkoutType
    exercises: List[Exercise] = Field(default_factory=list)
    duration: int = 0
    total_calories_burned: float = 0
    intensity: Intensity
    mood: Optional[Mood] = None
    notes: Optional[str] = None
    is_completed: bool = True
    scheduled_for: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    source: str = "manual"
    source_device: Optional[str] = None
    heart_rate_avg: Optional[float] = None
    heart_rate_max: Optional[float] = None
    distance: Optional[float] = None
    steps: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("exercises", mode="before")
    @classmethod
    def default_exercises(cls, value):
        return value if value is not None else []


class WorkoutSummary(CamelModel):
    total_workouts: int = 0
    total_duration: float = 0
    total_calories: float = 0
    avg_duration: float = 0


class TypeCount(CamelModel):
    type: str
    count: int


class WorkoutStats(CamelModel):
    period: StatsPeriod
    summary: WorkoutSummary
    by_type: List[TypeCount]


# --- Meals ---

class FoodItem(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(1, ge=0)
    unit: FoodUnit = FoodUnit.SERVING
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)  # grams
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    fiber: float = Field(0, ge=0)
    sugar: float = Field(0, ge=0)


class NutritionTotals(CamelModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0


class MealCreate(CamelModel):
    name: str = Field(..., min_length=1)
    type: MealType
    foods: List[FoodItem] = Field(default_factory=list)
    date: Optional[LocalDatetime] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    notes: Optional[str] = None
    is_favorite: bool = False
    image_url: Optional[str] = None


class MealUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[MealType] = None
    foods: Optional[List[FoodItem]] = None
    date: Optional[LocalDatetime] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    notes: Optional[str] = None
    is_favorite: Optional[bool] = None
    image_url: Optional[str] = None


class MealResponse(CamelModel):
    id: int
    user_id: int
    name: str
    type: MealType
    foods: List[FoodItem] = Field(default_factory=list)
    total_nutrition: NutritionTotals = Field(default_factory=NutritionTotals)
    date: Optional[datetime] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    is_favorite: bool = False
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("foods", "total_nutrition", mode="before")
    @classmethod
    def default_documents(cls, value, info):
        if value is not None:
            return value
        return [] if info.field_name == "foods" else {}


class DailyMealsResponse(CamelModel):
    success: bool = True
    date: str
    count: int
    daily_totals: NutritionTotals
    data: List[MealResponse]


class DailyNutrition(CamelModel):
    date: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int


class NutritionAverages(CamelModel):
    avg_calories: float = 0
    avg_protein: float = 0
    avg_carbs: float = 0
    avg_fat: float = 0


class NutritionStats(CamelModel):
    period: StatsPeriod
    daily: List[DailyNutrition]
    averages: NutritionAverages


# --- Progress ---

class BodyMeasurements(CamelModel):
    """Tape measurements in centimeters."""
    chest: float = Field(0, ge=0)
    waist: float = Field(0, ge=0)
    hips: float = Field(0, ge=0)
    arms: float = Field(0, ge=0)
    thighs: float = Field(0, ge=0)
    calves: float = Field(0, ge=0)


class ProgressCreate(CamelModel):
    date: Optional[LocalDatetime] = None
    weight: float = Field(..., gt=0)
    body_measurements: BodyMeasurements = Field(default_factory=BodyMeasurements)
    body_fat_percentage: float = Field(0, ge=0, le=100)
    muscle_mass: float = Field(0, ge=0)
    water_percentage: float = Field(0, ge=0, le=100)
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    energy_level: int = Field(5, ge=1, le=10)
    sleep_hours: float = Field(0, ge=0, le=24)
    sleep_quality: SleepQuality = SleepQuality.GOOD


class ProgressUpdate(CamelModel):
    """Fields that can change after a check-in; the date is fixed."""
    weight: Optional[float] = Field(None, gt=0)
    body_measurements: Optional[BodyMeasurements] = None
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=100)
    muscle_mass: Optional[float] = Field(None, ge=0)
    water_percentage: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    energy_level: Optional[int] = Field(None, ge=1, le=10)
    sleep_hours: Optional[float] = Field(None, ge=0, le=24)
    sleep_quality: Optional[SleepQuality] = None


class ProgressResponse(CamelModel):
    id: int
    user_id: int
    date: datetime
    weight: float
    body_measurements: BodyMeasurements = Field(default_factory=BodyMeasurements)
    body_fat_percentage: float = 0
    bmi: float = 0
    muscle_mass: float = 0
    water_percentage: float = 0
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    energy_level: int = 5
    sleep_hours: float = 0
    sleep_quality: SleepQuality = SleepQuality.GOOD
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("body_measurements", mode="before")
    @classmethod
    def default_measurements(cls, value):
        return value if value is not None else {}


class BMIRequest(CamelModel):
    weight: float  # kg
    height: float  # cm


class WeightRange(CamelModel):
    min: float
    max: float


class BMIResult(CamelModel):
    bmi: float
    category: str
    healthy_weight_range: WeightRange
    current_weight: float
    height: float


class TrendPoint(CamelModel):
    """A single data point in a time series (date and value)."""
    date: datetime
    value: Optional[float]


class ProgressSummary(CamelModel):
    start_weight: float
    current_weight: float
    weight_change: float
    start_bmi: float
    current_bmi: float
    bmi_change: float
    entries_count: int
    avg_energy_level: float
    avg_sleep_hours: float


class ProgressAnalytics(CamelModel):
    period: AnalyticsWindow
    weight_trend: List[TrendPoint]
    bmi_trend: List[TrendPoint]
    summary: Optional[ProgressSummary] = None


# --- Reminders ---

class ReminderCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    type: ReminderType = ReminderType.CUSTOM
    time: str = Field(..., pattern=TIME_PATTERN)
    days: List[Weekday] = Field(default_factory=list)
    is_recurring: bool = True
    is_active: bool = True
    sound: ReminderSound = ReminderSound.DEFAULT
    icon: str = "🔔"
    color: str = "#6366f1"


class ReminderUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    type: Optional[ReminderType] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    days: Optional[List[Weekday]] = None
    is_recurring: Optional[bool] = None
    is_active: Optional[bool] = None
    sound: Optional[ReminderSound] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class ReminderResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    type: ReminderType
    time: str
    days: List[Weekday] = Field(default_factory=list)
    is_recurring: bool = True
    is_active: bool = True
    sound: ReminderSound = ReminderSound.DEFAULT
    last_triggered: Optional[datetime] = None
    next_trigger: Optional[datetime] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("days", mode="before")
    @classmethod
    def default_days(cls, value):
        return value if value is not None else []


class TodayReminders(CamelModel):
    success: bool = True
    count: int
    day: Weekday
    data: List[ReminderResponse]


# --- Devices ---

class SyncRequest(CamelModel):
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None


class ConnectResponse(CamelModel):
    success: bool = True
    widget_url: str
    session_id: Optional[str] = None
    message: str


class DevicesResponse(CamelModel):
    success: bool = True
    connected: bool
    devices: List[Dict[str, Any]]
    message: Optional[str] = None


class SyncResponse(CamelModel):
    success: bool = True
    synced: int
    total: int
    workouts: List[WorkoutResponse]
    message: str


class DailySummary(CamelModel):
    steps: int = 0
    distance: float = 0  # meters
    calories_burned: float = 0
    active_minutes: int = 0
    avg_heart_rate: Optional[float] = None
    resting_heart_rate: Optional[float] = None
    stress_level: Optional[float] = None


class DailySummaryResponse(CamelModel):
    success: bool = True
    date: str
    data: Optional[DailySummary] = None


class SleepSummary(CamelModel):
    date: Optional[str] = None
    total_sleep: float = 0  # hours
    deep_sleep: float = 0
    light_sleep: float = 0
    rem_sleep: float = 0
    awake_time: int = 0  # minutes
    sleep_efficiency: Optional[float] = None
    sleep_score: Optional[float] = None


class SleepResponse(CamelModel):
    success: bool = True
    sleep_data: List[SleepSummary]


class WebhookAck(CamelModel):
    success: bool = True
