"""
Defines all API endpoints related to user authentication and profile management.
"""

from fastapi import APIRouter, Depends, status

from .. import auth, models, schemas
from ..errors import AuthError, ValidationError
from ..repositories.base import Repositories
from ..repositories.provider import get_repositories

router = APIRouter(prefix="/auth", tags=["Authentication"])

DEFAULT_SETTINGS = {"notifications": True, "dark_mode": True, "units": "metric"}

# Maps API profile keys onto User columns
PROFILE_COLUMNS = {
    "height": "height_cm",
    "weight": "weight_kg",
    "age": "age",
    "gender": "gender",
    "activity_level": "activity_level",
    "goal_weight": "goal_weight_kg",
    "fitness_goal": "fitness_goal",
}


def _user_payload(user: models.User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "avatar": user.avatar,
        "profile": user.profile,
        "settings": user.settings,
        "device_connected": bool(user.terra_user_id),
        "created_at": user.created_at,
    }


def _token_response(user: models.User) -> dict:
    """Issues a fresh token for the user along with their public data."""
    token = auth.create_access_token(data={"sub": str(user.id)})
    return {"success": True, "token": token, "data": _user_payload(user)}


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(user: schemas.UserCreate, repos: Repositories = Depends(get_repositories)):
    """
    Registers a new user.

    Args:
        user (schemas.UserCreate): Name, email and password.
        repos (Repositories): The request's repository set.

    Raises:
        ValidationError: 400 if the email is already registered.

    Returns:
        dict: A token plus the new user's public data.
    """
    email = user.email.lower()
    if repos.users.get_by_email(email):
        raise ValidationError("Email already registered")

    # Create a new user with a hashed password
    new_user = repos.users.create({
        "name": user.name,
        "email": email,
        "hashed_password": auth.get_password_hash(user.password),
        "settings": dict(DEFAULT_SETTINGS),
    })
    return _token_response(new_user)


@router.post("/login", response_model=schemas.AuthResponse)
def login(form_data: schemas.UserLogin, repos: Repositories = Depends(get_repositories)):
    """
    Authenticates a user and returns a JWT access token.

    Raises:
        AuthError: 401 if the credentials are incorrect.
    """
    user = repos.users.get_by_email(form_data.email.lower())

    # Verify user existence and password correctness
    if not user or not auth.verify_password(form_data.password, user.hashed_password):
        raise AuthError("Invalid credentials")

    return _token_response(user)


@router.get("/me", response_model=schemas.Envelope[schemas.UserResponse])
def read_users_me(current_user: models.User = Depends(auth.get_current_user)):
    """Retrieves the profile of the currently authenticated user."""
    return {"success": True, "data": _user_payload(current_user)}


@router.put("/profile", response_model=schemas.Envelope[schemas.UserResponse])
def update_user_profile(
    profile_data: schemas.UserProfileUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Updates the name, profile and settings of the current user.

    Profile and settings are merged: keys left out of the request keep their
    stored values.
    """
    update_data = {}
    if profile_data.name:
        update_data["name"] = profile_data.name

    if profile_data.profile is not None:
        for key, value in profile_data.profile.model_dump(exclude_none=True).items():
            update_data[PROFILE_COLUMNS[key]] = value

    if profile_data.settings is not None:
        merged = {**DEFAULT_SETTINGS, **(current_user.settings or {})}
        merged.update(profile_data.settings.model_dump(exclude_none=True))
        update_data["settings"] = merged

    user = repos.users.update(current_user.id, update_data)
    return {"success": True, "data": _user_payload(user)}


@router.put("/password", response_model=schemas.AuthResponse)
def update_password(
    passwords: schemas.PasswordUpdate,
    current_user: models.User = Depends(auth.get_current_user),
    repos: Repositories = Depends(get_repositories),
):
    """
    Changes the current user's password and issues a new token.

    Raises:
        AuthError: 401 if the current password does not match.
    """
    if not auth.verify_password(passwords.current_password, current_user.hashed_password):
        raise AuthError("Current password is incorrect")

    user = repos.users.update(current_user.id, {"hashed_password": auth.get_password_hash(passwords.new_password)})
    return _token_response(user)
