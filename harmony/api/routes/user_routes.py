"""
User Routes

GET /users - Other users (summary cards)
GET /users/check-username - Username format + availability
GET /users/check-email - Email format + availability
GET /users/check-mobile - Mobile number format (per country) + availability
POST /users/forgot-password - Ask an admin for a password reset
GET /users/{user_id} - Public profile
PATCH /users/{user_id} - Update own profile
POST /users/{user_id}/profile-image - Upload own profile image
GET /users/{user_id}/posts | jobs | communities | companies
GET /users/{user_id}/stats - Profile statistics
"""

import re
from typing import List

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from loguru import logger

from harmony.core.auth import get_current_user, hash_password
from harmony.models import Community, Company, Job, Post, User
from harmony.schemas.schemas import (
    AvailabilityResponse, ForgotPasswordRequest, ForgotPasswordResponse,
    UserPublic, UserStats, UserSummary, UserUpdate,
)
from harmony.storage import IStorage, get_storage
from harmony.utils.file_upload import delete_upload, save_image

router = APIRouter(prefix="/users", tags=["Users"])

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,20}$")

# code -> (name, pattern, min length, max length)
MOBILE_FORMATS = {
    "IN": ("India", re.compile(r"^[6-9]\d{9}$"), 10, 10),
    "US": ("United States", re.compile(r"^\d{10}$"), 10, 10),
    "GB": ("United Kingdom", re.compile(r"^\d{10,11}$"), 10, 11),
    "CA": ("Canada", re.compile(r"^\d{10}$"), 10, 10),
    "AU": ("Australia", re.compile(r"^\d{9}$"), 9, 9),
    "DE": ("Germany", re.compile(r"^\d{10,12}$"), 10, 12),
    "FR": ("France", re.compile(r"^\d{9}$"), 9, 9),
    "JP": ("Japan", re.compile(r"^\d{10,11}$"), 10, 11),
    "BR": ("Brazil", re.compile(r"^\d{10,11}$"), 10, 11),
    "MX": ("Mexico", re.compile(r"^\d{10}$"), 10, 10),
}


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def get_user_or_404(storage: IStorage, user_id: int) -> User:
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def profile_stats(user: User, posts_count: int) -> dict:
    """Derived profile statistics shown on the profile dashboard."""
    profile_views = posts_count * 12 + 30
    strength = sum(20 for present in (
        user.name, user.title, user.bio, user.skills, user.digital_cv_url
    ) if present)
    return {
        "posts_count": posts_count,
        "profile_views": profile_views,
        "search_appearances": profile_views // 2,
        "digital_cv_views": profile_views // 3 if user.digital_cv_url else 0,
        "profile_strength": strength,
    }


@router.get("", response_model=List[UserSummary])
async def list_users(user: User = Depends(get_current_user), storage: IStorage = Depends(get_storage)):
    """All users except the caller."""
    return [u for u in storage.list_users() if u.id != user.id]


@router.get("/check-username", response_model=AvailabilityResponse)
async def check_username(username: str = Query(...), storage: IStorage = Depends(get_storage)):
    if not USERNAME_RE.match(username):
        raise HTTPException(
            status_code=400,
            detail="Username must be 3-20 characters and contain only letters, numbers and underscores"
        )
    exists = storage.get_user_by_username(username) is not None
    return AvailabilityResponse(
        exists=exists,
        message="Username already taken" if exists else "Username available"
    )


@router.get("/check-email", response_model=AvailabilityResponse)
async def check_email(email: str = Query(...), storage: IStorage = Depends(get_storage)):
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")
    exists = storage.get_user_by_email(email) is not None
    return AvailabilityResponse(
        exists=exists,
        message="Email already registered" if exists else "Email available"
    )


@router.get("/check-mobile", response_model=AvailabilityResponse)
async def check_mobile(
    mobile_number: str = Query(...),
    country_code: str = Query(...),
    storage: IStorage = Depends(get_storage)
):
    fmt = MOBILE_FORMATS.get(country_code.upper())
    if fmt is None:
        raise HTTPException(status_code=400, detail="Invalid country code")

    name, pattern, min_len, max_len = fmt
    if not pattern.match(mobile_number):
        raise HTTPException(status_code=400, detail=f"Please enter a valid {name} mobile number")
    if not min_len <= len(mobile_number) <= max_len:
        raise HTTPException(
            status_code=400,
            detail=f"Mobile number must be {min_len}-{max_len} digits for {name}"
        )

    exists = storage.get_user_by_mobile_number(mobile_number) is not None
    return AvailabilityResponse(
        exists=exists,
        message="Mobile number already registered" if exists else "Mobile number available"
    )


@router.post("/forgot-password", response_model=ForgotPasswordResponse, status_code=201)
async def forgot_password(body: ForgotPasswordRequest, storage: IStorage = Depends(get_storage)):
    """Queue a password reset request for an admin to approve."""
    email = body.email.strip()
    if not is_valid_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    user = storage.get_user_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail="No account found with this email address")
    if storage.get_pending_reset_request(user.id):
        raise HTTPException(status_code=400, detail="A password reset request is already pending")

    request = storage.create_password_reset_request(user.id, user.email)
    logger.info(f"Password reset requested for user {user.id}")
    return ForgotPasswordResponse(
        message="Password reset request submitted. An administrator will review it shortly.",
        request_id=request.id
    )


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: int, storage: IStorage = Depends(get_storage)):
    return get_user_or_404(storage, user_id)


@router.patch("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: int,
    body: UserUpdate,
    user: User = Depends(get_current_user),
    storage: IStorage = Depends(get_storage)
):
    """Update own profile. Password changes are re-hashed."""
    if user.id != user_id:
        raise HTTPException(status_code=403, detail="You can only update your own profile")

    changes = body.model_dump(exclude_unset=True)
    if "username" in changes and changes["username"] != user.username:
        if storage.get_user_by_username(changes["username"]):
            raise HTTPException(status_code=400, detail="Username already exists")
    if "email" in changes and changes["email"].lower() != user.email.lower():
        if storage.get_user_by_email(changes["email"]):
            raise HTTPException(status_code=400, detail="Email already exists")
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    return storage.update_user(user_id, changes)


@router.post("/{user_id}/profile-image", response_model=UserPublic)
async def upload_profile_image(
    user_id: int,
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    storage: IStorage = Depends(get_storage)
):
    if user.id != user_id:
        raise HTTPException(status_code=403, detail="You can only update your own profile")

    url = await save_image(file, prefix="profile")
    previous = user.profile_image_url
    updated = storage.update_user(user_id, {"profile_image_url": url})
    delete_upload(previous)
    return updated


@router.get("/{user_id}/posts", response_model=List[Post])
async def user_posts(user_id: int, storage: IStorage = Depends(get_storage)):
    get_user_or_404(storage, user_id)
    return storage.list_posts_by_user(user_id)


@router.get("/{user_id}/jobs", response_model=List[Job])
async def user_jobs(user_id: int, storage: IStorage = Depends(get_storage)):
    get_user_or_404(storage, user_id)
    return storage.list_jobs_by_user(user_id)


@router.get("/{user_id}/communities", response_model=List[Community])
async def user_communities(user_id: int, storage: IStorage = Depends(get_storage)):
    get_user_or_404(storage, user_id)
    return storage.list_user_communities(user_id)


@router.get("/{user_id}/companies", response_model=List[Company])
async def user_companies(user_id: int, storage: IStorage = Depends(get_storage)):
    get_user_or_404(storage, user_id)
    return storage.list_companies_by_owner(user_id)


@router.get("/{user_id}/stats", response_model=UserStats)
async def user_stats(user_id: int, storage: IStorage = Depends(get_storage)):
    user = get_user_or_404(storage, user_id)
    return profile_stats(user, len(storage.list_posts_by_user(user_id)))
