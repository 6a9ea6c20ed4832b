"""
Authentication Utility - password hashing and cookie sessions.

Provides:
- Password hashing with bcrypt
- Session login/logout helpers (SessionMiddleware signed cookie)
- FastAPI dependencies for protected routes
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from passlib.context import CryptContext

from harmony.models import User
from harmony.storage import IStorage, get_storage

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

USER_SESSION_KEY = "user_id"
ADMIN_SESSION_KEY = "admin_id"


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def login_user(request: Request, user: User) -> None:
    request.session[USER_SESSION_KEY] = user.id


def logout_user(request: Request) -> None:
    request.session.pop(USER_SESSION_KEY, None)


def login_admin(request: Request, user: User) -> None:
    request.session[ADMIN_SESSION_KEY] = user.id


def logout_admin(request: Request) -> None:
    request.session.pop(ADMIN_SESSION_KEY, None)


def authenticate(storage: IStorage, identifier: str, password: str) -> Optional[User]:
    """Look up a user by username or email and check the password."""
    user = storage.get_user_by_username(identifier)
    if user is None and "@" in identifier:
        user = storage.get_user_by_email(identifier)
    if user is None or not verify_password(password, user.password):
        return None
    return user


async def get_optional_user(request: Request, storage: IStorage = Depends(get_storage)) -> Optional[User]:
    """FastAPI dependency - current user or None."""
    user_id = request.session.get(USER_SESSION_KEY)
    if user_id is None:
        return None
    user = storage.get_user(user_id)
    if user is None:
        # Session points at a deleted account
        logout_user(request)
    return user


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)):
            return user
    """
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


async def get_current_recruiter(user: User = Depends(get_current_user)) -> User:
    """Dependency - Require recruiter flag."""
    if not user.is_recruiter:
        raise HTTPException(status_code=403, detail="Recruiters only")
    return user


async def get_current_admin(request: Request, storage: IStorage = Depends(get_storage)) -> User:
    """Dependency - Require an admin session backed by an existing recruiter account."""
    admin_id = request.session.get(ADMIN_SESSION_KEY)
    if admin_id is None:
        raise HTTPException(status_code=401, detail="Admin authentication required")

    admin = storage.get_user(admin_id)
    if admin is None or not admin.is_recruiter:
        logout_admin(request)
        raise HTTPException(status_code=401, detail="Admin authentication required")
    return admin
