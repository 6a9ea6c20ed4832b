"""
Authentication Routes

POST /register - Create account and start a session
POST /login - Log in with username or email
POST /logout - End the session
GET /user - Current user
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from harmony.core.auth import authenticate, get_current_user, hash_password, login_user, logout_user
from harmony.models import User
from harmony.schemas.schemas import LoginRequest, MessageResponse, RegisterRequest, UserPublic
from harmony.storage import IStorage, get_storage

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=UserPublic, status_code=201)
async def register(body: RegisterRequest, request: Request, storage: IStorage = Depends(get_storage)):
    """Register a new user and log them in."""
    if storage.get_user_by_username(body.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if storage.get_user_by_email(body.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    data = body.model_dump()
    data["password"] = hash_password(body.password)
    user = storage.create_user(data)

    login_user(request, user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return user


@router.post("/login", response_model=UserPublic)
async def login(body: LoginRequest, request: Request, storage: IStorage = Depends(get_storage)):
    """Login with username or email and password."""
    user = authenticate(storage, body.username, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    login_user(request, user)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request):
    logout_user(request)
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserPublic)
async def current_user(user: User = Depends(get_current_user)):
    return user
