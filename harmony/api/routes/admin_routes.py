"""
Admin Routes

All endpoints except login require an admin session, which only
recruiter accounts can open.

POST /admin/login | /admin/logout, GET /admin/session
GET /admin/users, GET|PATCH|DELETE /admin/users/{user_id}
GET /admin/recruiters - Recruiters with job counts
GET /admin/jobs, GET|PATCH|DELETE /admin/jobs/{job_id}
GET /admin/posts, DELETE /admin/posts/{post_id}
GET /admin/communities, GET|PATCH|DELETE /admin/communities/{community_id}
GET /admin/analytics - Platform totals
GET /admin/password-reset-requests[/pending]
PATCH|DELETE /admin/password-reset-requests/{request_id} - Approve/deny or delete
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from harmony.core.auth import authenticate, get_current_admin, hash_password, login_admin, logout_admin
from harmony.models import Community, Job, PasswordResetRequest, ResetRequestStatus, User
from harmony.schemas.schemas import (
    AdminLoginRequest, AdminLoginResponse, AdminSession, AdminUserUpdate, Analytics,
    CommunityUpdate, CommunityWithCreator, JobUpdate, JobWithPoster, MessageResponse,
    PostWithAuthor, RecruiterWithJobs, ResetRequestAction, ResetRequestDetail,
    UserPublic, UserSummary,
)
from harmony.storage import IStorage, get_storage

router = APIRouter(prefix="/admin", tags=["Admin"])


def _summary(storage: IStorage, user_id: Optional[int]) -> Optional[UserSummary]:
    if user_id is None:
        return None
    user = storage.get_user(user_id)
    return UserSummary.model_validate(user) if user else None


def _job_with_poster(storage: IStorage, job: Job) -> JobWithPoster:
    return JobWithPoster(job=job, poster=_summary(storage, job.user_id))


def _community_with_creator(storage: IStorage, community: Community) -> CommunityWithCreator:
    return CommunityWithCreator(
        community=community,
        creator=_summary(storage, community.created_by),
        members_count=len(storage.list_members(community.id))
    )


def _reset_detail(storage: IStorage, request: PasswordResetRequest) -> ResetRequestDetail:
    return ResetRequestDetail(
        request=request,
        user=_summary(storage, request.user_id),
        processed_by=_summary(storage, request.processed_by)
    )


# ============================================================
# SESSION
# ============================================================

@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(body: AdminLoginRequest, request: Request, storage: IStorage = Depends(get_storage)):
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = authenticate(storage, body.username, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_recruiter:
        raise HTTPException(status_code=403, detail="Admin access denied")

    login_admin(request, user)
    logger.info(f"Admin login: user {user.id}")
    return AdminLoginResponse(id=user.id, username=user.username, name=user.name)


@router.get("/session", response_model=AdminSession)
async def admin_session(admin: User = Depends(get_current_admin)):
    return AdminSession(admin_id=admin.id)


@router.post("/logout", response_model=MessageResponse)
async def admin_logout(request: Request):
    logout_admin(request)
    return MessageResponse(message="Admin logged out")


# ============================================================
# USERS
# ============================================================

@router.get("/users", response_model=List[UserPublic])
async def list_users(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return storage.list_users()


@router.get("/recruiters", response_model=List[RecruiterWithJobs])
async def list_recruiters(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return [
        RecruiterWithJobs(**UserPublic.model_validate(u).model_dump(),
                          jobs_count=len(storage.list_jobs_by_user(u.id)))
        for u in storage.list_users() if u.is_recruiter
    ]


@router.get("/users/{user_id}", response_model=UserPublic)
async def get_user(user_id: int, admin: User = Depends(get_current_admin),
                   storage: IStorage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/users/{user_id}", response_model=UserPublic)
async def update_user(user_id: int, body: AdminUserUpdate, admin: User = Depends(get_current_admin),
                      storage: IStorage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

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


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, admin: User = Depends(get_current_admin),
                      storage: IStorage = Depends(get_storage)):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own admin account")
    if not storage.delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return MessageResponse(message="User deleted")


# ============================================================
# JOBS
# ============================================================

@router.get("/jobs", response_model=List[JobWithPoster])
async def list_jobs(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return [_job_with_poster(storage, job) for job in storage.list_jobs()]


@router.get("/jobs/{job_id}", response_model=JobWithPoster)
async def get_job(job_id: int, admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    job = storage.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _job_with_poster(storage, job)


@router.patch("/jobs/{job_id}", response_model=Job)
async def update_job(job_id: int, body: JobUpdate, admin: User = Depends(get_current_admin),
                     storage: IStorage = Depends(get_storage)):
    job = storage.update_job(job_id, body.model_dump(exclude_unset=True))
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: int, admin: User = Depends(get_current_admin),
                     storage: IStorage = Depends(get_storage)):
    if not storage.delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found")
    return MessageResponse(message="Job deleted")


# ============================================================
# POSTS
# ============================================================

@router.get("/posts", response_model=List[PostWithAuthor])
async def list_posts(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return [PostWithAuthor(post=p, author=_summary(storage, p.user_id)) for p in storage.list_posts()]


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(post_id: int, admin: User = Depends(get_current_admin),
                      storage: IStorage = Depends(get_storage)):
    if not storage.delete_post(post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return MessageResponse(message="Post deleted")


# ============================================================
# COMMUNITIES
# ============================================================

@router.get("/communities", response_model=List[CommunityWithCreator])
async def list_communities(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return [_community_with_creator(storage, c) for c in storage.list_communities()]


@router.get("/communities/{community_id}", response_model=CommunityWithCreator)
async def get_community(community_id: int, admin: User = Depends(get_current_admin),
                        storage: IStorage = Depends(get_storage)):
    community = storage.get_community(community_id)
    if community is None:
        raise HTTPException(status_code=404, detail="Community not found")
    return _community_with_creator(storage, community)


@router.patch("/communities/{community_id}", response_model=Community)
async def update_community(community_id: int, body: CommunityUpdate, admin: User = Depends(get_current_admin),
                           storage: IStorage = Depends(get_storage)):
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes:
        existing = storage.get_community_by_name(changes["name"])
        if existing and existing.id != community_id:
            raise HTTPException(status_code=400, detail="A community with this name already exists")

    community = storage.update_community(community_id, changes)
    if community is None:
        raise HTTPException(status_code=404, detail="Community not found")
    return community


@router.delete("/communities/{community_id}", response_model=MessageResponse)
async def delete_community(community_id: int, admin: User = Depends(get_current_admin),
                           storage: IStorage = Depends(get_storage)):
    if not storage.delete_community(community_id):
        raise HTTPException(status_code=404, detail="Community not found")
    return MessageResponse(message="Community deleted")


# ============================================================
# ANALYTICS
# ============================================================

@router.get("/analytics", response_model=Analytics)
async def analytics(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    users = storage.list_users()
    posts = storage.list_posts()
    return Analytics(
        user_stats={
            "total": len(users),
            "recruiters": sum(1 for u in users if u.is_recruiter),
        },
        job_stats={
            "total": len(storage.list_jobs()),
            "applications": len(storage.list_applications()),
        },
        community_stats={
            "total": len(storage.list_communities()),
            "posts": sum(1 for p in posts if p.community_id is not None),
        },
        post_stats={"total": len(posts)},
    )


# ============================================================
# PASSWORD RESET REQUESTS
# ============================================================

@router.get("/password-reset-requests", response_model=List[ResetRequestDetail])
async def list_reset_requests(admin: User = Depends(get_current_admin), storage: IStorage = Depends(get_storage)):
    return [_reset_detail(storage, r) for r in storage.list_password_reset_requests()]


@router.get("/password-reset-requests/pending", response_model=List[ResetRequestDetail])
async def pending_reset_requests(admin: User = Depends(get_current_admin),
                                 storage: IStorage = Depends(get_storage)):
    pending = storage.list_password_reset_requests(ResetRequestStatus.pending.value)
    return [_reset_detail(storage, r) for r in pending]


@router.patch("/password-reset-requests/{request_id}", response_model=ResetRequestDetail)
async def process_reset_request(request_id: int, body: ResetRequestAction,
                                admin: User = Depends(get_current_admin),
                                storage: IStorage = Depends(get_storage)):
    """
    Approve or deny a reset request.

    Approving sets the user's password to the supplied temporary password.
    """
    reset_request = storage.get_password_reset_request(request_id)
    if reset_request is None:
        raise HTTPException(status_code=404, detail="Password reset request not found")
    if reset_request.status != ResetRequestStatus.pending:
        raise HTTPException(status_code=400, detail="Request has already been processed")

    changes = {
        "processed_at": datetime.now(timezone.utc),
        "processed_by": admin.id,
        "admin_notes": body.admin_notes,
    }
    if body.action == "approve":
        if not body.temporary_password:
            raise HTTPException(status_code=400, detail="Temporary password is required to approve")
        if storage.update_user(reset_request.user_id, {"password": hash_password(body.temporary_password)}) is None:
            raise HTTPException(status_code=404, detail="User not found")
        changes["status"] = ResetRequestStatus.approved.value
    else:
        changes["status"] = ResetRequestStatus.denied.value

    updated = storage.update_password_reset_request(request_id, changes)
    logger.info(f"Admin {admin.id} {changes['status']} reset request {request_id}")
    return _reset_detail(storage, updated)


@router.delete("/password-reset-requests/{request_id}", response_model=MessageResponse)
async def delete_reset_request(request_id: int, admin: User = Depends(get_current_admin),
                               storage: IStorage = Depends(get_storage)):
    if not storage.delete_password_reset_request(request_id):
        raise HTTPException(status_code=404, detail="Password reset request not found")
    return MessageResponse(message="Password reset request deleted")
