"""
Domain records shared by both storage implementations.

Records mirror the database tables one-to-one. Storage returns these
objects regardless of backend; API responses are built from them via
the schemas module so the password hash never leaves the server.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_privacy_settings() -> dict:
    return {"profile_visibility": "all", "digital_cv_visibility": "all"}


# ============================================================
# ENUMS
# ============================================================

class ConnectionStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class ResetRequestStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    denied = "denied"


class ApplicationStatus(str, Enum):
    applied = "applied"
    under_review = "under_review"
    shortlisted = "shortlisted"
    interviewed = "interviewed"
    offered = "offered"
    hired = "hired"
    rejected = "rejected"


class CommunityRole(str, Enum):
    member = "member"
    moderator = "moderator"
    admin = "admin"


class Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# ============================================================
# RECORDS
# ============================================================

class User(Record):
    id: int
    username: str
    password: str
    email: str
    name: str
    title: Optional[str] = None
    bio: Optional[str] = None
    mobile_number: Optional[str] = None
    profile_image_url: Optional[str] = None
    digital_cv_url: Optional[str] = None
    is_recruiter: bool = False
    company: Optional[str] = None
    industry: Optional[str] = None
    two_factor_enabled: bool = False
    privacy_settings: dict = Field(default_factory=default_privacy_settings)
    skills: List[str] = Field(default_factory=list)
    experiences: List[dict] = Field(default_factory=list)
    education: List[dict] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)


class Post(Record):
    id: int
    user_id: int
    content: str
    image_url: Optional[str] = None
    is_anonymous: bool = False
    community_id: Optional[int] = None
    company_id: Optional[int] = None
    original_post_id: Optional[int] = None
    reposted_by: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)


class Like(Record):
    id: int
    user_id: int
    post_id: int
    created_at: datetime = Field(default_factory=utcnow)


class Comment(Record):
    id: int
    user_id: int
    post_id: int
    content: str
    created_at: datetime = Field(default_factory=utcnow)


class Repost(Record):
    id: int
    user_id: int
    post_id: int
    created_at: datetime = Field(default_factory=utcnow)


class Job(Record):
    id: int
    title: str
    company: str
    location: str
    description: str
    skills: List[str] = Field(default_factory=list)
    user_id: int
    company_id: Optional[int] = None
    salary: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class JobApplication(Record):
    id: int
    job_id: int
    applicant_id: int
    status: ApplicationStatus = ApplicationStatus.applied
    note: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class SavedJob(Record):
    id: int
    user_id: int
    job_id: int
    created_at: datetime = Field(default_factory=utcnow)


class Community(Record):
    id: int
    name: str
    description: str
    created_by: int
    member_count: int = 0
    is_private: bool = False
    invite_only: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class CommunityMember(Record):
    id: int
    user_id: int
    community_id: int
    role: CommunityRole = CommunityRole.member
    is_invited: bool = False
    joined_at: datetime = Field(default_factory=utcnow)


class Connection(Record):
    id: int
    requester_id: int
    receiver_id: int
    status: ConnectionStatus = ConnectionStatus.pending
    created_at: datetime = Field(default_factory=utcnow)

    def other_party(self, user_id: int) -> int:
        return self.receiver_id if self.requester_id == user_id else self.requester_id


class Message(Record):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Company(Record):
    id: int
    name: str
    owner_id: int
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class PasswordResetRequest(Record):
    id: int
    user_id: int
    email: str
    status: ResetRequestStatus = ResetRequestStatus.pending
    created_at: datetime = Field(default_factory=utcnow)
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None
    admin_notes: Optional[str] = None
