"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Stored records (harmony.models) are returned directly where they carry no
secrets; users always go out through UserPublic or UserSummary.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from harmony.models import (
    ApplicationStatus, Comment, Community, Connection, Job, JobApplication,
    Message, PasswordResetRequest, Post,
)


def reject_null(value):
    """Partial updates may omit a required field but not clear it"""
    if value is None:
        raise ValueError("must not be null")
    return value


class ContentBody(BaseModel):
    """Request body carrying non-blank text content"""
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


# ============================================================
# USER SCHEMAS
# ============================================================

class UserPublic(BaseModel):
    """Full profile without the password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
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
    privacy_settings: dict = {}
    skills: List[str] = []
    experiences: List[dict] = []
    education: List[dict] = []
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """Minimal user card used in lists and nested payloads"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    title: Optional[str] = None
    profile_image_url: Optional[str] = None
    skills: List[str] = []


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = None
    bio: Optional[str] = None
    mobile_number: Optional[str] = None
    is_recruiter: bool = False
    company: Optional[str] = None
    industry: Optional[str] = None
    skills: List[str] = []


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    name: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = None
    bio: Optional[str] = None
    mobile_number: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    two_factor_enabled: Optional[bool] = None
    privacy_settings: Optional[dict] = None
    skills: Optional[List[str]] = None
    experiences: Optional[List[dict]] = None
    education: Optional[List[dict]] = None

    @field_validator("username", "email", "password", "name", "two_factor_enabled",
                     "privacy_settings", "skills", "experiences", "education")
    @classmethod
    def required_fields_not_null(cls, value):
        return reject_null(value)


class AdminUserUpdate(UserUpdate):
    is_recruiter: Optional[bool] = None

    @field_validator("is_recruiter")
    @classmethod
    def is_recruiter_not_null(cls, value):
        return reject_null(value)


class AvailabilityResponse(BaseModel):
    exists: bool
    message: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ForgotPasswordResponse(BaseModel):
    message: str
    request_id: int


class UserStats(BaseModel):
    posts_count: int
    profile_views: int
    search_appearances: int
    digital_cv_views: int
    profile_strength: int


# ============================================================
# POST SCHEMAS
# ============================================================

class PostCreate(ContentBody):
    image_url: Optional[str] = None
    is_anonymous: bool = False
    community_id: Optional[int] = None


class PostUpdate(ContentBody):
    pass


class CommentCreate(ContentBody):
    pass


class CommentWithUser(BaseModel):
    comment: Comment
    user: Optional[UserSummary] = None


class SuggestionRequest(BaseModel):
    keyword: str = Field(..., min_length=1, max_length=200)


class PostSuggestion(BaseModel):
    title: str
    content: str
    tone: str
    hashtags: List[str] = []


class SuggestionsResponse(BaseModel):
    suggestions: List[PostSuggestion]


class EnhanceRequest(ContentBody):
    pass


class EnhanceResponse(BaseModel):
    enhanced_content: str
    suggested_hashtags: List[str] = []


class TrendingTopic(BaseModel):
    id: int
    title: str
    hashtag: str
    related_posts: int
    professionals: int


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    skills: List[str] = []
    salary: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None
    company_id: Optional[int] = None


class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    skills: Optional[List[str]] = None
    salary: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None

    @field_validator("title", "company", "location", "description", "skills")
    @classmethod
    def required_fields_not_null(cls, value):
        return reject_null(value)


class ApplyRequest(BaseModel):
    cover_letter: Optional[str] = None
    skills: Optional[str] = Field(None, description="Comma-separated skills to add to the profile")


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationWithJob(BaseModel):
    application: JobApplication
    job: Optional[Job] = None


class ApplicationWithApplicant(BaseModel):
    application: JobApplication
    applicant: Optional[UserSummary] = None


class SavedStatus(BaseModel):
    saved: bool


class RecommendedJob(BaseModel):
    job: Job
    match_percentage: int
    skill_match_pct: float
    matched_skills: List[str] = []


# ============================================================
# COMMUNITY SCHEMAS
# ============================================================

class CommunityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    is_private: bool = False
    invite_only: bool = False
    initial_participants: List[int] = []


class CommunityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    is_private: Optional[bool] = None
    invite_only: Optional[bool] = None

    @field_validator("name", "description", "is_private", "invite_only")
    @classmethod
    def required_fields_not_null(cls, value):
        return reject_null(value)


# ============================================================
# CONNECTION & MESSAGE SCHEMAS
# ============================================================

class ConnectionCreate(BaseModel):
    receiver_id: int


class ConnectionStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(accepted|rejected)$")


class ConnectionWithUser(BaseModel):
    connection: Connection
    user: Optional[UserSummary] = None


class MessageCreate(ContentBody):
    receiver_id: int


class MessageWithSender(BaseModel):
    message: Message
    sender: Optional[UserSummary] = None


class UnreadCount(BaseModel):
    count: int


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    email: Optional[EmailStr] = None


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    website: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        return reject_null(value)


class CompanyPostCreate(ContentBody):
    image_url: Optional[str] = None


# ============================================================
# DIGITAL CV SCHEMAS
# ============================================================

class VideoAnalysis(BaseModel):
    summary: str
    key_strengths: List[str]
    improvement_areas: List[str]
    overall_score: int = Field(..., ge=1, le=10)
    feedback: str


class DigitalCVUploadResponse(BaseModel):
    message: str
    video_url: str
    analysis: VideoAnalysis


class DigitalCVTips(BaseModel):
    tips: List[str]
    has_digital_cv: bool
    cv_url: Optional[str] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminLoginResponse(BaseModel):
    id: int
    username: str
    name: str
    is_admin: bool = True


class AdminSession(BaseModel):
    admin_id: int


class RecruiterWithJobs(UserPublic):
    jobs_count: int


class JobWithPoster(BaseModel):
    job: Job
    poster: Optional[UserSummary] = None


class PostWithAuthor(BaseModel):
    post: Post
    author: Optional[UserSummary] = None


class CommunityWithCreator(BaseModel):
    community: Community
    creator: Optional[UserSummary] = None
    members_count: int


class ResetRequestAction(BaseModel):
    action: str = Field(..., pattern="^(approve|deny)$")
    temporary_password: Optional[str] = Field(None, min_length=6)
    admin_notes: Optional[str] = None


class ResetRequestDetail(BaseModel):
    request: PasswordResetRequest
    user: Optional[UserSummary] = None
    processed_by: Optional[UserSummary] = None


class Analytics(BaseModel):
    user_stats: dict
    job_stats: dict
    community_stats: dict
    post_stats: dict


# ============================================================
# COMMON
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
