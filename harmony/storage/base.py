"""
Storage interface.

Every route talks to storage through IStorage; MemStorage backs tests and
local development, DatabaseStorage backs production via SQLAlchemy.
Create/update methods take plain dicts of column values and return records
from harmony.models.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from harmony.models import (
    Comment, Community, CommunityMember, Company, Connection, Job,
    JobApplication, Like, Message, PasswordResetRequest, Post, Repost,
    SavedJob, User,
)


class IStorage(ABC):
    """Repository interface shared by the in-memory and SQL stores"""

    # ---------------------------------------------------------------- users

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup"""
        pass

    @abstractmethod
    def get_user_by_mobile_number(self, mobile_number: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_users(self) -> List[User]:
        pass

    @abstractmethod
    def create_user(self, data: dict) -> User:
        """Raises DuplicateResourceException on username/email collision"""
        pass

    @abstractmethod
    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        pass

    @abstractmethod
    def delete_user(self, user_id: int) -> bool:
        """Delete a user and everything they own or participate in"""
        pass

    # ---------------------------------------------------------------- posts

    @abstractmethod
    def create_post(self, data: dict) -> Post:
        pass

    @abstractmethod
    def get_post(self, post_id: int) -> Optional[Post]:
        pass

    @abstractmethod
    def list_posts(self) -> List[Post]:
        """All posts, newest first"""
        pass

    @abstractmethod
    def list_posts_by_user(self, user_id: int) -> List[Post]:
        pass

    @abstractmethod
    def list_posts_by_community(self, community_id: int) -> List[Post]:
        pass

    @abstractmethod
    def list_posts_by_company(self, company_id: int) -> List[Post]:
        pass

    @abstractmethod
    def update_post(self, post_id: int, changes: dict) -> Optional[Post]:
        pass

    @abstractmethod
    def delete_post(self, post_id: int) -> bool:
        """Delete a post with its likes, comments and repost records"""
        pass

    # ---------------------------------------------------------------- likes

    @abstractmethod
    def get_like(self, user_id: int, post_id: int) -> Optional[Like]:
        pass

    @abstractmethod
    def add_like(self, user_id: int, post_id: int) -> Like:
        """Idempotent: returns the existing like when present"""
        pass

    @abstractmethod
    def remove_like(self, user_id: int, post_id: int) -> bool:
        pass

    @abstractmethod
    def list_likes(self, post_id: int) -> List[Like]:
        pass

    # ------------------------------------------------------------- comments

    @abstractmethod
    def create_comment(self, data: dict) -> Comment:
        pass

    @abstractmethod
    def list_comments(self, post_id: int) -> List[Comment]:
        """Comments on a post, oldest first"""
        pass

    # -------------------------------------------------------------- reposts

    @abstractmethod
    def get_repost(self, user_id: int, post_id: int) -> Optional[Repost]:
        pass

    @abstractmethod
    def create_repost(self, user_id: int, post_id: int) -> Post:
        """
        Record a repost and create the new post that carries it.
        Raises DuplicateResourceException when already reposted and
        ResourceNotFoundException when the original post is missing.
        """
        pass

    @abstractmethod
    def delete_repost(self, user_id: int, post_id: int) -> bool:
        """Remove the repost record and the post created for it"""
        pass

    @abstractmethod
    def list_reposts(self, post_id: int) -> List[Repost]:
        pass

    # ----------------------------------------------------------------- jobs

    @abstractmethod
    def create_job(self, data: dict) -> Job:
        pass

    @abstractmethod
    def get_job(self, job_id: int) -> Optional[Job]:
        pass

    @abstractmethod
    def list_jobs(self) -> List[Job]:
        """All jobs, newest first"""
        pass

    @abstractmethod
    def list_jobs_by_user(self, user_id: int) -> List[Job]:
        pass

    @abstractmethod
    def list_jobs_by_company(self, company_id: int) -> List[Job]:
        pass

    @abstractmethod
    def update_job(self, job_id: int, changes: dict) -> Optional[Job]:
        pass

    @abstractmethod
    def delete_job(self, job_id: int) -> bool:
        """Delete a job with its applications and saved entries"""
        pass

    # ----------------------------------------------------------- saved jobs

    @abstractmethod
    def save_job(self, user_id: int, job_id: int) -> SavedJob:
        """Idempotent: returns the existing entry when present"""
        pass

    @abstractmethod
    def unsave_job(self, user_id: int, job_id: int) -> bool:
        pass

    @abstractmethod
    def is_job_saved(self, user_id: int, job_id: int) -> bool:
        pass

    @abstractmethod
    def list_saved_jobs(self, user_id: int) -> List[Job]:
        pass

    # --------------------------------------------------------- applications

    @abstractmethod
    def create_application(self, data: dict) -> JobApplication:
        """Raises DuplicateResourceException when the user already applied"""
        pass

    @abstractmethod
    def get_application(self, application_id: int) -> Optional[JobApplication]:
        pass

    @abstractmethod
    def get_application_for(self, job_id: int, applicant_id: int) -> Optional[JobApplication]:
        pass

    @abstractmethod
    def list_applications(self) -> List[JobApplication]:
        pass

    @abstractmethod
    def list_applications_by_applicant(self, applicant_id: int) -> List[JobApplication]:
        pass

    @abstractmethod
    def list_applications_by_job(self, job_id: int) -> List[JobApplication]:
        pass

    @abstractmethod
    def update_application_status(self, application_id: int, status: str) -> Optional[JobApplication]:
        pass

    # ---------------------------------------------------------- communities

    @abstractmethod
    def create_community(self, data: dict) -> Community:
        """Raises DuplicateResourceException on name collision"""
        pass

    @abstractmethod
    def get_community(self, community_id: int) -> Optional[Community]:
        pass

    @abstractmethod
    def get_community_by_name(self, name: str) -> Optional[Community]:
        pass

    @abstractmethod
    def list_communities(self) -> List[Community]:
        pass

    @abstractmethod
    def update_community(self, community_id: int, changes: dict) -> Optional[Community]:
        pass

    @abstractmethod
    def delete_community(self, community_id: int) -> bool:
        """Delete memberships and detach posts from the community"""
        pass

    @abstractmethod
    def add_member(self, community_id: int, user_id: int, role: str = "member",
                   is_invited: bool = False) -> CommunityMember:
        """
        Add a membership and increment member_count.
        Raises DuplicateResourceException when already a member.
        """
        pass

    @abstractmethod
    def remove_member(self, community_id: int, user_id: int) -> bool:
        """Remove a membership and decrement member_count (never below zero)"""
        pass

    @abstractmethod
    def is_member(self, community_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    def list_members(self, community_id: int) -> List[User]:
        pass

    @abstractmethod
    def list_user_communities(self, user_id: int) -> List[Community]:
        pass

    # ---------------------------------------------------------- connections

    @abstractmethod
    def create_connection(self, requester_id: int, receiver_id: int) -> Connection:
        pass

    @abstractmethod
    def get_connection(self, connection_id: int) -> Optional[Connection]:
        pass

    @abstractmethod
    def find_active_connection(self, user_a: int, user_b: int) -> Optional[Connection]:
        """Pending or accepted connection between two users, either direction"""
        pass

    @abstractmethod
    def update_connection_status(self, connection_id: int, status: str) -> Optional[Connection]:
        pass

    @abstractmethod
    def delete_connection(self, connection_id: int) -> bool:
        pass

    @abstractmethod
    def list_connections(self, user_id: int) -> List[Connection]:
        """Accepted connections the user takes part in"""
        pass

    @abstractmethod
    def list_pending_received(self, user_id: int) -> List[Connection]:
        pass

    @abstractmethod
    def list_pending_sent(self, user_id: int) -> List[Connection]:
        pass

    # ------------------------------------------------------------- messages

    @abstractmethod
    def create_message(self, data: dict) -> Message:
        pass

    @abstractmethod
    def get_conversation(self, user_a: int, user_b: int) -> List[Message]:
        """Messages between two users, oldest first"""
        pass

    @abstractmethod
    def list_received_messages(self, user_id: int) -> List[Message]:
        """Messages sent to the user, newest first"""
        pass

    @abstractmethod
    def mark_conversation_read(self, reader_id: int, sender_id: int) -> int:
        """Mark messages from sender to reader as read; returns how many changed"""
        pass

    @abstractmethod
    def count_unread(self, user_id: int) -> int:
        pass

    # ------------------------------------------------------------ companies

    @abstractmethod
    def create_company(self, data: dict) -> Company:
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        pass

    @abstractmethod
    def list_companies(self) -> List[Company]:
        pass

    @abstractmethod
    def list_companies_by_owner(self, owner_id: int) -> List[Company]:
        pass

    @abstractmethod
    def update_company(self, company_id: int, changes: dict) -> Optional[Company]:
        pass

    @abstractmethod
    def delete_company(self, company_id: int) -> bool:
        """Delete a company and clear company_id on its jobs and posts"""
        pass

    # ------------------------------------------------ password reset requests

    @abstractmethod
    def create_password_reset_request(self, user_id: int, email: str) -> PasswordResetRequest:
        pass

    @abstractmethod
    def get_password_reset_request(self, request_id: int) -> Optional[PasswordResetRequest]:
        pass

    @abstractmethod
    def get_pending_reset_request(self, user_id: int) -> Optional[PasswordResetRequest]:
        pass

    @abstractmethod
    def list_password_reset_requests(self, status: Optional[str] = None) -> List[PasswordResetRequest]:
        """Requests newest first, optionally filtered by status"""
        pass

    @abstractmethod
    def update_password_reset_request(self, request_id: int, changes: dict) -> Optional[PasswordResetRequest]:
        pass

    @abstractmethod
    def delete_password_reset_request(self, request_id: int) -> bool:
        pass
