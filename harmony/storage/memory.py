"""
In-memory storage.

Dict-backed IStorage used by the test suite and for running the API
without a database. State lives for the lifetime of the process.
"""

from itertools import count
from typing import Dict, List, Optional

from loguru import logger

from harmony.core.exceptions import DuplicateResourceException, ResourceNotFoundException
from harmony.models import (
    Comment, Community, CommunityMember, Company, Connection, ConnectionStatus,
    Job, JobApplication, Like, Message, PasswordResetRequest, Post, Repost,
    ResetRequestStatus, SavedJob, User,
)
from harmony.storage.base import IStorage


def _newest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


def _oldest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id))


def _is_repost_of(repost: Repost, copy: Post) -> bool:
    """True when copy is the feed post that repost created"""
    return repost.user_id == copy.reposted_by and repost.post_id == copy.original_post_id


class MemStorage(IStorage):

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.posts: Dict[int, Post] = {}
        self.likes: Dict[int, Like] = {}
        self.comments: Dict[int, Comment] = {}
        self.reposts: Dict[int, Repost] = {}
        self.jobs: Dict[int, Job] = {}
        self.saved_jobs: Dict[int, SavedJob] = {}
        self.applications: Dict[int, JobApplication] = {}
        self.communities: Dict[int, Community] = {}
        self.members: Dict[int, CommunityMember] = {}
        self.connections: Dict[int, Connection] = {}
        self.messages: Dict[int, Message] = {}
        self.companies: Dict[int, Company] = {}
        self.reset_requests: Dict[int, PasswordResetRequest] = {}
        self._ids = {}

    def _next_id(self, table: str) -> int:
        if table not in self._ids:
            self._ids[table] = count(1)
        return next(self._ids[table])

    @staticmethod
    def _update(table: dict, key: int, changes: dict):
        record = table.get(key)
        if record is None:
            return None
        updated = record.model_validate({**record.model_dump(), **changes})
        table[key] = updated
        return updated

    # ---------------------------------------------------------------- users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self.users.values() if u.email.lower() == email), None)

    def get_user_by_mobile_number(self, mobile_number: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.mobile_number == mobile_number), None)

    def list_users(self) -> List[User]:
        return sorted(self.users.values(), key=lambda u: u.id)

    def create_user(self, data: dict) -> User:
        if self.get_user_by_username(data["username"]):
            raise DuplicateResourceException("User", "username", data["username"])
        if self.get_user_by_email(data["email"]):
            raise DuplicateResourceException("User", "email", data["email"])
        user = User(id=self._next_id("users"), **data)
        self.users[user.id] = user
        return user

    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        return self._update(self.users, user_id, changes)

    def delete_user(self, user_id: int) -> bool:
        if user_id not in self.users:
            return False

        for post in [p for p in self.posts.values() if p.user_id == user_id]:
            self.delete_post(post.id)
        for job in [j for j in self.jobs.values() if j.user_id == user_id]:
            self.delete_job(job.id)
        for membership in [m for m in self.members.values() if m.user_id == user_id]:
            self.remove_member(membership.community_id, user_id)
        for community in [c for c in self.communities.values() if c.created_by == user_id]:
            self.delete_community(community.id)
        for company in [c for c in self.companies.values() if c.owner_id == user_id]:
            self.delete_company(company.id)

        self.connections = {k: c for k, c in self.connections.items()
                            if user_id not in (c.requester_id, c.receiver_id)}
        self.messages = {k: m for k, m in self.messages.items()
                         if user_id not in (m.sender_id, m.receiver_id)}
        self.applications = {k: a for k, a in self.applications.items() if a.applicant_id != user_id}
        self.likes = {k: l for k, l in self.likes.items() if l.user_id != user_id}
        self.comments = {k: c for k, c in self.comments.items() if c.user_id != user_id}
        self.reposts = {k: r for k, r in self.reposts.items() if r.user_id != user_id}
        self.saved_jobs = {k: s for k, s in self.saved_jobs.items() if s.user_id != user_id}
        self.reset_requests = {k: r for k, r in self.reset_requests.items() if r.user_id != user_id}

        del self.users[user_id]
        logger.info(f"Deleted user {user_id} and related records")
        return True

    # ---------------------------------------------------------------- posts

    def create_post(self, data: dict) -> Post:
        post = Post(id=self._next_id("posts"), **data)
        self.posts[post.id] = post
        return post

    def get_post(self, post_id: int) -> Optional[Post]:
        return self.posts.get(post_id)

    def list_posts(self) -> List[Post]:
        return _newest_first(self.posts.values())

    def list_posts_by_user(self, user_id: int) -> List[Post]:
        return _newest_first(p for p in self.posts.values() if p.user_id == user_id)

    def list_posts_by_community(self, community_id: int) -> List[Post]:
        return _newest_first(p for p in self.posts.values() if p.community_id == community_id)

    def list_posts_by_company(self, company_id: int) -> List[Post]:
        return _newest_first(p for p in self.posts.values() if p.company_id == company_id)

    def update_post(self, post_id: int, changes: dict) -> Optional[Post]:
        return self._update(self.posts, post_id, changes)

    def delete_post(self, post_id: int) -> bool:
        if post_id not in self.posts:
            return False
        post = self.posts[post_id]
        self.likes = {k: l for k, l in self.likes.items() if l.post_id != post_id}
        self.comments = {k: c for k, c in self.comments.items() if c.post_id != post_id}
        self.reposts = {k: r for k, r in self.reposts.items()
                        if r.post_id != post_id and not _is_repost_of(r, post)}
        del self.posts[post_id]
        return True

    # ---------------------------------------------------------------- likes

    def get_like(self, user_id: int, post_id: int) -> Optional[Like]:
        return next((l for l in self.likes.values()
                     if l.user_id == user_id and l.post_id == post_id), None)

    def add_like(self, user_id: int, post_id: int) -> Like:
        existing = self.get_like(user_id, post_id)
        if existing:
            return existing
        like = Like(id=self._next_id("likes"), user_id=user_id, post_id=post_id)
        self.likes[like.id] = like
        return like

    def remove_like(self, user_id: int, post_id: int) -> bool:
        like = self.get_like(user_id, post_id)
        if like is None:
            return False
        del self.likes[like.id]
        return True

    def list_likes(self, post_id: int) -> List[Like]:
        return _oldest_first(l for l in self.likes.values() if l.post_id == post_id)

    # ------------------------------------------------------------- comments

    def create_comment(self, data: dict) -> Comment:
        comment = Comment(id=self._next_id("comments"), **data)
        self.comments[comment.id] = comment
        return comment

    def list_comments(self, post_id: int) -> List[Comment]:
        return _oldest_first(c for c in self.comments.values() if c.post_id == post_id)

    # -------------------------------------------------------------- reposts

    def get_repost(self, user_id: int, post_id: int) -> Optional[Repost]:
        return next((r for r in self.reposts.values()
                     if r.user_id == user_id and r.post_id == post_id), None)

    def create_repost(self, user_id: int, post_id: int) -> Post:
        original = self.get_post(post_id)
        if original is None:
            raise ResourceNotFoundException("Post", post_id)
        if self.get_repost(user_id, post_id):
            raise DuplicateResourceException("Repost", "post_id", post_id)

        repost = Repost(id=self._next_id("reposts"), user_id=user_id, post_id=post_id)
        self.reposts[repost.id] = repost
        return self.create_post({
            "user_id": user_id,
            "content": original.content,
            "image_url": original.image_url,
            "community_id": original.community_id,
            "original_post_id": original.id,
            "reposted_by": user_id,
        })

    def delete_repost(self, user_id: int, post_id: int) -> bool:
        repost = self.get_repost(user_id, post_id)
        if repost is None:
            return False
        del self.reposts[repost.id]
        for post in [p for p in self.posts.values()
                     if p.original_post_id == post_id and p.reposted_by == user_id]:
            self.delete_post(post.id)
        return True

    def list_reposts(self, post_id: int) -> List[Repost]:
        return _oldest_first(r for r in self.reposts.values() if r.post_id == post_id)

    # ----------------------------------------------------------------- jobs

    def create_job(self, data: dict) -> Job:
        job = Job(id=self._next_id("jobs"), **data)
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: int) -> Optional[Job]:
        return self.jobs.get(job_id)

    def list_jobs(self) -> List[Job]:
        return _newest_first(self.jobs.values())

    def list_jobs_by_user(self, user_id: int) -> List[Job]:
        return _newest_first(j for j in self.jobs.values() if j.user_id == user_id)

    def list_jobs_by_company(self, company_id: int) -> List[Job]:
        return _newest_first(j for j in self.jobs.values() if j.company_id == company_id)

    def update_job(self, job_id: int, changes: dict) -> Optional[Job]:
        return self._update(self.jobs, job_id, changes)

    def delete_job(self, job_id: int) -> bool:
        if job_id not in self.jobs:
            return False
        self.applications = {k: a for k, a in self.applications.items() if a.job_id != job_id}
        self.saved_jobs = {k: s for k, s in self.saved_jobs.items() if s.job_id != job_id}
        del self.jobs[job_id]
        return True

    # ----------------------------------------------------------- saved jobs

    def _get_saved(self, user_id: int, job_id: int) -> Optional[SavedJob]:
        return next((s for s in self.saved_jobs.values()
                     if s.user_id == user_id and s.job_id == job_id), None)

    def save_job(self, user_id: int, job_id: int) -> SavedJob:
        existing = self._get_saved(user_id, job_id)
        if existing:
            return existing
        saved = SavedJob(id=self._next_id("saved_jobs"), user_id=user_id, job_id=job_id)
        self.saved_jobs[saved.id] = saved
        return saved

    def unsave_job(self, user_id: int, job_id: int) -> bool:
        saved = self._get_saved(user_id, job_id)
        if saved is None:
            return False
        del self.saved_jobs[saved.id]
        return True

    def is_job_saved(self, user_id: int, job_id: int) -> bool:
        return self._get_saved(user_id, job_id) is not None

    def list_saved_jobs(self, user_id: int) -> List[Job]:
        entries = _newest_first(s for s in self.saved_jobs.values() if s.user_id == user_id)
        return [self.jobs[s.job_id] for s in entries if s.job_id in self.jobs]

    # --------------------------------------------------------- applications

    def create_application(self, data: dict) -> JobApplication:
        if self.get_application_for(data["job_id"], data["applicant_id"]):
            raise DuplicateResourceException("JobApplication", "job_id", data["job_id"])
        application = JobApplication(id=self._next_id("applications"), **data)
        self.applications[application.id] = application
        return application

    def get_application(self, application_id: int) -> Optional[JobApplication]:
        return self.applications.get(application_id)

    def get_application_for(self, job_id: int, applicant_id: int) -> Optional[JobApplication]:
        return next((a for a in self.applications.values()
                     if a.job_id == job_id and a.applicant_id == applicant_id), None)

    def list_applications(self) -> List[JobApplication]:
        return _newest_first(self.applications.values())

    def list_applications_by_applicant(self, applicant_id: int) -> List[JobApplication]:
        return _newest_first(a for a in self.applications.values() if a.applicant_id == applicant_id)

    def list_applications_by_job(self, job_id: int) -> List[JobApplication]:
        return _newest_first(a for a in self.applications.values() if a.job_id == job_id)

    def update_application_status(self, application_id: int, status: str) -> Optional[JobApplication]:
        return self._update(self.applications, application_id, {"status": status})

    # ---------------------------------------------------------- communities

    def create_community(self, data: dict) -> Community:
        if self.get_community_by_name(data["name"]):
            raise DuplicateResourceException("Community", "name", data["name"])
        community = Community(id=self._next_id("communities"), **{**data, "member_count": 0})
        self.communities[community.id] = community
        return community

    def get_community(self, community_id: int) -> Optional[Community]:
        return self.communities.get(community_id)

    def get_community_by_name(self, name: str) -> Optional[Community]:
        return next((c for c in self.communities.values() if c.name == name), None)

    def list_communities(self) -> List[Community]:
        return _newest_first(self.communities.values())

    def update_community(self, community_id: int, changes: dict) -> Optional[Community]:
        return self._update(self.communities, community_id, changes)

    def delete_community(self, community_id: int) -> bool:
        if community_id not in self.communities:
            return False
        self.members = {k: m for k, m in self.members.items() if m.community_id != community_id}
        for post in [p for p in self.posts.values() if p.community_id == community_id]:
            self.update_post(post.id, {"community_id": None})
        del self.communities[community_id]
        return True

    def _get_membership(self, community_id: int, user_id: int) -> Optional[CommunityMember]:
        return next((m for m in self.members.values()
                     if m.community_id == community_id and m.user_id == user_id), None)

    def add_member(self, community_id: int, user_id: int, role: str = "member",
                   is_invited: bool = False) -> CommunityMember:
        community = self.get_community(community_id)
        if community is None:
            raise ResourceNotFoundException("Community", community_id)
        if self._get_membership(community_id, user_id):
            raise DuplicateResourceException("CommunityMember", "user_id", user_id)

        membership = CommunityMember(
            id=self._next_id("members"), user_id=user_id, community_id=community_id,
            role=role, is_invited=is_invited
        )
        self.members[membership.id] = membership
        self._update(self.communities, community_id, {"member_count": community.member_count + 1})
        return membership

    def remove_member(self, community_id: int, user_id: int) -> bool:
        membership = self._get_membership(community_id, user_id)
        if membership is None:
            return False
        del self.members[membership.id]
        community = self.get_community(community_id)
        if community:
            self._update(self.communities, community_id,
                         {"member_count": max(0, community.member_count - 1)})
        return True

    def is_member(self, community_id: int, user_id: int) -> bool:
        return self._get_membership(community_id, user_id) is not None

    def list_members(self, community_id: int) -> List[User]:
        memberships = sorted((m for m in self.members.values() if m.community_id == community_id),
                             key=lambda m: m.id)
        return [self.users[m.user_id] for m in memberships if m.user_id in self.users]

    def list_user_communities(self, user_id: int) -> List[Community]:
        ids = {m.community_id for m in self.members.values() if m.user_id == user_id}
        return _newest_first(c for c in self.communities.values() if c.id in ids)

    # ---------------------------------------------------------- connections

    def create_connection(self, requester_id: int, receiver_id: int) -> Connection:
        connection = Connection(id=self._next_id("connections"),
                                requester_id=requester_id, receiver_id=receiver_id)
        self.connections[connection.id] = connection
        return connection

    def get_connection(self, connection_id: int) -> Optional[Connection]:
        return self.connections.get(connection_id)

    def find_active_connection(self, user_a: int, user_b: int) -> Optional[Connection]:
        pair = {user_a, user_b}
        active = (ConnectionStatus.pending, ConnectionStatus.accepted)
        return next((c for c in self.connections.values()
                     if {c.requester_id, c.receiver_id} == pair and c.status in active), None)

    def update_connection_status(self, connection_id: int, status: str) -> Optional[Connection]:
        return self._update(self.connections, connection_id, {"status": status})

    def delete_connection(self, connection_id: int) -> bool:
        return self.connections.pop(connection_id, None) is not None

    def list_connections(self, user_id: int) -> List[Connection]:
        return _newest_first(c for c in self.connections.values()
                             if c.status == ConnectionStatus.accepted
                             and user_id in (c.requester_id, c.receiver_id))

    def list_pending_received(self, user_id: int) -> List[Connection]:
        return _newest_first(c for c in self.connections.values()
                             if c.status == ConnectionStatus.pending and c.receiver_id == user_id)

    def list_pending_sent(self, user_id: int) -> List[Connection]:
        return _newest_first(c for c in self.connections.values()
                             if c.status == ConnectionStatus.pending and c.requester_id == user_id)

    # ------------------------------------------------------------- messages

    def create_message(self, data: dict) -> Message:
        message = Message(id=self._next_id("messages"), **data)
        self.messages[message.id] = message
        return message

    def get_conversation(self, user_a: int, user_b: int) -> List[Message]:
        return _oldest_first(
            m for m in self.messages.values()
            if (m.sender_id, m.receiver_id) in ((user_a, user_b), (user_b, user_a))
        )

    def list_received_messages(self, user_id: int) -> List[Message]:
        return _newest_first(m for m in self.messages.values() if m.receiver_id == user_id)

    def mark_conversation_read(self, reader_id: int, sender_id: int) -> int:
        unread = [m for m in self.messages.values()
                  if m.receiver_id == reader_id and m.sender_id == sender_id and not m.is_read]
        for message in unread:
            self._update(self.messages, message.id, {"is_read": True})
        return len(unread)

    def count_unread(self, user_id: int) -> int:
        return sum(1 for m in self.messages.values() if m.receiver_id == user_id and not m.is_read)

    # ------------------------------------------------------------ companies

    def create_company(self, data: dict) -> Company:
        company = Company(id=self._next_id("companies"), **data)
        self.companies[company.id] = company
        return company

    def get_company(self, company_id: int) -> Optional[Company]:
        return self.companies.get(company_id)

    def list_companies(self) -> List[Company]:
        return _newest_first(self.companies.values())

    def list_companies_by_owner(self, owner_id: int) -> List[Company]:
        return _newest_first(c for c in self.companies.values() if c.owner_id == owner_id)

    def update_company(self, company_id: int, changes: dict) -> Optional[Company]:
        return self._update(self.companies, company_id, changes)

    def delete_company(self, company_id: int) -> bool:
        if company_id not in self.companies:
            return False
        for job in [j for j in self.jobs.values() if j.company_id == company_id]:
            self.update_job(job.id, {"company_id": None})
        for post in [p for p in self.posts.values() if p.company_id == company_id]:
            self.update_post(post.id, {"company_id": None})
        del self.companies[company_id]
        return True

    # ------------------------------------------------ password reset requests

    def create_password_reset_request(self, user_id: int, email: str) -> PasswordResetRequest:
        request = PasswordResetRequest(id=self._next_id("reset_requests"), user_id=user_id, email=email)
        self.reset_requests[request.id] = request
        return request

    def get_password_reset_request(self, request_id: int) -> Optional[PasswordResetRequest]:
        return self.reset_requests.get(request_id)

    def get_pending_reset_request(self, user_id: int) -> Optional[PasswordResetRequest]:
        return next((r for r in self.reset_requests.values()
                     if r.user_id == user_id and r.status == ResetRequestStatus.pending), None)

    def list_password_reset_requests(self, status: Optional[str] = None) -> List[PasswordResetRequest]:
        return _newest_first(r for r in self.reset_requests.values()
                             if status is None or r.status == status)

    def update_password_reset_request(self, request_id: int, changes: dict) -> Optional[PasswordResetRequest]:
        return self._update(self.reset_requests, request_id, changes)

    def delete_password_reset_request(self, request_id: int) -> bool:
        return self.reset_requests.pop(request_id, None) is not None
