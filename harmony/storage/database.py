"""
SQL storage.

IStorage over SQLAlchemy ORM tables. Each call runs in its own session via
get_db_session(), which commits on success and rolls back on error.
Unique-constraint violations surface as DuplicateResourceException, or as
a no-op for idempotent operations. Other SQLAlchemy errors are re-raised
as StorageException.
"""

from contextlib import contextmanager
from typing import List, Optional, Type

from loguru import logger
from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from harmony.core.exceptions import (
    DuplicateResourceException, ResourceNotFoundException, StorageException,
)
from harmony.db.postgres import get_db_session
from harmony.db.tables import (
    CommentTable, CommunityMemberTable, CommunityTable, CompanyTable,
    ConnectionTable, JobApplicationTable, JobTable, LikeTable, MessageTable,
    PasswordResetRequestTable, PostTable, RepostTable, SavedJobTable, UserTable,
)
from harmony.models import (
    Comment, Community, CommunityMember, Company, Connection, ConnectionStatus,
    Job, JobApplication, Like, Message, PasswordResetRequest, Post, Repost,
    ResetRequestStatus, SavedJob, User,
)
from harmony.storage.base import IStorage


class DatabaseStorage(IStorage):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        try:
            with get_db_session(self.session_factory) as db:
                yield db
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database operation failed: {e}")
            raise StorageException(str(e)) from e

    # ------------------------------------------------------------- helpers

    def _get(self, table, record: Type, key: int):
        with self._session() as db:
            row = db.get(table, key)
            return record.model_validate(row) if row else None

    def _all(self, stmt, record: Type) -> list:
        with self._session() as db:
            return [record.model_validate(row) for row in db.scalars(stmt).all()]

    def _first(self, stmt, record: Type):
        with self._session() as db:
            row = db.scalars(stmt.limit(1)).first()
            return record.model_validate(row) if row else None

    def _insert(self, table, record: Type, data: dict):
        with self._session() as db:
            row = table(**data)
            db.add(row)
            db.flush()
            return record.model_validate(row)

    def _update(self, table, record: Type, key: int, changes: dict):
        with self._session() as db:
            row = db.get(table, key)
            if row is None:
                return None
            for field, value in changes.items():
                setattr(row, field, value)
            db.flush()
            return record.model_validate(row)

    @staticmethod
    def _delete_post_rows(db: Session, post_ids) -> None:
        if not post_ids:
            return
        db.execute(delete(LikeTable).where(LikeTable.post_id.in_(post_ids)))
        db.execute(delete(CommentTable).where(CommentTable.post_id.in_(post_ids)))
        db.execute(delete(RepostTable).where(RepostTable.post_id.in_(post_ids)))
        copies = db.execute(
            select(PostTable.reposted_by, PostTable.original_post_id)
            .where(PostTable.id.in_(post_ids), PostTable.original_post_id.is_not(None))
        ).all()
        for reposted_by, original_post_id in copies:
            db.execute(delete(RepostTable).where(
                RepostTable.user_id == reposted_by, RepostTable.post_id == original_post_id
            ))
        db.execute(delete(PostTable).where(PostTable.id.in_(post_ids)))

    @staticmethod
    def _delete_job_rows(db: Session, job_ids) -> None:
        if not job_ids:
            return
        db.execute(delete(JobApplicationTable).where(JobApplicationTable.job_id.in_(job_ids)))
        db.execute(delete(SavedJobTable).where(SavedJobTable.job_id.in_(job_ids)))
        db.execute(delete(JobTable).where(JobTable.id.in_(job_ids)))

    @staticmethod
    def _delete_community_rows(db: Session, community_ids) -> None:
        if not community_ids:
            return
        db.execute(delete(CommunityMemberTable).where(CommunityMemberTable.community_id.in_(community_ids)))
        db.execute(
            update(PostTable).where(PostTable.community_id.in_(community_ids)).values(community_id=None)
        )
        db.execute(delete(CommunityTable).where(CommunityTable.id.in_(community_ids)))

    @staticmethod
    def _delete_company_rows(db: Session, company_ids) -> None:
        if not company_ids:
            return
        db.execute(update(JobTable).where(JobTable.company_id.in_(company_ids)).values(company_id=None))
        db.execute(update(PostTable).where(PostTable.company_id.in_(company_ids)).values(company_id=None))
        db.execute(delete(CompanyTable).where(CompanyTable.id.in_(company_ids)))

    # ---------------------------------------------------------------- users

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(UserTable, User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._first(select(UserTable).where(UserTable.username == username), User)

    def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserTable).where(func.lower(UserTable.email) == email.lower())
        return self._first(stmt, User)

    def get_user_by_mobile_number(self, mobile_number: str) -> Optional[User]:
        return self._first(select(UserTable).where(UserTable.mobile_number == mobile_number), User)

    def list_users(self) -> List[User]:
        return self._all(select(UserTable).order_by(UserTable.id), User)

    def create_user(self, data: dict) -> User:
        if self.get_user_by_username(data["username"]):
            raise DuplicateResourceException("User", "username", data["username"])
        if self.get_user_by_email(data["email"]):
            raise DuplicateResourceException("User", "email", data["email"])
        try:
            return self._insert(UserTable, User, data)
        except IntegrityError:
            raise DuplicateResourceException("User", "username", data["username"])

    def update_user(self, user_id: int, changes: dict) -> Optional[User]:
        return self._update(UserTable, User, user_id, changes)

    def delete_user(self, user_id: int) -> bool:
        with self._session() as db:
            if db.get(UserTable, user_id) is None:
                return False

            # Memberships first so member_count stays in sync
            community_ids = db.scalars(
                select(CommunityMemberTable.community_id).where(CommunityMemberTable.user_id == user_id)
            ).all()
            db.execute(delete(CommunityMemberTable).where(CommunityMemberTable.user_id == user_id))
            if community_ids:
                db.execute(
                    update(CommunityTable)
                    .where(CommunityTable.id.in_(community_ids), CommunityTable.member_count > 0)
                    .values(member_count=CommunityTable.member_count - 1)
                )

            self._delete_community_rows(db, db.scalars(
                select(CommunityTable.id).where(CommunityTable.created_by == user_id)).all())
            self._delete_post_rows(db, db.scalars(
                select(PostTable.id).where(PostTable.user_id == user_id)).all())
            self._delete_job_rows(db, db.scalars(
                select(JobTable.id).where(JobTable.user_id == user_id)).all())
            self._delete_company_rows(db, db.scalars(
                select(CompanyTable.id).where(CompanyTable.owner_id == user_id)).all())

            db.execute(delete(ConnectionTable).where(
                or_(ConnectionTable.requester_id == user_id, ConnectionTable.receiver_id == user_id)))
            db.execute(delete(MessageTable).where(
                or_(MessageTable.sender_id == user_id, MessageTable.receiver_id == user_id)))
            db.execute(delete(JobApplicationTable).where(JobApplicationTable.applicant_id == user_id))
            db.execute(delete(LikeTable).where(LikeTable.user_id == user_id))
            db.execute(delete(CommentTable).where(CommentTable.user_id == user_id))
            db.execute(delete(RepostTable).where(RepostTable.user_id == user_id))
            db.execute(delete(SavedJobTable).where(SavedJobTable.user_id == user_id))
            db.execute(delete(PasswordResetRequestTable).where(PasswordResetRequestTable.user_id == user_id))
            db.execute(delete(UserTable).where(UserTable.id == user_id))

        logger.info(f"Deleted user {user_id} and related records")
        return True

    # ---------------------------------------------------------------- posts

    def create_post(self, data: dict) -> Post:
        return self._insert(PostTable, Post, data)

    def get_post(self, post_id: int) -> Optional[Post]:
        return self._get(PostTable, Post, post_id)

    def list_posts(self) -> List[Post]:
        return self._all(select(PostTable).order_by(PostTable.created_at.desc(), PostTable.id.desc()), Post)

    def list_posts_by_user(self, user_id: int) -> List[Post]:
        stmt = (select(PostTable).where(PostTable.user_id == user_id)
                .order_by(PostTable.created_at.desc(), PostTable.id.desc()))
        return self._all(stmt, Post)

    def list_posts_by_community(self, community_id: int) -> List[Post]:
        stmt = (select(PostTable).where(PostTable.community_id == community_id)
                .order_by(PostTable.created_at.desc(), PostTable.id.desc()))
        return self._all(stmt, Post)

    def list_posts_by_company(self, company_id: int) -> List[Post]:
        stmt = (select(PostTable).where(PostTable.company_id == company_id)
                .order_by(PostTable.created_at.desc(), PostTable.id.desc()))
        return self._all(stmt, Post)

    def update_post(self, post_id: int, changes: dict) -> Optional[Post]:
        return self._update(PostTable, Post, post_id, changes)

    def delete_post(self, post_id: int) -> bool:
        with self._session() as db:
            if db.get(PostTable, post_id) is None:
                return False
            self._delete_post_rows(db, [post_id])
        return True

    # ---------------------------------------------------------------- likes

    def get_like(self, user_id: int, post_id: int) -> Optional[Like]:
        stmt = select(LikeTable).where(LikeTable.user_id == user_id, LikeTable.post_id == post_id)
        return self._first(stmt, Like)

    def add_like(self, user_id: int, post_id: int) -> Like:
        existing = self.get_like(user_id, post_id)
        if existing:
            return existing
        try:
            return self._insert(LikeTable, Like, {"user_id": user_id, "post_id": post_id})
        except IntegrityError:
            # Lost a race with a concurrent like
            return self.get_like(user_id, post_id)

    def remove_like(self, user_id: int, post_id: int) -> bool:
        with self._session() as db:
            result = db.execute(
                delete(LikeTable).where(LikeTable.user_id == user_id, LikeTable.post_id == post_id)
            )
            return result.rowcount > 0

    def list_likes(self, post_id: int) -> List[Like]:
        stmt = select(LikeTable).where(LikeTable.post_id == post_id).order_by(LikeTable.id)
        return self._all(stmt, Like)

    # ------------------------------------------------------------- comments

    def create_comment(self, data: dict) -> Comment:
        return self._insert(CommentTable, Comment, data)

    def list_comments(self, post_id: int) -> List[Comment]:
        stmt = (select(CommentTable).where(CommentTable.post_id == post_id)
                .order_by(CommentTable.created_at, CommentTable.id))
        return self._all(stmt, Comment)

    # -------------------------------------------------------------- reposts

    def get_repost(self, user_id: int, post_id: int) -> Optional[Repost]:
        stmt = select(RepostTable).where(RepostTable.user_id == user_id, RepostTable.post_id == post_id)
        return self._first(stmt, Repost)

    def create_repost(self, user_id: int, post_id: int) -> Post:
        try:
            with self._session() as db:
                original = db.get(PostTable, post_id)
                if original is None:
                    raise ResourceNotFoundException("Post", post_id)
                existing = db.scalars(select(RepostTable).where(
                    RepostTable.user_id == user_id, RepostTable.post_id == post_id)).first()
                if existing:
                    raise DuplicateResourceException("Repost", "post_id", post_id)

                db.add(RepostTable(user_id=user_id, post_id=post_id))
                row = PostTable(
                    user_id=user_id,
                    content=original.content,
                    image_url=original.image_url,
                    community_id=original.community_id,
                    original_post_id=original.id,
                    reposted_by=user_id,
                )
                db.add(row)
                db.flush()
                return Post.model_validate(row)
        except IntegrityError:
            raise DuplicateResourceException("Repost", "post_id", post_id)

    def delete_repost(self, user_id: int, post_id: int) -> bool:
        with self._session() as db:
            result = db.execute(
                delete(RepostTable).where(RepostTable.user_id == user_id, RepostTable.post_id == post_id)
            )
            if result.rowcount == 0:
                return False
            repost_ids = db.scalars(select(PostTable.id).where(
                PostTable.original_post_id == post_id, PostTable.reposted_by == user_id)).all()
            self._delete_post_rows(db, repost_ids)
        return True

    def list_reposts(self, post_id: int) -> List[Repost]:
        stmt = select(RepostTable).where(RepostTable.post_id == post_id).order_by(RepostTable.id)
        return self._all(stmt, Repost)

    # ----------------------------------------------------------------- jobs

    def create_job(self, data: dict) -> Job:
        return self._insert(JobTable, Job, data)

    def get_job(self, job_id: int) -> Optional[Job]:
        return self._get(JobTable, Job, job_id)

    def list_jobs(self) -> List[Job]:
        return self._all(select(JobTable).order_by(JobTable.created_at.desc(), JobTable.id.desc()), Job)

    def list_jobs_by_user(self, user_id: int) -> List[Job]:
        stmt = (select(JobTable).where(JobTable.user_id == user_id)
                .order_by(JobTable.created_at.desc(), JobTable.id.desc()))
        return self._all(stmt, Job)

    def list_jobs_by_company(self, company_id: int) -> List[Job]:
        stmt = (select(JobTable).where(JobTable.company_id == company_id)
                .order_by(JobTable.created_at.desc(), JobTable.id.desc()))
        return self._all(stmt, Job)

    def update_job(self, job_id: int, changes: dict) -> Optional[Job]:
        return self._update(JobTable, Job, job_id, changes)

    def delete_job(self, job_id: int) -> bool:
        with self._session() as db:
            if db.get(JobTable, job_id) is None:
                return False
            self._delete_job_rows(db, [job_id])
        return True

    # ----------------------------------------------------------- saved jobs

    def _saved_stmt(self, user_id: int, job_id: int):
        return select(SavedJobTable).where(SavedJobTable.user_id == user_id, SavedJobTable.job_id == job_id)

    def save_job(self, user_id: int, job_id: int) -> SavedJob:
        existing = self._first(self._saved_stmt(user_id, job_id), SavedJob)
        if existing:
            return existing
        try:
            return self._insert(SavedJobTable, SavedJob, {"user_id": user_id, "job_id": job_id})
        except IntegrityError:
            return self._first(self._saved_stmt(user_id, job_id), SavedJob)

    def unsave_job(self, user_id: int, job_id: int) -> bool:
        with self._session() as db:
            result = db.execute(
                delete(SavedJobTable).where(SavedJobTable.user_id == user_id, SavedJobTable.job_id == job_id)
            )
            return result.rowcount > 0

    def is_job_saved(self, user_id: int, job_id: int) -> bool:
        return self._first(self._saved_stmt(user_id, job_id), SavedJob) is not None

    def list_saved_jobs(self, user_id: int) -> List[Job]:
        stmt = (select(JobTable)
                .join(SavedJobTable, SavedJobTable.job_id == JobTable.id)
                .where(SavedJobTable.user_id == user_id)
                .order_by(SavedJobTable.created_at.desc(), SavedJobTable.id.desc()))
        return self._all(stmt, Job)

    # --------------------------------------------------------- applications

    def create_application(self, data: dict) -> JobApplication:
        if self.get_application_for(data["job_id"], data["applicant_id"]):
            raise DuplicateResourceException("JobApplication", "job_id", data["job_id"])
        try:
            return self._insert(JobApplicationTable, JobApplication, data)
        except IntegrityError:
            raise DuplicateResourceException("JobApplication", "job_id", data["job_id"])

    def get_application(self, application_id: int) -> Optional[JobApplication]:
        return self._get(JobApplicationTable, JobApplication, application_id)

    def get_application_for(self, job_id: int, applicant_id: int) -> Optional[JobApplication]:
        stmt = select(JobApplicationTable).where(
            JobApplicationTable.job_id == job_id, JobApplicationTable.applicant_id == applicant_id)
        return self._first(stmt, JobApplication)

    def list_applications(self) -> List[JobApplication]:
        stmt = select(JobApplicationTable).order_by(
            JobApplicationTable.created_at.desc(), JobApplicationTable.id.desc())
        return self._all(stmt, JobApplication)

    def list_applications_by_applicant(self, applicant_id: int) -> List[JobApplication]:
        stmt = (select(JobApplicationTable).where(JobApplicationTable.applicant_id == applicant_id)
                .order_by(JobApplicationTable.created_at.desc(), JobApplicationTable.id.desc()))
        return self._all(stmt, JobApplication)

    def list_applications_by_job(self, job_id: int) -> List[JobApplication]:
        stmt = (select(JobApplicationTable).where(JobApplicationTable.job_id == job_id)
                .order_by(JobApplicationTable.created_at.desc(), JobApplicationTable.id.desc()))
        return self._all(stmt, JobApplication)

    def update_application_status(self, application_id: int, status: str) -> Optional[JobApplication]:
        return self._update(JobApplicationTable, JobApplication, application_id, {"status": status})

    # ---------------------------------------------------------- communities

    def create_community(self, data: dict) -> Community:
        if self.get_community_by_name(data["name"]):
            raise DuplicateResourceException("Community", "name", data["name"])
        try:
            return self._insert(CommunityTable, Community, {**data, "member_count": 0})
        except IntegrityError:
            raise DuplicateResourceException("Community", "name", data["name"])

    def get_community(self, community_id: int) -> Optional[Community]:
        return self._get(CommunityTable, Community, community_id)

    def get_community_by_name(self, name: str) -> Optional[Community]:
        return self._first(select(CommunityTable).where(CommunityTable.name == name), Community)

    def list_communities(self) -> List[Community]:
        stmt = select(CommunityTable).order_by(CommunityTable.created_at.desc(), CommunityTable.id.desc())
        return self._all(stmt, Community)

    def update_community(self, community_id: int, changes: dict) -> Optional[Community]:
        return self._update(CommunityTable, Community, community_id, changes)

    def delete_community(self, community_id: int) -> bool:
        with self._session() as db:
            if db.get(CommunityTable, community_id) is None:
                return False
            self._delete_community_rows(db, [community_id])
        return True

    def add_member(self, community_id: int, user_id: int, role: str = "member",
                   is_invited: bool = False) -> CommunityMember:
        try:
            with self._session() as db:
                if db.get(CommunityTable, community_id) is None:
                    raise ResourceNotFoundException("Community", community_id)
                row = CommunityMemberTable(user_id=user_id, community_id=community_id,
                                           role=role, is_invited=is_invited)
                db.add(row)
                db.flush()
                db.execute(
                    update(CommunityTable).where(CommunityTable.id == community_id)
                    .values(member_count=CommunityTable.member_count + 1)
                )
                return CommunityMember.model_validate(row)
        except IntegrityError:
            raise DuplicateResourceException("CommunityMember", "user_id", user_id)

    def remove_member(self, community_id: int, user_id: int) -> bool:
        with self._session() as db:
            result = db.execute(delete(CommunityMemberTable).where(
                CommunityMemberTable.community_id == community_id,
                CommunityMemberTable.user_id == user_id))
            if result.rowcount == 0:
                return False
            db.execute(
                update(CommunityTable)
                .where(CommunityTable.id == community_id, CommunityTable.member_count > 0)
                .values(member_count=CommunityTable.member_count - 1)
            )
        return True

    def is_member(self, community_id: int, user_id: int) -> bool:
        stmt = select(CommunityMemberTable).where(
            CommunityMemberTable.community_id == community_id, CommunityMemberTable.user_id == user_id)
        return self._first(stmt, CommunityMember) is not None

    def list_members(self, community_id: int) -> List[User]:
        stmt = (select(UserTable)
                .join(CommunityMemberTable, CommunityMemberTable.user_id == UserTable.id)
                .where(CommunityMemberTable.community_id == community_id)
                .order_by(CommunityMemberTable.id))
        return self._all(stmt, User)

    def list_user_communities(self, user_id: int) -> List[Community]:
        stmt = (select(CommunityTable)
                .join(CommunityMemberTable, CommunityMemberTable.community_id == CommunityTable.id)
                .where(CommunityMemberTable.user_id == user_id)
                .order_by(CommunityTable.created_at.desc(), CommunityTable.id.desc()))
        return self._all(stmt, Community)

    # ---------------------------------------------------------- connections

    def create_connection(self, requester_id: int, receiver_id: int) -> Connection:
        return self._insert(ConnectionTable, Connection,
                            {"requester_id": requester_id, "receiver_id": receiver_id,
                             "status": ConnectionStatus.pending.value})

    def get_connection(self, connection_id: int) -> Optional[Connection]:
        return self._get(ConnectionTable, Connection, connection_id)

    def find_active_connection(self, user_a: int, user_b: int) -> Optional[Connection]:
        stmt = select(ConnectionTable).where(
            or_(
                and_(ConnectionTable.requester_id == user_a, ConnectionTable.receiver_id == user_b),
                and_(ConnectionTable.requester_id == user_b, ConnectionTable.receiver_id == user_a),
            ),
            ConnectionTable.status.in_([ConnectionStatus.pending.value, ConnectionStatus.accepted.value]),
        )
        return self._first(stmt, Connection)

    def update_connection_status(self, connection_id: int, status: str) -> Optional[Connection]:
        return self._update(ConnectionTable, Connection, connection_id, {"status": status})

    def delete_connection(self, connection_id: int) -> bool:
        with self._session() as db:
            result = db.execute(delete(ConnectionTable).where(ConnectionTable.id == connection_id))
            return result.rowcount > 0

    def list_connections(self, user_id: int) -> List[Connection]:
        stmt = (select(ConnectionTable)
                .where(ConnectionTable.status == ConnectionStatus.accepted.value,
                       or_(ConnectionTable.requester_id == user_id, ConnectionTable.receiver_id == user_id))
                .order_by(ConnectionTable.created_at.desc(), ConnectionTable.id.desc()))
        return self._all(stmt, Connection)

    def list_pending_received(self, user_id: int) -> List[Connection]:
        stmt = (select(ConnectionTable)
                .where(ConnectionTable.status == ConnectionStatus.pending.value,
                       ConnectionTable.receiver_id == user_id)
                .order_by(ConnectionTable.created_at.desc(), ConnectionTable.id.desc()))
        return self._all(stmt, Connection)

    def list_pending_sent(self, user_id: int) -> List[Connection]:
        stmt = (select(ConnectionTable)
                .where(ConnectionTable.status == ConnectionStatus.pending.value,
                       ConnectionTable.requester_id == user_id)
                .order_by(ConnectionTable.created_at.desc(), ConnectionTable.id.desc()))
        return self._all(stmt, Connection)

    # ------------------------------------------------------------- messages

    def create_message(self, data: dict) -> Message:
        return self._insert(MessageTable, Message, data)

    def get_conversation(self, user_a: int, user_b: int) -> List[Message]:
        stmt = (select(MessageTable)
                .where(or_(
                    and_(MessageTable.sender_id == user_a, MessageTable.receiver_id == user_b),
                    and_(MessageTable.sender_id == user_b, MessageTable.receiver_id == user_a),
                ))
                .order_by(MessageTable.created_at, MessageTable.id))
        return self._all(stmt, Message)

    def list_received_messages(self, user_id: int) -> List[Message]:
        stmt = (select(MessageTable).where(MessageTable.receiver_id == user_id)
                .order_by(MessageTable.created_at.desc(), MessageTable.id.desc()))
        return self._all(stmt, Message)

    def mark_conversation_read(self, reader_id: int, sender_id: int) -> int:
        with self._session() as db:
            result = db.execute(
                update(MessageTable)
                .where(MessageTable.receiver_id == reader_id,
                       MessageTable.sender_id == sender_id,
                       MessageTable.is_read.is_(False))
                .values(is_read=True)
            )
            return result.rowcount

    def count_unread(self, user_id: int) -> int:
        with self._session() as db:
            return db.scalar(
                select(func.count(MessageTable.id))
                .where(MessageTable.receiver_id == user_id, MessageTable.is_read.is_(False))
            )

    # ------------------------------------------------------------ companies

    def create_company(self, data: dict) -> Company:
        return self._insert(CompanyTable, Company, data)

    def get_company(self, company_id: int) -> Optional[Company]:
        return self._get(CompanyTable, Company, company_id)

    def list_companies(self) -> List[Company]:
        stmt = select(CompanyTable).order_by(CompanyTable.created_at.desc(), CompanyTable.id.desc())
        return self._all(stmt, Company)

    def list_companies_by_owner(self, owner_id: int) -> List[Company]:
        stmt = (select(CompanyTable).where(CompanyTable.owner_id == owner_id)
                .order_by(CompanyTable.created_at.desc(), CompanyTable.id.desc()))
        return self._all(stmt, Company)

    def update_company(self, company_id: int, changes: dict) -> Optional[Company]:
        return self._update(CompanyTable, Company, company_id, changes)

    def delete_company(self, company_id: int) -> bool:
        with self._session() as db:
            if db.get(CompanyTable, company_id) is None:
                return False
            self._delete_company_rows(db, [company_id])
        return True

    # ------------------------------------------------ password reset requests

    def create_password_reset_request(self, user_id: int, email: str) -> PasswordResetRequest:
        return self._insert(PasswordResetRequestTable, PasswordResetRequest,
                            {"user_id": user_id, "email": email,
                             "status": ResetRequestStatus.pending.value})

    def get_password_reset_request(self, request_id: int) -> Optional[PasswordResetRequest]:
        return self._get(PasswordResetRequestTable, PasswordResetRequest, request_id)

    def get_pending_reset_request(self, user_id: int) -> Optional[PasswordResetRequest]:
        stmt = select(PasswordResetRequestTable).where(
            PasswordResetRequestTable.user_id == user_id,
            PasswordResetRequestTable.status == ResetRequestStatus.pending.value)
        return self._first(stmt, PasswordResetRequest)

    def list_password_reset_requests(self, status: Optional[str] = None) -> List[PasswordResetRequest]:
        stmt = select(PasswordResetRequestTable)
        if status is not None:
            stmt = stmt.where(PasswordResetRequestTable.status == status)
        stmt = stmt.order_by(PasswordResetRequestTable.created_at.desc(), PasswordResetRequestTable.id.desc())
        return self._all(stmt, PasswordResetRequest)

    def update_password_reset_request(self, request_id: int, changes: dict) -> Optional[PasswordResetRequest]:
        return self._update(PasswordResetRequestTable, PasswordResetRequest, request_id, changes)

    def delete_password_reset_request(self, request_id: int) -> bool:
        with self._session() as db:
            result = db.execute(
                delete(PasswordResetRequestTable).where(PasswordResetRequestTable.id == request_id))
            return result.rowcount > 0
