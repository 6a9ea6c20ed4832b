"""
Storage tests run against both IStorage implementations:
MemStorage and DatabaseStorage on in-memory SQLite.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from harmony.core.exceptions import (
    DuplicateResourceException, ResourceNotFoundException, StorageException,
)
from harmony.db.tables import create_tables
from harmony.storage import MemStorage
from harmony.storage.database import DatabaseStorage


def sqlite_storage():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(engine)
    return DatabaseStorage(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))


@pytest.fixture(params=["memory", "database"])
def store(request):
    if request.param == "memory":
        return MemStorage()
    return sqlite_storage()


def add_user(store, username, **fields):
    return store.create_user({
        "username": username,
        "password": "hashed",
        "email": f"{username}@example.com",
        "name": username.title(),
        **fields,
    })


def add_job(store, user_id, **fields):
    return store.create_job({
        "title": "Engineer", "company": "Acme", "location": "Remote",
        "description": "Build", "skills": ["Python"], "user_id": user_id, **fields,
    })


class TestUsers:

    def test_create_and_lookup(self, store):
        user = add_user(store, "alice", mobile_number="5551234567", skills=["Go"])
        assert user.id > 0
        assert user.privacy_settings == {"profile_visibility": "all", "digital_cv_visibility": "all"}
        assert store.get_user(user.id).skills == ["Go"]
        assert store.get_user_by_username("alice").id == user.id
        assert store.get_user_by_email("ALICE@EXAMPLE.COM").id == user.id
        assert store.get_user_by_mobile_number("5551234567").id == user.id
        assert store.get_user(999) is None

    def test_duplicates_raise(self, store):
        add_user(store, "alice")
        with pytest.raises(DuplicateResourceException):
            add_user(store, "alice")
        with pytest.raises(DuplicateResourceException):
            store.create_user({"username": "other", "password": "x",
                               "email": "Alice@example.com", "name": "Other"})

    def test_update(self, store):
        user = add_user(store, "alice")
        updated = store.update_user(user.id, {"bio": "Hi", "experiences": [{"company": "Acme"}]})
        assert updated.bio == "Hi"
        assert store.get_user(user.id).experiences == [{"company": "Acme"}]
        assert store.update_user(999, {"bio": "x"}) is None

    def test_delete_cascades(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        post = store.create_post({"user_id": alice.id, "content": "hello"})
        bob_post = store.create_post({"user_id": bob.id, "content": "bob"})
        store.add_like(alice.id, bob_post.id)
        store.create_comment({"user_id": alice.id, "post_id": bob_post.id, "content": "nice"})
        job = add_job(store, bob.id)
        store.create_application({"job_id": job.id, "applicant_id": alice.id, "status": "applied"})
        community = store.create_community({"name": "C", "description": "d", "created_by": bob.id})
        store.add_member(community.id, alice.id)
        store.create_message({"sender_id": bob.id, "receiver_id": alice.id, "content": "hi"})
        store.create_connection(alice.id, bob.id)

        assert store.delete_user(alice.id) is True
        assert store.get_user(alice.id) is None
        assert store.get_post(post.id) is None
        assert store.list_likes(bob_post.id) == []
        assert store.list_comments(bob_post.id) == []
        assert store.list_applications_by_job(job.id) == []
        assert store.get_community(community.id).member_count == 0
        assert store.list_received_messages(alice.id) == []
        assert store.list_pending_sent(alice.id) == []
        assert store.delete_user(alice.id) is False

    def test_delete_removes_owned_communities_and_companies(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        community = store.create_community({"name": "C", "description": "d", "created_by": alice.id})
        company = store.create_company({"name": "Acme", "owner_id": alice.id})
        bob_job = add_job(store, bob.id, company_id=company.id)

        store.delete_user(alice.id)
        assert store.get_community(community.id) is None
        assert store.get_company(company.id) is None
        assert store.get_job(bob_job.id).company_id is None


class TestPosts:

    def test_ordering(self, store):
        user = add_user(store, "alice")
        first = store.create_post({"user_id": user.id, "content": "1"})
        second = store.create_post({"user_id": user.id, "content": "2"})
        assert [p.id for p in store.list_posts()] == [second.id, first.id]
        assert [p.id for p in store.list_posts_by_user(user.id)] == [second.id, first.id]

    def test_likes_are_idempotent(self, store):
        user = add_user(store, "alice")
        post = store.create_post({"user_id": user.id, "content": "1"})
        assert store.add_like(user.id, post.id).id == store.add_like(user.id, post.id).id
        assert len(store.list_likes(post.id)) == 1
        assert store.remove_like(user.id, post.id) is True
        assert store.remove_like(user.id, post.id) is False

    def test_comments_oldest_first(self, store):
        user = add_user(store, "alice")
        post = store.create_post({"user_id": user.id, "content": "1"})
        store.create_comment({"user_id": user.id, "post_id": post.id, "content": "a"})
        store.create_comment({"user_id": user.id, "post_id": post.id, "content": "b"})
        assert [c.content for c in store.list_comments(post.id)] == ["a", "b"]

    def test_repost_lifecycle(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        post = store.create_post({"user_id": alice.id, "content": "original", "image_url": "/uploads/x.png"})

        shared = store.create_repost(bob.id, post.id)
        assert shared.user_id == bob.id
        assert shared.original_post_id == post.id
        assert shared.reposted_by == bob.id
        assert shared.image_url == "/uploads/x.png"
        assert store.get_repost(bob.id, post.id) is not None

        with pytest.raises(DuplicateResourceException):
            store.create_repost(bob.id, post.id)
        with pytest.raises(ResourceNotFoundException):
            store.create_repost(bob.id, 999)

        assert store.delete_repost(bob.id, post.id) is True
        assert store.get_post(shared.id) is None
        assert store.list_reposts(post.id) == []
        assert store.delete_repost(bob.id, post.id) is False

    def test_deleting_repost_copy_clears_repost(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        post = store.create_post({"user_id": alice.id, "content": "original"})
        shared = store.create_repost(bob.id, post.id)

        assert store.delete_post(shared.id) is True
        assert store.get_repost(bob.id, post.id) is None
        assert store.list_reposts(post.id) == []
        again = store.create_repost(bob.id, post.id)
        assert again.original_post_id == post.id

    def test_delete_post_cascades(self, store):
        user = add_user(store, "alice")
        post = store.create_post({"user_id": user.id, "content": "1"})
        store.add_like(user.id, post.id)
        store.create_comment({"user_id": user.id, "post_id": post.id, "content": "c"})
        assert store.delete_post(post.id) is True
        assert store.list_likes(post.id) == []
        assert store.list_comments(post.id) == []
        assert store.delete_post(post.id) is False


class TestJobs:

    def test_saved_jobs(self, store):
        rita = add_user(store, "rita", is_recruiter=True)
        alice = add_user(store, "alice")
        job = add_job(store, rita.id)
        assert store.save_job(alice.id, job.id).id == store.save_job(alice.id, job.id).id
        assert store.is_job_saved(alice.id, job.id)
        assert [j.id for j in store.list_saved_jobs(alice.id)] == [job.id]
        assert store.unsave_job(alice.id, job.id) is True
        assert store.unsave_job(alice.id, job.id) is False

    def test_applications(self, store):
        rita = add_user(store, "rita", is_recruiter=True)
        alice = add_user(store, "alice")
        job = add_job(store, rita.id)
        application = store.create_application(
            {"job_id": job.id, "applicant_id": alice.id, "status": "applied", "note": "Hi"})
        with pytest.raises(DuplicateResourceException):
            store.create_application({"job_id": job.id, "applicant_id": alice.id, "status": "applied"})

        assert store.get_application_for(job.id, alice.id).id == application.id
        assert store.update_application_status(application.id, "interviewed").status == "interviewed"
        assert [a.id for a in store.list_applications_by_applicant(alice.id)] == [application.id]
        assert len(store.list_applications()) == 1

    def test_delete_job_cascades(self, store):
        rita = add_user(store, "rita", is_recruiter=True)
        alice = add_user(store, "alice")
        job = add_job(store, rita.id)
        store.save_job(alice.id, job.id)
        store.create_application({"job_id": job.id, "applicant_id": alice.id, "status": "applied"})
        assert store.delete_job(job.id) is True
        assert store.list_saved_jobs(alice.id) == []
        assert store.list_applications() == []


class TestCommunities:

    def test_member_count_tracks_members(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        community = store.create_community({"name": "C", "description": "d", "created_by": alice.id})
        assert community.member_count == 0

        store.add_member(community.id, alice.id, role="admin")
        membership = store.add_member(community.id, bob.id, is_invited=True)
        assert membership.is_invited is True
        assert store.get_community(community.id).member_count == 2
        assert [u.id for u in store.list_members(community.id)] == [alice.id, bob.id]
        assert [c.id for c in store.list_user_communities(bob.id)] == [community.id]

        with pytest.raises(DuplicateResourceException):
            store.add_member(community.id, bob.id)
        with pytest.raises(ResourceNotFoundException):
            store.add_member(999, bob.id)

        assert store.remove_member(community.id, bob.id) is True
        assert store.remove_member(community.id, bob.id) is False
        assert store.get_community(community.id).member_count == 1

    def test_unique_name(self, store):
        alice = add_user(store, "alice")
        store.create_community({"name": "C", "description": "d", "created_by": alice.id})
        with pytest.raises(DuplicateResourceException):
            store.create_community({"name": "C", "description": "again", "created_by": alice.id})

    def test_delete_detaches_posts(self, store):
        alice = add_user(store, "alice")
        community = store.create_community({"name": "C", "description": "d", "created_by": alice.id})
        post = store.create_post({"user_id": alice.id, "content": "x", "community_id": community.id})
        assert store.delete_community(community.id) is True
        assert store.get_post(post.id).community_id is None


class TestConnectionsAndMessages:

    def test_connection_queries(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        connection = store.create_connection(alice.id, bob.id)
        assert connection.status == "pending"
        assert store.find_active_connection(bob.id, alice.id).id == connection.id
        assert [c.id for c in store.list_pending_received(bob.id)] == [connection.id]
        assert [c.id for c in store.list_pending_sent(alice.id)] == [connection.id]

        store.update_connection_status(connection.id, "accepted")
        assert [c.id for c in store.list_connections(bob.id)] == [connection.id]
        assert store.list_pending_received(bob.id) == []

        store.update_connection_status(connection.id, "rejected")
        assert store.find_active_connection(alice.id, bob.id) is None
        assert store.delete_connection(connection.id) is True
        assert store.delete_connection(connection.id) is False

    def test_messages(self, store):
        alice = add_user(store, "alice")
        bob = add_user(store, "bob")
        store.create_message({"sender_id": alice.id, "receiver_id": bob.id, "content": "1"})
        store.create_message({"sender_id": bob.id, "receiver_id": alice.id, "content": "2"})
        store.create_message({"sender_id": alice.id, "receiver_id": bob.id, "content": "3"})

        assert [m.content for m in store.get_conversation(bob.id, alice.id)] == ["1", "2", "3"]
        assert [m.content for m in store.list_received_messages(bob.id)] == ["3", "1"]
        assert store.count_unread(bob.id) == 2
        assert store.mark_conversation_read(bob.id, alice.id) == 2
        assert store.count_unread(bob.id) == 0
        assert store.count_unread(alice.id) == 1


class TestCompaniesAndResets:

    def test_company_lifecycle(self, store):
        rita = add_user(store, "rita", is_recruiter=True)
        company = store.create_company({"name": "Acme", "owner_id": rita.id})
        post = store.create_post({"user_id": rita.id, "content": "news", "company_id": company.id})
        assert [p.id for p in store.list_posts_by_company(company.id)] == [post.id]
        assert store.update_company(company.id, {"size": "10-50"}).size == "10-50"
        assert [c.id for c in store.list_companies_by_owner(rita.id)] == [company.id]

        assert store.delete_company(company.id) is True
        assert store.get_post(post.id).company_id is None
        assert store.delete_company(company.id) is False

    def test_reset_requests(self, store):
        alice = add_user(store, "alice")
        request = store.create_password_reset_request(alice.id, alice.email)
        assert request.status == "pending"
        assert store.get_pending_reset_request(alice.id).id == request.id
        assert len(store.list_password_reset_requests("pending")) == 1

        store.update_password_reset_request(request.id, {"status": "denied", "admin_notes": "no"})
        assert store.get_pending_reset_request(alice.id) is None
        assert store.list_password_reset_requests("pending") == []
        assert len(store.list_password_reset_requests()) == 1

        assert store.delete_password_reset_request(request.id) is True
        assert store.get_password_reset_request(request.id) is None


class TestDatabaseErrors:

    def test_sql_failure_becomes_storage_exception(self):
        engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
        store = DatabaseStorage(sessionmaker(bind=engine, expire_on_commit=False))
        with pytest.raises(StorageException):
            store.list_posts()

