"""
Shared fixtures.

Each test gets its own SQLite file and media directory. The app runs
against them through dependency overrides; tests read results back through
the ``db`` session (call ``db.expire_all()`` after a request to see its
writes).
"""

import os
import tempfile
from datetime import datetime
from types import SimpleNamespace

# before anything from forum reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="forum-media-")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEBUG"] = "False"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from forum.main import app
from forum.database import create_tables, get_db
from forum.auth.models import User
from forum.auth.utils import create_access_token, hash_password
from forum.comments.models import Comment
from forum.groups.models import Group
from forum.posts.models import Post
from forum.storage import LocalBlobStore, get_blob_store

PASSWORD = "HumanAction123$"
MISSING_ID = "601d0b50d91d180dd10d8f7a601d0b50"


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


# ============================================================================
# Database and app
# ============================================================================

@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once"""
    return hash_password(PASSWORD)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'forum.db'}",
        connect_args={"check_same_thread": False},
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine)()
    yield session
    session.close()


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "media"), "/media")


@pytest.fixture
def client(engine, blob_store):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def server(client):
    """same app, but unhandled errors come back as 500 responses"""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def break_commits(monkeypatch):
    """call to make every later commit fail like a lost database connection"""
    def _break():
        def failing_commit(self):
            raise RuntimeError("database went away")
        monkeypatch.setattr(Session, "commit", failing_commit)
    return _break


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_user(db, password_hash):
    def _make(username, **fields):
        user = User(
            username=username,
            email=fields.pop("email", f"{username}@example.com"),
            name=fields.pop("name", username.title()),
            hashed_password=password_hash,
            **fields
        )
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_group(db):
    def _make(name, admin, mods=(), members=(), banned=(), description="For general discussion"):
        group = Group(name=name, description=description, admin_id=admin.id)
        group.members = [admin, *mods, *members]
        group.mods = [admin, *mods]
        group.banned = list(banned)
        db.add(group)
        db.commit()
        return group
    return _make


@pytest.fixture
def make_post(db):
    def _make(group, author, title="Praxeology Rules", text="Value is subjective.", **fields):
        post = Post(group_id=group.id, author_id=author.id, title=title, text=text, **fields)
        db.add(post)
        db.commit()
        return post
    return _make


@pytest.fixture
def make_comment(db):
    def _make(post, author, text="Agreed."):
        comment = Comment(post_id=post.id, author_id=author.id, text=text)
        db.add(comment)
        db.commit()
        return comment
    return _make


@pytest.fixture
def general(make_user, make_group):
    """
    The "general" group:
    praxman is admin, moddy a mod, carol a plain member, imbanned banned,
    notreason has never joined.
    """
    admin = make_user("praxman")
    mod = make_user("moddy")
    member = make_user("carol")
    banned = make_user("imbanned")
    outsider = make_user("notreason")
    group = make_group("general", admin, mods=[mod], members=[member], banned=[banned])
    return SimpleNamespace(
        group=group,
        admin=admin,
        mod=mod,
        member=member,
        banned=banned,
        outsider=outsider,
    )


@pytest.fixture
def old_timestamp():
    return datetime(2020, 1, 1, 12, 0, 0)
