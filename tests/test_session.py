import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.db.models import Base, User
from taskboard.db.session import enable_sqlite_foreign_keys, enable_sqlite_immediate_begin, session_scope


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    enable_sqlite_immediate_begin(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal


def count_users(TestingSessionLocal) -> int:
    db = TestingSessionLocal()
    try:
        return db.query(User).count()
    finally:
        db.close()


def test_session_scope_commits_on_success():
    TestingSessionLocal = make_session_factory()

    with session_scope(TestingSessionLocal) as db:
        db.add(User(email="kept@taskboard.local"))

    assert count_users(TestingSessionLocal) == 1


def test_session_scope_rolls_back_and_reraises():
    TestingSessionLocal = make_session_factory()

    with pytest.raises(RuntimeError):
        with session_scope(TestingSessionLocal) as db:
            db.add(User(email="dropped@taskboard.local"))
            db.flush()
            raise RuntimeError("abort seed")

    assert count_users(TestingSessionLocal) == 0
