from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from taskboard.core.config import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    connect_args = {"check_same_thread": False} if settings.is_sqlite else {}
    engine = create_engine(settings.database_url, echo=settings.sql_echo, connect_args=connect_args)
    if settings.is_sqlite:
        enable_sqlite_foreign_keys(engine)
        enable_sqlite_immediate_begin(engine)
    return engine


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def enable_sqlite_immediate_begin(engine: Engine) -> None:
    """Start every SQLite transaction with ``BEGIN IMMEDIATE``.

    SQLite ignores ``FOR UPDATE``; taking the write lock when the transaction
    starts is what serialises group locks there.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, _record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = build_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
