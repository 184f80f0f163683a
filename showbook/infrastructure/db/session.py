# showbook/infrastructure/db/session.py

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.engine import Engine
from contextlib import contextmanager
from dotenv import load_dotenv
import os

load_dotenv()


# -----------------------------
# Database URL
# -----------------------------
DEFAULT_DATABASE_URL = "sqlite:///./showbook.db"

DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _connect_args(url: str) -> dict:
    # FastAPI runs sync routes in a worker thread pool.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# -----------------------------
# Engine
# -----------------------------
engine: Engine = create_engine(
    DATABASE_URL,
    echo=False,
    future=True,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)


def enable_sqlite_write_locks(target: Engine) -> Engine:
    """
    Every SQLite transaction starts with BEGIN IMMEDIATE, so a unit of
    work holds the database write lock from its first read until commit.
    Other connections wait (pysqlite busy timeout) instead of reading
    stale ticket counts. No-op for other backends.
    """
    if target.dialect.name != "sqlite":
        return target

    @event.listens_for(target, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(target, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return target


enable_sqlite_write_locks(engine)


# -----------------------------
# Base Class for Models
# -----------------------------
class Base(DeclarativeBase):
    pass


# -----------------------------
# Session Factory
# -----------------------------
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


# -----------------------------
# Context Manager (Non-FastAPI usage)
# -----------------------------
@contextmanager
def get_db_session():
    """
    One unit of work: commits if the block completes,
    rolls back every write of the block otherwise.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
