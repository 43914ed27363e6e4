# -*- coding: utf-8 -*-
"""
SQLAlchemy database configuration for the troop events service.

Supported backends are SQLite and PostgreSQL; both provide the partial unique
index and the ON CONFLICT upsert the core relies on.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker

from troop_events.config import Config
from troop_events.exceptions import EventCoreError, PersistenceFailure

SUPPORTED_BACKENDS = ("sqlite", "postgresql")

# Execution option asking the SQLite begin hook for the write lock
WRITE_LOCK = "sqlite_write_lock"


def normalize_url(url):
    # Hosted PostgreSQL still hands out the old "postgres://" scheme
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def make_engine(url):
    url = normalize_url(url)

    backend = make_url(url).get_backend_name()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unsupported database backend '{backend}', use one of {', '.join(SUPPORTED_BACKENDS)}")

    connect_args = {}
    if backend == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": Config.DB_LOCK_TIMEOUT}

    db_engine = create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_recycle=3600,
    )

    if backend == "sqlite":
        _configure_sqlite(db_engine)

    return db_engine


def _configure_sqlite(db_engine):
    """
    SQLite ignores FOR UPDATE, so write transactions take the write lock up
    front (BEGIN IMMEDIATE) and queue behind each other. Reads use a deferred
    BEGIN and, in WAL mode, never block writers. Foreign keys are off by
    default and must be enabled per connection.
    """

    @event.listens_for(db_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        # In-memory databases answer "memory" and stay as they are
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(db_engine, "begin")
    def on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


engine = make_engine(Config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _begin_write(db: Session):
    if db.get_bind().dialect.name != "sqlite":
        return
    # A read snapshot left open by earlier queries cannot be upgraded safely
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={WRITE_LOCK: True})


@contextmanager
def atomic(db: Session):
    """
    Runs a block as one write transaction: commits on success, rolls
    everything back on any failure. Storage errors come out as a single
    PersistenceFailure.
    """
    try:
        _begin_write(db)
        yield db
        db.commit()
    except EventCoreError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Transaction rolled back: {e}")
        raise PersistenceFailure(str(getattr(e, "orig", None) or e)) from e


def upsert(db: Session, model, values, conflict_columns, update_columns):
    """INSERT ... ON CONFLICT DO UPDATE on the given unique columns."""
    table = model.__table__
    dialect = db.get_bind().dialect.name

    if dialect not in SUPPORTED_BACKENDS:
        raise PersistenceFailure(f"Upsert is not supported on {dialect}")

    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    stmt = insert(table).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={c: stmt.excluded[c] for c in update_columns},
    )
    db.execute(stmt)
