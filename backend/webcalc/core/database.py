"""
Database configuration and session management
"""
import logging
import re
import time
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from webcalc.core.config import get_settings
from webcalc.core.logging_config import LoggingConfig
from webcalc.core.metrics import (db_connection_pool_overflow,
                                  db_connection_pool_size,
                                  db_queries_total,
                                  db_query_duration_seconds)

# Lazy initialization - don't create engine at module level
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

# Base class for models
Base = declarative_base()

_TABLE_PATTERNS = {
    "select": re.compile(r"\bFROM\s+([\w\.\"]+)", re.IGNORECASE),
    "insert": re.compile(r"\bINTO\s+([\w\.\"]+)", re.IGNORECASE),
    "update": re.compile(r"^\s*UPDATE\s+([\w\.\"]+)", re.IGNORECASE),
    "delete": re.compile(r"\bFROM\s+([\w\.\"]+)", re.IGNORECASE),
}


def _statement_labels(statement: str):
    """Extract (operation, table) labels from a SQL statement"""
    stripped = statement.strip()
    operation = stripped.split()[0].lower() if stripped else "unknown"
    table = "unknown"
    pattern = _TABLE_PATTERNS.get(operation)
    if pattern:
        match = pattern.search(stripped)
        if match:
            table = match.group(1).strip('";').lower()
    return operation, table


def _update_pool_metrics(engine: Engine):
    pool = engine.pool
    db_connection_pool_size.labels(state="active").set(pool.checkedout())
    db_connection_pool_size.labels(state="idle").set(pool.size() - pool.checkedout())
    db_connection_pool_overflow.set(pool.overflow())


def _setup_db_metrics(engine: Engine):
    """Setup SQLAlchemy event listeners for database metrics"""

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if conn.info.get('query_start_time'):
            duration = time.time() - conn.info['query_start_time'].pop()
            operation, table = _statement_labels(statement)
            db_queries_total.labels(operation=operation, table=table).inc()
            db_query_duration_seconds.labels(operation=operation, table=table).observe(duration)

    # Pool gauges only make sense for a sized pool (PostgreSQL, file SQLite)
    if isinstance(engine.pool, QueuePool):
        @event.listens_for(engine, "checkout")
        def receive_checkout(dbapi_conn, connection_record, connection_proxy):
            _update_pool_metrics(engine)

        @event.listens_for(engine, "checkin")
        def receive_checkin(dbapi_conn, connection_record):
            _update_pool_metrics(engine)


def get_engine() -> Engine:
    """Get or create database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        LoggingConfig.configure()

        url = settings.database_url
        if url.startswith("postgresql"):
            engine_kwargs = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "connect_args": {
                    "connect_timeout": 5,
                    "options": "-c statement_timeout=5000"
                },
            }
        else:
            # SQLite: sessions are shared with the worker threads FastAPI runs sync handlers on
            engine_kwargs = {"connect_args": {"timeout": 5, "check_same_thread": False}}

        _engine = create_engine(
            url,
            pool_pre_ping=True,
            echo=settings.log_sqlalchemy,
            **engine_kwargs
        )

        sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
        if not settings.log_sqlalchemy:
            sqlalchemy_logger.setLevel(logging.WARNING)
            sqlalchemy_logger.propagate = False

        _setup_db_metrics(_engine)

    return _engine


def get_session_local() -> sessionmaker:
    """Get or create session factory (lazy initialization)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
