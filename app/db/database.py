# app/db/database.py
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.logging import logger
from app.db.session import SessionLocal, engine

T = TypeVar("T")


class Database:
    """
    Thin adapter over the SQLAlchemy engine and its connection pool.

    Exposes raw parameterized queries, a transaction helper that commits or
    rolls back as a unit, a connectivity probe and pool statistics.
    """

    def __init__(self, bind: Engine, session_factory: sessionmaker):
        self.engine = bind
        self.session_factory = session_factory

    def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute a parameterized statement and return rows as dicts.
        Statements run in their own transaction, committed on success.
        """
        start = time.perf_counter()
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), params or {})
                rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
        except Exception:
            logger.bind(query=sql[:200]).exception("Database query failed")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        if duration_ms > settings.SLOW_QUERY_MS:
            logger.warning(f"Slow query ({duration_ms:.0f}ms): {sql[:100]}...")
        return rows

    def transaction(self, callback: Callable[[Session], T], session: Optional[Session] = None) -> T:
        """
        Run `callback` inside a single transaction.

        When `session` is given the callback joins that session and the
        transaction is committed or rolled back on it; otherwise a fresh
        session is opened and closed around the callback.
        """
        owns_session = session is None
        if session is None:
            session = self.session_factory()
        try:
            result = callback(session)
            session.commit()
            return result
        except Exception as e:
            session.rollback()
            logger.warning(f"Transaction rolled back: {e}")
            raise
        finally:
            if owns_session:
                session.close()

    def check_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def get_stats(self) -> Dict[str, Any]:
        """Connection pool statistics; fields a pool does not track are omitted."""
        pool = self.engine.pool
        stats: Dict[str, Any] = {"pool": type(pool).__name__}
        for name, attr in (
            ("size", "size"),
            ("checkedIn", "checkedin"),
            ("checkedOut", "checkedout"),
            ("overflow", "overflow"),
        ):
            method = getattr(pool, attr, None)
            if callable(method):
                stats[name] = method()
        stats["status"] = pool.status()
        return stats

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


database = Database(engine, SessionLocal)
