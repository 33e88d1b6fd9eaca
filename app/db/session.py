# app/db/session.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

database_uri = settings.SQLALCHEMY_DATABASE_URI or "sqlite:///./art_gallery.db"


def build_engine(uri: str):
    """
    Create the engine with a bounded connection pool.

    In-memory SQLite shares a single connection so every session sees the
    same database; other SQLite files keep the default pool.
    """
    if uri.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if uri in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(uri, **kwargs)

    return create_engine(
        uri,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_MIN,
        max_overflow=max(settings.DB_POOL_MAX - settings.DB_POOL_MIN, 0),
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=1800,
    )


engine = build_engine(database_uri)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Dependency to get DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
