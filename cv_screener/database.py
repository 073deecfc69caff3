from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from cv_screener.core.config import settings

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE on detail rows unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    """
    Engine for PostgreSQL (deployed) or SQLite (local development/testing).
    Extra kwargs (e.g. poolclass) pass straight to create_engine.
    """
    if url.startswith("postgresql"):
        return create_engine(url, pool_pre_ping=True, **kwargs)

    engine = create_engine(url, connect_args={"check_same_thread": False}, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Session Provider: one session per request.
    Services own their commits; the per-file pipeline opens its own sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """
    Session factory for work that outlives the request (background pipeline).
    Each unit of background work opens and closes its own session.
    """
    return SessionLocal


def init_db(bind: Engine = None):
    """Create the submission, result and caller tables if they are missing."""
    from cv_screener.models import profile, keyword_list, submission, cv_result  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
