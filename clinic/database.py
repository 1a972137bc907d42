"""
Database connection and session management.

The clinic runs on SQLite by default; any SQLAlchemy URL set in
DATABASE_URL works (PostgreSQL in the hosted deployment).
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

is_sqlite = settings.database_url.startswith("sqlite")

# Requests are served from a threadpool, so SQLite connections must be shareable
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if is_sqlite else {},
    pool_pre_ping=not is_sqlite
)

if is_sqlite:
    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        """Patient deletion cascades to appointments and follow-ups only with this pragma on."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()

def get_db():
    """
    Request-scoped session dependency.

    Yields:
        Session: Closed once the response is sent
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
