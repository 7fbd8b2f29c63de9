import logging
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from scman.core.config import settings

logger = logging.getLogger(__name__)

def _build_engine(database_url: str):
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    # Writers wait up to `timeout` seconds for the database lock.
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine

engine = _build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db():
    """Create every table registered on the declarative base"""
    from scman.db.base import Base
    # registers the mappers
    from scman.models import user, invite, response, event as event_model  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("📦 Database tables ready")
