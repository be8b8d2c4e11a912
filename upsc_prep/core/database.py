# upsc_prep/core/database.py
import logging
import time
from contextlib import contextmanager
from typing import Dict, Any, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import config

logger = logging.getLogger(__name__)

Base = declarative_base()


class DatabaseManager:
    """Owns the SQLAlchemy engine and session factory"""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or config.DATABASE_URL
        logger.info("🔄 Initializing Database Manager")
        self.engine = self._create_engine()
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False,
                                         expire_on_commit=False)

    def _create_engine(self):
        if self.database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            # A bare in-memory URL must share one connection or every session sees an empty db
            if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            return create_engine(self.database_url, echo=config.DB_ECHO, **kwargs)

        return create_engine(
            self.database_url,
            echo=config.DB_ECHO,
            pool_size=config.DB_POOL_SIZE,
            pool_pre_ping=True,
        )

    def create_tables(self):
        """Create all tables known to the ORM metadata"""
        from . import models  # noqa: F401  registers the mappers

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"✅ Database tables ready ({len(Base.metadata.tables)} tables)")

    def drop_tables(self):
        from . import models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def validate_connection(self) -> Dict[str, Any]:
        """Run a trivial query and report connectivity"""
        start = time.time()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "overall": True,
                "dialect": self.engine.dialect.name,
                "response_time_ms": round((time.time() - start) * 1000, 2),
            }
        except Exception as e:
            logger.error(f"❌ Database validation failed: {e}")
            return {"overall": False, "dialect": self.engine.dialect.name, "error": str(e)}

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope for work done outside a request"""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        self.engine.dispose()
        logger.info("✅ Database engine disposed")


# Singleton pattern for database manager
_db_manager = None


def get_db_manager() -> DatabaseManager:
    """Get database manager instance (singleton)"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def close_db_manager():
    """Close database manager instance"""
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session"""
    session = get_db_manager().SessionLocal()
    try:
        yield session
    finally:
        session.close()
