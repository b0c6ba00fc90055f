from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError, OperationalError
import logging
from contextlib import contextmanager

from app.core.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.sync_database_uri.lower()

# Pre-ping to handle dropped connections
engine = create_engine(
	settings.sync_database_uri,
	echo=settings.SQLALCHEMY_ECHO,
	pool_pre_ping=True,
	pool_recycle=3600,   # Recycle connections after 1 hour
	connect_args={"check_same_thread": False} if _is_sqlite else {}
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def test_connection() -> tuple[bool, str]:
	"""Test database connection and return (success, error_message)"""
	try:
		with engine.connect() as conn:
			conn.execute(text("SELECT 1"))
		return True, ""
	except OperationalError as e:
		error_lower = str(e).lower()
		if "could not connect" in error_lower or "connection refused" in error_lower:
			return False, f"Database server is not reachable at {settings.DB_HOST}:{settings.DB_PORT}"
		if "authentication failed" in error_lower:
			return False, "Database authentication failed. Check your DB_USER and DB_PASSWORD credentials."
		return False, f"Database connection error: {e}"
	except SQLAlchemyError as e:
		return False, f"Unexpected database error: {str(e)}"


@contextmanager
def get_db_session():
	"""Context manager for database sessions outside of request handling"""
	db = SessionLocal()
	try:
		yield db
	except SQLAlchemyError as e:
		logger.error(f"Database session error: {str(e)}", exc_info=True)
		db.rollback()
		raise
	finally:
		db.close()


def get_db():
	"""Dependency function for FastAPI routes"""
	db = SessionLocal()
	try:
		yield db
	except SQLAlchemyError as e:
		logger.error(f"Database session error: {str(e)}", exc_info=True)
		db.rollback()
		raise
	finally:
		db.close()
