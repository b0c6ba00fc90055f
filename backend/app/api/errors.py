import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
	DuplicateLineError,
	DuplicateStationError,
	InvalidSectionSetError,
	LineNotFoundError,
	SectionError,
	StationInUseError,
	StationNotFoundError,
	SubwayError,
)

logger = logging.getLogger(__name__)

# First match wins, keep subclasses ahead of their bases
ERROR_STATUS = [
	(LineNotFoundError, status.HTTP_404_NOT_FOUND),
	(StationNotFoundError, status.HTTP_404_NOT_FOUND),
	(DuplicateLineError, status.HTTP_409_CONFLICT),
	(DuplicateStationError, status.HTTP_409_CONFLICT),
	(StationInUseError, status.HTTP_409_CONFLICT),
	(InvalidSectionSetError, status.HTTP_500_INTERNAL_SERVER_ERROR),
	(SectionError, status.HTTP_400_BAD_REQUEST),
]


def to_http_exception(db: Session, exc: Exception, action: str) -> HTTPException:
	"""Roll back the session and map an error raised while handling `action`."""
	db.rollback()
	if isinstance(exc, SubwayError):
		for error_type, status_code in ERROR_STATUS:
			if isinstance(exc, error_type):
				if status_code >= 500:
					logger.error(f"Corrupt data during {action}: {exc.message}")
				else:
					logger.warning(f"Rejected {action}: {exc.message}")
				return HTTPException(status_code=status_code, detail=exc.message)
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
	if isinstance(exc, OperationalError):
		logger.error(f"Database connection error during {action}: {str(exc)}", exc_info=True)
		return HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Database connection error. Please try again later."
		)
	if isinstance(exc, SQLAlchemyError):
		logger.error(f"Database error during {action}: {str(exc)}", exc_info=True)
		return HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Database error. Please try again later."
		)
	logger.error(f"Unexpected error during {action}: {str(exc)}", exc_info=True)
	# Expose the error message in dev mode to make debugging faster.
	if settings.ENV == "dev":
		return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="An unexpected error occurred. Please try again later."
	)
