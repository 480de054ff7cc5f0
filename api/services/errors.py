"""
Service-layer errors and the shared commit helper
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the API services"""

    code = "SERVICE_ERROR"
    status_code = 500

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message, "hint": self.hint}


class NotFoundError(ServiceError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found", hint=f"id={entity_id}")


class ConflictError(ServiceError):
    code = "CONFLICT"
    status_code = 409


class InvalidRequestError(ServiceError):
    code = "VALIDATION_ERROR"
    status_code = 400


class PersistenceError(ServiceError):
    code = "PERSISTENCE_ERROR"
    status_code = 503


def commit(session: Session, action: str, conflict_message: Optional[str] = None) -> None:
    """
    Commit the unit of work; roll back and translate on failure.

    Raises:
        ConflictError: unique constraint violated (when conflict_message given)
        PersistenceError: any other database failure
    """
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if conflict_message:
            raise ConflictError(conflict_message, hint=str(e.orig)) from e
        logger.error(f"Failed to {action}: {e}")
        raise PersistenceError(f"Failed to {action}") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise PersistenceError(f"Failed to {action}", hint="Retry later") from e
