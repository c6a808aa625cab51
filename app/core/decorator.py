import logging
from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class DBException(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def db_exception(func):
    """Translate SQLAlchemy failures of a session-bound method into DBException.

    The wrapped callable is expected to be a method of an object holding the
    session as ``self.db``; the session is rolled back before re-raising.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except IntegrityError:
            self.db.rollback()
            # usually a duplicate primary/unique key
            raise DBException("Duplicate entry: already exists", 409)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{func.__qualname__} failed: {type(e).__name__}")
            raise DBException("Database error occurred", 500)

    return wrapper
