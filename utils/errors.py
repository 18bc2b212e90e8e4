"""
utils/errors.py
---------------
Error taxonomy shared by every layer.

    ValidationError  - bad input, raised before any store access.
    NotFoundError    - a book or author the caller named does not exist.
    StoreError       - any failure coming out of the MongoDB driver.
    SessionError     - the session was used in the wrong state.

Callers only ever have to catch these; driver exceptions never leak out
of the repository.
"""

from functools import wraps
from typing import Callable, Optional

from pymongo.errors import PyMongoError

from utils.logger import get_logger

logger = get_logger(__name__)


class LibraryError(Exception):
    """Base class for every error raised by the catalog."""


class ValidationError(LibraryError, ValueError):
    """Malformed ISBN, out-of-range rating, unknown genre, missing argument."""


class NotFoundError(LibraryError, LookupError):
    """A referenced book or author is not in the store."""


class StoreError(LibraryError):
    """
    Wraps a failure raised by the underlying driver.

    Attributes:
        cause: The original driver exception (also chained as ``__cause__``).
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class SessionError(StoreError):
    """Connect while connected, or use/disconnect without a session."""


def translate_store_errors(action: str) -> Callable:
    """
    Decorator that converts driver exceptions into ``StoreError``.

    Catalog errors raised inside the wrapped call pass through untouched.

    Args:
        action: Short human description used in the error message,
            e.g. ``"adding book"``.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PyMongoError as e:
                logger.error(f"Store failure while {action}: {e}")
                raise StoreError(f"Error {action}: {e}", cause=e) from e
        return wrapper
    return decorator
