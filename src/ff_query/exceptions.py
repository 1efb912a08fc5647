"""
Custom exceptions for the ff-query package.
"""

from typing import Optional


class FFQueryError(Exception):
    """Base exception for all ff-query errors."""

    pass


class DriverError(FFQueryError):
    """
    Raised when the database driver reports a failure.

    Wraps whatever the driver raised (syntax errors, constraint violations,
    lost connections) without classifying it further. The original exception
    is kept on ``original`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, sql: Optional[str] = None, original: Exception = None):
        self.sql = sql
        self.original = original
        self.errno = _driver_errno(original)

        if self.errno is not None:
            message = f"{message} (errno {self.errno})"

        super().__init__(message)


class MalformedQueryError(FFQueryError):
    """Raised when a builder call cannot be turned into valid clause state."""

    def __init__(self, message: str, method: Optional[str] = None):
        self.method = method

        if method:
            message = f"{method}(): {message}"

        super().__init__(message)


class ConfigurationError(FFQueryError):
    """Raised when a connection target cannot be interpreted."""

    pass


def _driver_errno(error: Optional[Exception]) -> Optional[int]:
    # PyMySQL errors carry (errno, message) in args
    if error is None or not error.args:
        return None
    first = error.args[0]
    return first if isinstance(first, int) else None
