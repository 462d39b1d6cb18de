"""
Error taxonomy for the data layer.

Known failure patterns are classified into the types below. Anything the
data layer cannot classify is a driver error and propagates unmodified.
"""

from typing import Optional


# Messages returned to callers, kept identical to the service's public API
ERR_USER_NOT_FOUND = "No matching user found"
ERR_MAPPING_NOT_FOUND = "No matching mapping found"
ERR_FTP_ACCOUNT_NOT_FOUND = "No matching FTP Account found"
ERR_FTP_ACCOUNT_EXISTS = "An FTP Account for the specified username already exists"


class DataLayerError(Exception):
    """Base exception for the data layer"""
    pass


class ConfigurationError(DataLayerError):
    """Raised when the connection string cannot be resolved to a dialect"""
    pass


class DatabaseConnectionError(DataLayerError):
    """
    Raised when a connection cannot be (re-)established.

    The last driver error is chained as ``__cause__``.

    Attributes:
        attempts: Number of connection attempts made before giving up
    """

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class NotFoundError(DataLayerError):
    """A keyed lookup, update or delete matched zero rows"""

    default_message = "Not found"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class UserNotFoundError(NotFoundError):
    default_message = ERR_USER_NOT_FOUND


class AccountNotFoundError(NotFoundError):
    default_message = ERR_FTP_ACCOUNT_NOT_FOUND


class MappingNotFoundError(NotFoundError):
    default_message = ERR_MAPPING_NOT_FOUND


class AccountExistsError(DataLayerError):
    """An account with the requested username already exists"""

    def __init__(self, message: str = ERR_FTP_ACCOUNT_EXISTS):
        super().__init__(message)
