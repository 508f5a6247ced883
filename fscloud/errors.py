"""
Error taxonomy for the file-storage client.

Everything raised on purpose by fscloud derives from CloudError so callers can
catch the whole family at once. User-visible fallback strings live in Messages.
"""
from typing import Optional


class Messages:
    """Fallback strings shown when the server gives no message of its own."""

    FOLDER_NAME_REQUIRED = "Folder name is required"
    LOGIN_REQUIRED = "Please log in to create folders"
    SESSION_EXPIRED = "Session expired. Please log in again."
    CREATE_FOLDER_FAILED = "Failed to create folder"
    LOGIN_FAILED = "Login failed"
    LOAD_FILES_FAILED = "Failed to load files"
    UPLOAD_FAILED = "Failed to upload file"
    DELETE_FAILED = "Failed to delete item"
    NOT_LOGGED_IN = "Please log in first"


class CloudError(Exception):
    """Base class for fscloud errors."""


class InvalidArgument(CloudError, ValueError):
    """Raised when a caller breaks an operation's precondition."""


class ValidationError(CloudError):
    """Raised when user input is rejected before any network call."""


class AuthRequired(CloudError):
    """Raised when an authenticated operation is attempted without a token."""

    def __init__(self, message: str = Messages.NOT_LOGGED_IN) -> None:
        super().__init__(message)


class ApiError(CloudError):
    """Raised for any failed API call.

    ``status`` is the HTTP status (None for transport failures) and
    ``message`` is the server-supplied message, if the body carried one.
    """

    def __init__(self, status: Optional[int], message: Optional[str] = None, detail: str = "") -> None:
        self.status = status
        self.message = message
        text = message or detail or "request failed"
        if status is None:
            super().__init__(f"API error: {text}")
        else:
            super().__init__(f"API error: status={status} msg={text}")


class AuthExpired(ApiError):
    """Raised when the server answers 401 Unauthorized."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(401, message)


class SessionExpired(CloudError):
    """Raised when the refresh-and-retry path could not recover a 401."""

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or Messages.SESSION_EXPIRED
        super().__init__(self.message)


def user_message(error: Exception, fallback: str) -> str:
    """Text to show the user for ``error``, preferring what the server said."""
    if isinstance(error, SessionExpired):
        return error.message
    if isinstance(error, ApiError) and error.message:
        return error.message
    if isinstance(error, (ValidationError, AuthRequired)):
        return str(error)
    return fallback
