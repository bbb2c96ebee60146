"""
FeedLoader Custom Exceptions
===========================

Exception hierarchy for feed retrieval with error codes, context
information, and user-friendly error messages.

The loader distinguishes four failure families:
- the server answered with a non-OK status (RemoteError)
- the network could not be talked to at all (TransportFault)
- the document could not be decoded (ParseFault)
- the local cache could not be read or written (CacheReadFault, CacheWriteFault)
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Remote/HTTP errors (H001-H099)
    REMOTE_STATUS = "H001"
    REMOTE_NOT_FOUND = "H002"
    REMOTE_ACCESS_DENIED = "H003"
    REMOTE_SERVER_ERROR = "H004"
    REMOTE_RATE_LIMITED = "H005"

    # Transport errors (N001-N099)
    TRANSPORT_PROTOCOL = "N001"
    TRANSPORT_IO = "N002"
    TRANSPORT_TIMEOUT = "N003"

    # Feed parsing errors (F001-F099)
    FEED_PARSE_ERROR = "F001"
    FEED_EMPTY_DOCUMENT = "F002"

    # Cache errors (K001-K099)
    CACHE_READ_FAILED = "K001"
    CACHE_WRITE_FAILED = "K002"


class FeedLoaderError(Exception):
    """Base exception for all FeedLoader errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize FeedLoader error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether retrying the operation may succeed
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(FeedLoaderError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message"]
            },
        )


def _status_error_code(status_code: int) -> ErrorCode:
    if status_code == 404 or status_code == 410:
        return ErrorCode.REMOTE_NOT_FOUND
    if status_code in (401, 403):
        return ErrorCode.REMOTE_ACCESS_DENIED
    if status_code == 429:
        return ErrorCode.REMOTE_RATE_LIMITED
    if status_code >= 500:
        return ErrorCode.REMOTE_SERVER_ERROR
    return ErrorCode.REMOTE_STATUS


class RemoteError(FeedLoaderError):
    """The server was reachable but answered with a non-OK status.

    Never retried by the loader. ``recoverable`` is set for statuses where a
    later retry by the caller has a reasonable chance (429 and 5xx).
    """

    def __init__(
        self,
        status_code: int,
        reason: Optional[str] = None,
        feed_url: Optional[str] = None,
        **kwargs,
    ):
        self.status_code = status_code
        self.reason = reason or ""

        context = kwargs.get("context", {})
        context["status_code"] = status_code
        context["reason"] = self.reason
        if feed_url:
            context["feed_url"] = feed_url

        message = f"HTTP {status_code}: {self.reason}".rstrip(": ")
        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", _status_error_code(status_code)),
            context=context,
            user_message=kwargs.get("user_message", f"Feed server responded with {message}"),
            recoverable=kwargs.get(
                "recoverable", status_code == 429 or status_code >= 500
            ),
        )


class TransportFault(FeedLoaderError):
    """Unrecoverable network or protocol failure while talking to the server."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.TRANSPORT_IO),
            context=context,
            user_message=kwargs.get("user_message", "Network connection failed"),
            recoverable=False,
        )


class ParseFault(FeedLoaderError):
    """Feed document could not be decoded."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_PARSE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", f"Feed could not be parsed: {message}"),
            recoverable=False,
        )


class CacheError(FeedLoaderError):
    """Local feed cache errors."""

    def __init__(self, message: str, slot: Optional[Any] = None, **kwargs):
        context = kwargs.get("context", {})
        if slot is not None:
            context["slot"] = str(slot)

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CACHE_READ_FAILED),
            context=context,
            user_message=kwargs.get("user_message", "Feed cache operation failed"),
            recoverable=False,
        )


class CacheReadFault(CacheError):
    """Genuine I/O failure reading a cache slot (not "never written")."""

    pass


class CacheWriteFault(CacheError):
    """I/O failure persisting a fetched feed."""

    def __init__(self, message: str, slot: Optional[Any] = None, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.CACHE_WRITE_FAILED)
        super().__init__(message, slot=slot, **kwargs)


# Exception handling utilities


def is_retryable_error(exception: Exception) -> bool:
    """Check if an error is worth retrying by the caller.

    Args:
        exception: Exception to check

    Returns:
        True if the error is potentially retryable
    """
    if not isinstance(exception, FeedLoaderError):
        return False
    if not exception.recoverable:
        return False

    retryable_codes = {
        ErrorCode.REMOTE_SERVER_ERROR,
        ErrorCode.REMOTE_RATE_LIMITED,
    }

    return exception.error_code in retryable_codes


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, FeedLoaderError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
