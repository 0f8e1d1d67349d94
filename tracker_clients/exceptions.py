"""Exception hierarchy for the tracker clients."""

from typing import Any, Dict, Optional


class TrackerClientError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(TrackerClientError):
    """Raised when a client has no token to authenticate with."""
    pass


class APIError(TrackerClientError):
    """Non-2xx HTTP response from a remote API."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        url: str = "",
        method: str = "",
        request_body: Optional[str] = None
    ):
        super().__init__(message, {
            "status_code": status_code,
            "url": url,
            "method": method
        })
        self.status_code = status_code
        self.body = body
        self.url = url
        self.method = method
        self.request_body = request_body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ResponseDecodeError(TrackerClientError):
    """Raised when a response body is not the JSON we expected."""
    pass


class NotFoundError(TrackerClientError):
    """A named resource (release, milestone, pipeline...) does not exist."""
    pass


class CustomFieldError(TrackerClientError):
    """Base class for custom field dispatch errors."""
    pass


class InvalidOptionError(CustomFieldError):
    """Value is not one of the options of a select/link field."""
    pass


class UnsupportedFieldError(CustomFieldError):
    """Field definition has an API type we do not know how to handle."""
    pass


class GraphQLError(TrackerClientError):
    """GraphQL response carried an ``errors`` member."""

    def __init__(self, message: str, errors: Any):
        super().__init__(message, {"errors": errors})
        self.errors = errors
