"""Typed errors raised by remote semantic extractors.

All of them are recoverable: callers fall back to local extraction.
"""

from typing import Optional


class RemoteExtractionError(Exception):
    """Base error for a failed remote extraction."""

    error_type = "api_error"


class NetworkError(RemoteExtractionError):
    """The remote could not be reached or did not answer in time."""

    error_type = "network_error"


class InvalidResponse(RemoteExtractionError):
    """The remote answered, but no JSON object could be read from it."""

    error_type = "invalid_response"


class ApiError(RemoteExtractionError):
    """The remote answered with a non-2xx status."""

    error_type = "api_error"

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MissingCredential(RemoteExtractionError):
    """Required configuration (API key, endpoint URL) is absent."""

    error_type = "missing_credential"


ERRORS_BY_TYPE = {
    cls.error_type: cls
    for cls in (NetworkError, InvalidResponse, ApiError, MissingCredential)
}
