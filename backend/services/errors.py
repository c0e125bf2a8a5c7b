"""
Service-level exceptions, rendered as JSON error responses by main.py.
"""

from typing import Optional


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequestError(ServiceError):
    status_code = 400


class ConfigurationError(ServiceError):
    """A required API key or setting is missing."""

    status_code = 500


class UpstreamError(ServiceError):
    """The model or speech service answered with a non-success status."""

    status_code = 502

    def __init__(self, message: str, details: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message, details)
        self.upstream_status = upstream_status
