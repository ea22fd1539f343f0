"""Error taxonomy shared by the server handlers and the Python client."""
from typing import Any


class TaskListError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {'error': self.message}


class ValidationError(TaskListError):
    """Missing or malformed request input. Message is passed through as-is."""
    status_code = 400


class StoreError(TaskListError):
    """Any failure raised by the persistence layer.

    The original exception is kept on ``cause`` and its text is returned to
    the caller wrapped as ``{"error": {"error": ...}}``.
    """
    status_code = 500

    def __init__(self, cause: BaseException):
        super().__init__(str(cause) or cause.__class__.__name__)
        self.cause = cause

    def to_payload(self) -> dict:
        return {'error': {'error': self.message}}


class ApiError(Exception):
    """Raised by the client when a request fails or answers non-2xx."""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
