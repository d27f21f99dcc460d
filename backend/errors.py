"""
Domain errors raised by the job repository.

Every variant carries a stable ``kind`` so the HTTP layer can pick a status
code from the error class alone.
"""
from typing import List, Optional


class JobServiceError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JobServiceError):
    kind = "validation_error"

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])

    @classmethod
    def missing(cls, fields: List[str]) -> "ValidationError":
        return cls(f"Missing required fields: {', '.join(fields)}", fields)


class InvalidIdError(JobServiceError):
    kind = "invalid_id"


class NotFoundError(JobServiceError):
    kind = "not_found"


class UnauthorizedError(JobServiceError):
    kind = "unauthorized"


class SelfAcceptError(JobServiceError):
    kind = "self_accept"


class DuplicateAcceptError(JobServiceError):
    kind = "duplicate_accept"


class NotFoundOrUnauthorizedError(JobServiceError):
    """The removal filter matches id and owner together, so the two cases look the same."""

    kind = "not_found_or_unauthorized"


class StorageError(JobServiceError):
    kind = "storage_error"
