from typing import Any, Dict, Optional


class CurioError(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CurioError):
    pass


class NotFoundError(CurioError):
    pass


class ConflictError(CurioError):
    pass


class DatabaseError(CurioError):
    pass


class BatchCommitError(DatabaseError):
    """A grouped write failed; batches before it stay committed."""

    def __init__(self, message: str, committed_batches: int, committed_operations: int):
        super().__init__(
            message,
            details={
                "committed_batches": committed_batches,
                "committed_operations": committed_operations,
            },
        )
        self.committed_batches = committed_batches
        self.committed_operations = committed_operations


class ExternalServiceError(CurioError):
    pass


class FeedFetchError(ExternalServiceError):
    pass
