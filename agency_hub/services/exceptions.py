class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DownstreamServiceError(ServiceError):
    """Raised when the document store returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class RecordNotFoundError(ServiceError):
    """Raised when a referenced document does not exist."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"Record {record_id} not found in {table}")
        self.table = table
        self.record_id = record_id


class ContactListError(ServiceError):
    """Raised when an email/phone list edit cannot be applied."""
