"""
Custom exception classes for consistent error handling across all modules.
"""

from typing import Any


class CondoException(Exception):
    """Base exception for all condominium backend errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(CondoException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ValidationError(CondoException):
    """Raised when data validation fails."""

    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class BusinessLogicError(CondoException):
    """Raised when business logic constraints are violated."""

    status_code = 409


# ----- Resident import -----


class FileFormatError(CondoException):
    """Raised when the uploaded file cannot be read as an import file."""

    status_code = 415

    def __init__(
        self,
        message: str = "Please select a CSV file",
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.filename = filename


class EmptyFileError(CondoException):
    """Raised when the file has a header but no usable data lines."""

    status_code = 422

    def __init__(
        self,
        message: str = "The file does not contain any valid data",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class NoValidRowsError(BusinessLogicError):
    """Raised when an import is started with an empty import set."""

    def __init__(
        self,
        message: str = "No valid rows: fix the errors before importing",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class InvalidStageError(BusinessLogicError):
    """Raised when an import session operation is not allowed in its current stage."""

    def __init__(self, operation: str, stage: Any):
        stage_name = getattr(stage, "value", stage)
        super().__init__(
            f"Cannot {operation} while the import is in '{stage_name}' stage",
            {"operation": operation, "stage": stage_name},
        )
        self.operation = operation
        self.stage = stage


class RowIndexError(ResourceNotFoundError):
    """Raised when a candidate row index is out of range."""

    def __init__(self, index: int):
        super().__init__("Import row", index)
        self.index = index


class ImportSessionNotFoundError(ResourceNotFoundError):
    """Raised when an import session does not exist or has expired."""

    def __init__(self, session_id: Any):
        super().__init__("Import session", session_id)


class RemoteInsertError(CondoException):
    """Raised by the persistence layer when a single resident insert fails.

    ``message`` carries the raw backend text, classified later into a
    normalized reason.
    """

    status_code = 502
