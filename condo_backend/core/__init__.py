"""Core infrastructure for the condominium backend."""

from .exceptions import (
    BusinessLogicError,
    CondoException,
    EmptyFileError,
    FileFormatError,
    ImportSessionNotFoundError,
    InvalidStageError,
    NoValidRowsError,
    RemoteInsertError,
    ResourceNotFoundError,
    RowIndexError,
    ValidationError,
)

__all__ = [
    "CondoException",
    "ResourceNotFoundError",
    "ValidationError",
    "BusinessLogicError",
    "FileFormatError",
    "EmptyFileError",
    "NoValidRowsError",
    "InvalidStageError",
    "RowIndexError",
    "ImportSessionNotFoundError",
    "RemoteInsertError",
]
