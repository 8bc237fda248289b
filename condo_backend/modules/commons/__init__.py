"""Common schemas shared across modules."""

from .schemas import BaseResponse

__all__ = ["BaseResponse"]
