"""Common schemas shared across all modules."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from ...core.utils import utc_now

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    """Envelope of every JSON API response."""

    success: bool = Field(
        default=True, description="Whether the request was successful"
    )
    message: str | None = Field(default=None, description="Response message")
    data: T | None = Field(default=None, description="Response data")
    error: Any | None = Field(default=None, description="Error details if any")
    timestamp: datetime = Field(
        default_factory=utc_now, description="Response timestamp"
    )
