"""Parsed resident rows awaiting an import decision."""

import enum

from pydantic import BaseModel, Field, computed_field


class RowError(str, enum.Enum):
    """Per-row validation messages.

    UNIT_NOT_FOUND is the apartment resolution failure and DUPLICATE_RESIDENT
    the duplicate detection failure; both are row validation errors.
    """

    BLOCK_REQUIRED = "block required"
    APARTMENT_REQUIRED = "apartment required"
    UNIT_NOT_FOUND = "unit not found for that block/apartment"
    INVALID_NAME = "invalid name"
    INVALID_EMAIL = "invalid email"
    INVALID_TAX_ID = "invalid tax id"
    DUPLICATE_RESIDENT = "resident already registered for this unit"


TEXT_FIELDS = frozenset(
    {"block_label", "apartment_label", "full_name", "email", "phone", "tax_id"}
)
FLAG_FIELDS = frozenset({"owner_flag", "responsible_flag"})
EDITABLE_FIELDS = TEXT_FIELDS | FLAG_FIELDS


class ResidentCandidate(BaseModel):
    """One parsed row of the import file.

    Candidates are immutable: an edit produces a new, fully re-validated
    candidate instead of patching this one.
    """

    line_number: int | None = None
    block_label: str = ""
    apartment_label: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    tax_id: str = ""
    owner_flag: bool = False
    responsible_flag: bool = False
    resolved_apartment_id: int | None = None
    errors: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.errors and self.resolved_apartment_id is not None
