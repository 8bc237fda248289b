"""Resident import schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .candidates import ResidentCandidate
from .columns import ImportSchema

EditableField = Literal[
    "block_label",
    "apartment_label",
    "full_name",
    "email",
    "phone",
    "tax_id",
    "owner_flag",
    "responsible_flag",
]


class NewResident(BaseModel):
    """Payload of a single resident insert."""

    apartment_id: int
    full_name: str
    email: str | None = None
    phone: str | None = None
    cpf: str | None = None
    is_owner: bool = False
    is_responsible: bool = False

    @classmethod
    def from_candidate(cls, candidate: ResidentCandidate) -> "NewResident":
        """Names are stored uppercased; blank optional fields become null."""
        return cls(
            apartment_id=candidate.resolved_apartment_id,
            full_name=candidate.full_name.strip().upper(),
            email=candidate.email.strip() or None,
            phone=candidate.phone or None,
            cpf=candidate.tax_id or None,
            is_owner=candidate.owner_flag,
            is_responsible=candidate.responsible_flag,
        )


class RowOutcome(BaseModel):
    """Result of one insert attempt."""

    candidate: ResidentCandidate
    success: bool
    reason: str | None = None


class ImportProgress(BaseModel):
    """Snapshot emitted after each insert attempt."""

    current: int = 0
    total: int = 0
    last_result: RowOutcome | None = None


class ImportFailure(BaseModel):
    candidate: ResidentCandidate
    reason: str


class ImportResults(BaseModel):
    success_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    failures: list[ImportFailure] = Field(default_factory=list)


# ----- API Schemas -----


class RowEditRequest(BaseModel):
    """Schema for editing one field of a candidate row."""

    field: EditableField
    value: str | bool | None = None


class ImportSessionResponse(BaseModel):
    """Schema for import session state."""

    session_id: UUID
    condominium_id: int | None = None
    schema_variant: ImportSchema
    stage: str
    source_filename: str | None = None
    candidates: list[ResidentCandidate]
    valid_count: int
    invalid_count: int
    progress: ImportProgress
    results: ImportResults


class RowEditResponse(BaseModel):
    index: int
    candidate: ResidentCandidate
    valid_count: int
    invalid_count: int
