"""Row validation for the resident import.

Validation is a pure function of the row and the session context: a row is
always validated from scratch, never by patching an earlier error list.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ...core.utils import digits_only
from .candidates import FLAG_FIELDS, ResidentCandidate, RowError
from .columns import ImportSchema, has_email, has_tax_id, has_unit_columns
from .directory import UnitDirectory, resolve_apartment
from .duplicates import ExistingResidentIndex, mark_duplicate
from .tax_id import is_valid_cpf

TRUTHY_TOKENS = frozenset({"sim", "s", "yes", "y", "true", "1", "x"})
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2


def parse_flag(value: str | bool | None) -> bool:
    """Anything outside the truthy set, blank included, reads as False."""
    if isinstance(value, bool):
        return value
    return (value or "").strip().lower() in TRUTHY_TOKENS


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email.strip()))


@dataclass(frozen=True)
class ValidationContext:
    """Everything a row is checked against during one import session."""

    schema: ImportSchema
    directory: UnitDirectory
    existing: ExistingResidentIndex = field(default_factory=ExistingResidentIndex)
    target_apartment_id: int | None = None

    def validate(self, candidate: ResidentCandidate) -> ResidentCandidate:
        """Run field validation and duplicate detection on one row."""
        return mark_duplicate(validate_candidate(candidate, self), self.existing)


def candidate_from_values(
    values: Mapping[str, str | bool], line_number: int | None = None
) -> ResidentCandidate:
    """Build an unvalidated candidate from column values."""
    data: dict[str, str | bool] = {}
    for name, value in values.items():
        if name in FLAG_FIELDS:
            data[name] = parse_flag(value)
        else:
            data[name] = "" if value is None else str(value).strip()
    return ResidentCandidate(line_number=line_number, **data)


def validate_candidate(
    candidate: ResidentCandidate, context: ValidationContext
) -> ResidentCandidate:
    """Recompute the error list and the resolved unit of a candidate."""
    errors: list[str] = []
    schema = context.schema

    if has_unit_columns(schema):
        block_label = candidate.block_label.strip()
        apartment_label = candidate.apartment_label.strip()
        resolved_id = resolve_apartment(block_label, apartment_label, context.directory)

        if not block_label:
            errors.append(RowError.BLOCK_REQUIRED.value)
        if not apartment_label:
            errors.append(RowError.APARTMENT_REQUIRED.value)
        if block_label and apartment_label and resolved_id is None:
            errors.append(RowError.UNIT_NOT_FOUND.value)
    else:
        resolved_id = context.target_apartment_id

    if len(candidate.full_name.strip()) < MIN_NAME_LENGTH:
        errors.append(RowError.INVALID_NAME.value)

    if has_email(schema) and not is_valid_email(candidate.email):
        errors.append(RowError.INVALID_EMAIL.value)

    tax_id = digits_only(candidate.tax_id) if has_tax_id(schema) else ""
    if tax_id and not is_valid_cpf(tax_id):
        errors.append(RowError.INVALID_TAX_ID.value)

    return candidate.model_copy(
        update={
            "phone": digits_only(candidate.phone),
            "tax_id": tax_id,
            "resolved_apartment_id": resolved_id,
            "errors": errors,
        }
    )


def validate_row(
    values: Mapping[str, str | bool],
    context: ValidationContext,
    line_number: int | None = None,
) -> ResidentCandidate:
    """Parse and validate one row of column values into a candidate."""
    return context.validate(candidate_from_values(values, line_number))
