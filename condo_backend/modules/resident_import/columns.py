"""Column layouts accepted by the resident CSV import."""

import enum


class ImportSchema(str, enum.Enum):
    """Schema variants of the resident import file."""

    FULL = "full"
    REDUCED = "reduced"
    SINGLE_UNIT = "single_unit"


# Candidate attribute fed by each column, in file order.
COLUMNS: dict[ImportSchema, tuple[str, ...]] = {
    ImportSchema.FULL: (
        "block_label",
        "apartment_label",
        "full_name",
        "email",
        "phone",
        "tax_id",
        "owner_flag",
        "responsible_flag",
    ),
    ImportSchema.REDUCED: (
        "block_label",
        "apartment_label",
        "full_name",
        "phone",
        "owner_flag",
        "responsible_flag",
    ),
    # Per-apartment import: the target unit is chosen by the caller.
    ImportSchema.SINGLE_UNIT: (
        "full_name",
        "phone",
        "owner_flag",
        "responsible_flag",
    ),
}

HEADER_NAMES: dict[str, str] = {
    "block_label": "block",
    "apartment_label": "apartment",
    "full_name": "name",
    "email": "email",
    "phone": "phone",
    "tax_id": "tax_id",
    "owner_flag": "owner",
    "responsible_flag": "responsible",
}

# Fields that identify a row; a line with all of them blank is skipped.
IDENTIFYING_FIELDS = ("full_name", "email", "block_label", "apartment_label")


def header_line(schema: ImportSchema) -> str:
    return ",".join(HEADER_NAMES[column] for column in COLUMNS[schema])


def has_unit_columns(schema: ImportSchema) -> bool:
    return "block_label" in COLUMNS[schema]


def has_email(schema: ImportSchema) -> bool:
    """Duplicate detection is keyed on email, so layouts without it skip the check."""
    return "email" in COLUMNS[schema]


def has_tax_id(schema: ImportSchema) -> bool:
    return "tax_id" in COLUMNS[schema]
