"""Downloadable example files for each import schema."""

from dataclasses import dataclass

from ...core.utils import filename_slug
from .columns import ImportSchema, header_line
from .directory import UnitDirectory

TEMPLATE_ROWS: dict[ImportSchema, tuple[str, ...]] = {
    ImportSchema.FULL: (
        "{block},{apartment},João da Silva,joao@email.com,11999999999,52998224725,sim,sim",
        "{block},{apartment},Maria Santos,maria@email.com,11988888888,,não,não",
    ),
    ImportSchema.REDUCED: (
        "BLOCO 1,101,João da Silva,11999999999,sim,sim",
        "BLOCO 1,102,Maria Santos,11988888888,não,não",
        "BLOCO 2,201,Carlos Souza,11977777777,sim,não",
    ),
    ImportSchema.SINGLE_UNIT: (
        "João da Silva,11999999999,sim,sim",
        "Maria Santos,11988888888,não,não",
    ),
}

DEFAULT_UNIT = {"block": "BLOCO 1", "apartment": "101"}
TEMPLATE_MEDIA_TYPE = "text/csv; charset=utf-8"


@dataclass(frozen=True)
class ImportTemplate:
    filename: str
    content: str
    media_type: str = TEMPLATE_MEDIA_TYPE


def template_filename(condominium_name: str) -> str:
    return f"residents_template_{filename_slug(condominium_name)}.csv"


def build_template(
    schema: ImportSchema,
    condominium_name: str,
    directory: UnitDirectory | None = None,
) -> ImportTemplate:
    """Header plus example rows; full templates point at a real unit when known."""
    unit = dict(DEFAULT_UNIT)
    first_unit = directory.first_unit() if directory is not None else None
    if first_unit is not None:
        block, apartment = first_unit
        unit = {"block": block.name, "apartment": apartment.number}

    lines = [header_line(schema)]
    lines.extend(row.format(**unit) for row in TEMPLATE_ROWS[schema])
    return ImportTemplate(
        filename=template_filename(condominium_name), content="\n".join(lines)
    )
