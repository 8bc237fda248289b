from __future__ import annotations

from condo_backend.modules.resident_import.columns import ImportSchema, header_line
from condo_backend.modules.resident_import.directory import UnitDirectory
from condo_backend.modules.resident_import.session import ImportSession
from condo_backend.modules.resident_import.templates import build_template, template_filename


def test_filename_is_slugged_from_the_condominium_name() -> None:
    assert template_filename("  Residencial  Jardim Azul ") == "residents_template_residencial_jardim_azul.csv"


def test_full_template_uses_the_first_real_unit(directory) -> None:
    template = build_template(ImportSchema.FULL, "Jardim Azul", directory)
    lines = template.content.split("\n")

    assert lines[0] == header_line(ImportSchema.FULL)
    assert lines[1].startswith("BLOCO 1,101,João da Silva,")
    assert template.media_type.startswith("text/csv")


def test_full_template_falls_back_to_a_default_unit() -> None:
    empty = UnitDirectory(blocks=[], apartments=[])

    template = build_template(ImportSchema.FULL, "Jardim Azul", empty)

    assert template.content.split("\n")[1].startswith("BLOCO 1,101,")


def test_every_template_loads_cleanly(directory) -> None:
    for schema in ImportSchema:
        session = ImportSession(schema, target_apartment_id=11)
        template = build_template(schema, "Jardim Azul", directory)

        candidates = session.load(template.content, directory)

        assert candidates
        assert all(c.is_valid for c in candidates), schema
