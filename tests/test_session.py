from __future__ import annotations

import asyncio

import pytest

from conftest import FULL_HEADER, FakeGateway, build_csv
from condo_backend.core.exceptions import (
    EmptyFileError,
    InvalidStageError,
    NoValidRowsError,
    ValidationError,
)
from condo_backend.modules.resident_import.candidates import RowError
from condo_backend.modules.resident_import.columns import ImportSchema
from condo_backend.modules.resident_import.session import (
    DATABASE_RULE_VIOLATION,
    EMAIL_ALREADY_REGISTERED,
    INSERT_TIMED_OUT,
    ImportSession,
    ImportStage,
    classify_failure,
)


def collect(session: ImportSession, insert) -> list:
    async def drain():
        return [progress async for progress in session.run_import(insert)]

    return asyncio.run(drain())


@pytest.fixture()
def previewed(directory, scenario_csv, existing_joao) -> ImportSession:
    session = ImportSession(ImportSchema.FULL, condominium_id=7)
    session.load(scenario_csv, directory, existing_joao, filename="residents.csv")
    return session


def test_preview_reports_duplicate_and_unknown_unit(previewed) -> None:
    candidates = previewed.candidates

    assert previewed.stage is ImportStage.PREVIEW
    assert previewed.source_filename == "residents.csv"
    assert [c.line_number for c in candidates] == [2, 3, 4]
    assert candidates[0].errors == [RowError.DUPLICATE_RESIDENT.value]
    assert candidates[1].is_valid
    assert candidates[2].errors == [RowError.UNIT_NOT_FOUND.value]
    assert previewed.can_start_import


def test_full_import_after_fixing_rows(directory, scenario_csv, fake_gateway) -> None:
    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)
    session.edit_field(2, "block_label", "BLOCO 2")

    results = asyncio.run(session.import_all(fake_gateway.insert_resident))

    assert session.stage is ImportStage.DONE
    assert results.success_count == 3
    assert results.failed_count == 0
    assert results.skipped_count == 0
    assert [r.full_name for r in fake_gateway.inserted] == [
        "JOÃO DA SILVA",
        "MARIA SANTOS",
        "CARLOS SOUZA",
    ]
    assert fake_gateway.inserted[2].apartment_id == 21
    assert fake_gateway.inserted[0].cpf is None


def test_failed_insert_does_not_stop_the_batch(directory, scenario_csv) -> None:
    gateway = FakeGateway(
        directory,
        failures={"MARIA SANTOS": 'duplicate key value violates unique constraint "ix_residents_apartment_email"'},
    )
    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)
    session.edit_field(2, "block_label", "BLOCO 2")

    session.begin_import()
    progress = collect(session, gateway.insert_resident)

    assert [p.current for p in progress] == [1, 2, 3]
    assert all(p.total == 3 for p in progress)
    assert progress[1].last_result.success is False
    assert session.results.success_count == 2
    assert session.results.failed_count == 1
    assert session.results.failures[0].reason == EMAIL_ALREADY_REGISTERED
    assert session.results.failures[0].candidate.full_name == "Maria Santos"
    assert session.stage is ImportStage.DONE


def test_import_set_is_frozen_when_the_import_starts(previewed, fake_gateway) -> None:
    import_set = previewed.begin_import()

    with pytest.raises(InvalidStageError):
        previewed.edit_field(2, "block_label", "BLOCO 2")
    with pytest.raises(InvalidStageError):
        previewed.remove_row(0)

    collect(previewed, fake_gateway.insert_resident)
    assert [c.full_name for c in import_set] == ["Maria Santos"]
    assert len(fake_gateway.inserted) == 1


def test_header_only_file_stays_in_upload(directory) -> None:
    session = ImportSession(ImportSchema.FULL)

    with pytest.raises(EmptyFileError):
        session.load(FULL_HEADER + "\n\n", directory)

    assert session.stage is ImportStage.UPLOAD
    assert session.candidates == []


def test_no_valid_rows_keeps_preview(directory) -> None:
    session = ImportSession(ImportSchema.FULL)
    session.load(build_csv(FULL_HEADER, "BLOCO 9,101,João,joao@email.com,,,,"), directory)

    assert not session.can_start_import
    with pytest.raises(NoValidRowsError):
        session.begin_import()
    assert session.stage is ImportStage.PREVIEW


def test_loading_a_new_file_replaces_the_preview(previewed, directory) -> None:
    previewed.load(
        build_csv(FULL_HEADER, "BLOCO 2,201,Ana Lima,ana@email.com,,,,"),
        directory,
        filename="second.csv",
    )

    assert previewed.stage is ImportStage.PREVIEW
    assert [c.full_name for c in previewed.candidates] == ["Ana Lima"]
    assert previewed.source_filename == "second.csv"


def test_operations_outside_their_stage_are_rejected(directory, fake_gateway) -> None:
    session = ImportSession(ImportSchema.FULL)

    with pytest.raises(InvalidStageError):
        session.begin_import()
    with pytest.raises(InvalidStageError):
        session.edit_field(0, "email", "a@b.co")
    with pytest.raises(InvalidStageError):
        session.cancel()
    with pytest.raises(InvalidStageError):
        collect(session, fake_gateway.insert_resident)


def test_run_import_cannot_be_consumed_twice(previewed, fake_gateway) -> None:
    previewed.begin_import()
    collect(previewed, fake_gateway.insert_resident)

    with pytest.raises(InvalidStageError):
        collect(previewed, fake_gateway.insert_resident)
    assert len(fake_gateway.inserted) == 1


def test_reset_is_not_allowed_while_importing(previewed) -> None:
    previewed.begin_import()

    with pytest.raises(InvalidStageError):
        previewed.reset()
    assert previewed.stage is ImportStage.IMPORTING


def test_reset_after_done_clears_everything(previewed, fake_gateway) -> None:
    asyncio.run(previewed.import_all(fake_gateway.insert_resident))

    previewed.reset()

    assert previewed.stage is ImportStage.UPLOAD
    assert previewed.candidates == []
    assert previewed.results.success_count == 0
    assert previewed.progress.total == 0
    assert previewed.source_filename is None


def test_slow_insert_times_out(directory, scenario_csv) -> None:
    async def stalled(resident):
        await asyncio.sleep(5)

    session = ImportSession(ImportSchema.FULL, insert_timeout=0.01)
    session.load(scenario_csv, directory)

    results = asyncio.run(session.import_all(stalled))

    assert results.failed_count == 2
    assert {f.reason for f in results.failures} == {INSERT_TIMED_OUT}
    assert session.stage is ImportStage.DONE


def test_unexpected_insert_error_is_recorded(directory, scenario_csv) -> None:
    async def broken(resident):
        raise RuntimeError("connection reset")

    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)

    results = asyncio.run(session.import_all(broken))

    assert results.failed_count == 2
    assert results.failures[0].reason == "connection reset"


def test_cancel_skips_the_remaining_rows(directory, scenario_csv) -> None:
    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)
    session.edit_field(2, "block_label", "BLOCO 2")
    inserted = []

    async def insert(resident):
        inserted.append(resident)
        if len(inserted) == 1:
            session.cancel()

    session.begin_import()
    progress = collect(session, insert)

    assert len(progress) == 1
    assert len(inserted) == 1
    assert session.stage is ImportStage.DONE
    assert session.results.success_count == 1
    assert session.results.skipped_count == 2


def test_cancel_before_the_first_insert_finishes_immediately(previewed) -> None:
    previewed.begin_import()

    previewed.cancel()

    assert previewed.stage is ImportStage.DONE
    assert previewed.results.skipped_count == 1


def test_abandoned_import_counts_rows_as_skipped(directory, scenario_csv, fake_gateway) -> None:
    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)
    session.edit_field(2, "block_label", "BLOCO 2")
    session.begin_import()

    async def first_row_only():
        stream = session.run_import(fake_gateway.insert_resident)
        await stream.__anext__()
        await stream.aclose()

    asyncio.run(first_row_only())

    assert session.stage is ImportStage.DONE
    assert session.results.success_count == 1
    assert session.results.skipped_count == 2


def test_single_unit_session_needs_a_target() -> None:
    with pytest.raises(ValueError):
        ImportSession(ImportSchema.SINGLE_UNIT)


def test_single_unit_import_inserts_on_the_target(directory, fake_gateway) -> None:
    session = ImportSession(ImportSchema.SINGLE_UNIT, target_apartment_id=12)
    session.load("name,phone,owner,responsible\nAna Lima,(11) 95555-0000,sim,", directory)

    asyncio.run(session.import_all(fake_gateway.insert_resident))

    resident = fake_gateway.inserted[0]
    assert resident.apartment_id == 12
    assert resident.phone == "11955550000"
    assert resident.email is None
    assert resident.is_owner is True


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Duplicate entry 'x' for key 'ix_residents_apartment_email'", EMAIL_ALREADY_REGISTERED),
        ("UNIQUE constraint failed: residents.email", EMAIL_ALREADY_REGISTERED),
        ("insert violates foreign key constraint", DATABASE_RULE_VIOLATION),
        ("CHECK constraint failed", DATABASE_RULE_VIOLATION),
        ("server closed the connection", "server closed the connection"),
    ],
)
def test_classify_failure(raw, expected) -> None:
    assert classify_failure(raw) == expected


def test_reduced_session_rejects_email_edits(directory, fake_gateway) -> None:
    session = ImportSession(ImportSchema.REDUCED)
    session.load(
        "block,apartment,name,phone,owner,responsible\nBLOCO 2,201,Carlos Souza,,sim,",
        directory,
    )

    with pytest.raises(ValidationError):
        session.edit_field(0, "email", "not an email")

    asyncio.run(session.import_all(fake_gateway.insert_resident))
    assert fake_gateway.inserted[0].email is None


def test_single_unit_session_rejects_unit_edits(directory) -> None:
    session = ImportSession(ImportSchema.SINGLE_UNIT, target_apartment_id=12)
    session.load("name,phone,owner,responsible\nAna Lima,,,", directory)

    for field in ("block_label", "apartment_label", "email"):
        with pytest.raises(ValidationError):
            session.edit_field(0, field, "BLOCO 2")
    assert session.candidates[0].resolved_apartment_id == 12
