from __future__ import annotations

import asyncio
import json
from datetime import timedelta

import pytest

from conftest import FakeGateway
from condo_backend.core.exceptions import FileFormatError, ValidationError
from condo_backend.modules.resident_import import services
from condo_backend.modules.resident_import.columns import ImportSchema
from condo_backend.modules.resident_import.registry import (
    ImportSessionRegistry,
    SessionOwner,
)
from condo_backend.modules.resident_import.session import ImportStage

OWNER = SessionOwner(account_id=1, company_id=1, user_id=10)


@pytest.fixture()
def registry() -> ImportSessionRegistry:
    return ImportSessionRegistry(ttl=timedelta(minutes=5))


def test_check_upload_strips_the_bom() -> None:
    assert services.check_upload("residents.CSV", "\ufeffblock,apartment".encode()) == "block,apartment"


@pytest.mark.parametrize("filename", ["residents.xlsx", "residents", None])
def test_check_upload_rejects_other_extensions(filename) -> None:
    with pytest.raises(FileFormatError):
        services.check_upload(filename, b"block,apartment")


def test_check_upload_rejects_large_files() -> None:
    with pytest.raises(FileFormatError):
        services.check_upload("residents.csv", b"x" * 5000)


def test_check_upload_rejects_non_utf8() -> None:
    with pytest.raises(FileFormatError):
        services.check_upload("residents.csv", b"block\n\xff\xfe\xfa")


def test_open_session_checks_existing_residents(registry, directory, scenario_csv) -> None:
    gateway = FakeGateway(directory, existing=[(11, "joao@email.com")])

    session = asyncio.run(
        services.open_import_session(
            gateway, registry, OWNER, 7, ImportSchema.FULL, "residents.csv", scenario_csv.encode()
        )
    )

    assert session.stage is ImportStage.PREVIEW
    assert session.insert_timeout == 2
    assert session.valid_count == 1
    assert registry.get(session.id, OWNER) is session


def test_single_unit_requires_an_apartment_of_the_condominium(registry, fake_gateway) -> None:
    payload = b"name,phone,owner,responsible\nAna Lima,,,"

    for apartment_id in (None, 99):
        with pytest.raises(ValidationError):
            asyncio.run(
                services.open_import_session(
                    fake_gateway,
                    registry,
                    OWNER,
                    7,
                    ImportSchema.SINGLE_UNIT,
                    "ana.csv",
                    payload,
                    apartment_id=apartment_id,
                )
            )
    assert len(registry) == 0


def test_stream_import_emits_progress_then_done(registry, directory, scenario_csv, fake_gateway) -> None:
    session = asyncio.run(
        services.open_import_session(
            fake_gateway, registry, OWNER, 7, ImportSchema.FULL, "residents.csv", scenario_csv.encode()
        )
    )
    session.begin_import()

    async def drain():
        return [line async for line in services.stream_import(session, fake_gateway)]

    events = [json.loads(line) for line in asyncio.run(drain())]

    assert [e["event"] for e in events] == ["progress", "progress", "done"]
    assert events[1]["current"] == 2
    assert events[1]["total"] == 2
    assert events[-1]["success_count"] == 2
    assert events[-1]["skipped_count"] == 0
