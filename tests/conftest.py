from __future__ import annotations

import os
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
os.environ["CONFIG"] = str(REPO_ROOT / "resources" / "config" / "test.yaml")

from condo_backend.core.exceptions import RemoteInsertError  # noqa: E402
from condo_backend.modules.resident_import.directory import (  # noqa: E402
    Apartment,
    Block,
    UnitDirectory,
)
from condo_backend.modules.resident_import.duplicates import (  # noqa: E402
    ExistingResidentIndex,
)

FULL_HEADER = "block,apartment,name,email,phone,tax_id,owner,responsible"
REDUCED_HEADER = "block,apartment,name,phone,owner,responsible"

SCENARIO_ROWS = [
    "BLOCO 1,101,João da Silva,joao@email.com,11999999999,,sim,sim",
    "BLOCO 1,102,Maria Santos,maria@email.com,11988888888,,não,não",
    "BLOCO 9,201,Carlos Souza,carlos@email.com,11977777777,,sim,não",
]


def build_csv(header: str, *rows: str) -> str:
    return "\n".join([header, *rows])


@pytest.fixture()
def directory() -> UnitDirectory:
    return UnitDirectory(
        blocks=[Block(id=1, name="BLOCO 1"), Block(id=2, name="BLOCO 2")],
        apartments=[
            Apartment(id=11, block_id=1, number="101"),
            Apartment(id=12, block_id=1, number="102"),
            Apartment(id=21, block_id=2, number="201"),
        ],
    )


@pytest.fixture()
def scenario_csv() -> str:
    return build_csv(FULL_HEADER, *SCENARIO_ROWS)


@pytest.fixture()
def existing_joao() -> ExistingResidentIndex:
    return ExistingResidentIndex([(11, "joao@email.com")])


class FakeGateway:
    """In-memory stand-in for the database gateway."""

    def __init__(
        self,
        directory: UnitDirectory,
        existing: list[tuple[int, str | None]] | None = None,
        condominium_name: str = "Residencial Jardim Azul",
        failures: dict[str, str] | None = None,
    ):
        self.directory = directory
        self.existing = existing or []
        self.condominium_name = condominium_name
        self.failures = failures or {}
        self.inserted: list = []

    async def get_condominium_name(self, condominium_id: int) -> str:
        return self.condominium_name

    async def load_directory(self, condominium_id: int) -> UnitDirectory:
        return self.directory

    async def load_existing_index(self, apartment_ids) -> ExistingResidentIndex:
        return ExistingResidentIndex(self.existing)

    async def insert_resident(self, resident) -> int:
        if resident.full_name in self.failures:
            raise RemoteInsertError(self.failures[resident.full_name])
        self.inserted.append(resident)
        return len(self.inserted)


@pytest.fixture()
def fake_gateway(directory: UnitDirectory) -> FakeGateway:
    return FakeGateway(directory)
