"""Database access for the resident import.

Each call opens its own short-lived session so inserts commit one by one
and a failed row never poisons the next.
"""

from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...core.exceptions import RemoteInsertError, ResourceNotFoundError
from ...core.logging import get_logger
from ..condominiums import crud as condominium_crud
from ..residents import crud as resident_crud
from .directory import Apartment, Block, UnitDirectory
from .duplicates import ExistingResidentIndex
from .schemas import NewResident

logger = get_logger(__name__)


class ImportGateway:
    """Unit directory query, existing-resident query and resident insert."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        account_id: int,
        company_id: int,
    ):
        self._session_factory = session_factory
        self.account_id = account_id
        self.company_id = company_id

    async def get_condominium_name(self, condominium_id: int) -> str:
        async with self._session_factory() as db:
            condominium = await condominium_crud.get_condominium_by_id(
                db, condominium_id, self.account_id, self.company_id
            )
        if condominium is None:
            raise ResourceNotFoundError("Condominium", condominium_id)
        return condominium.name

    async def load_directory(self, condominium_id: int) -> UnitDirectory:
        async with self._session_factory() as db:
            blocks = await condominium_crud.get_blocks(
                db, condominium_id, self.account_id, self.company_id
            )
            apartments = await condominium_crud.get_apartments(
                db, condominium_id, self.account_id, self.company_id
            )
        return UnitDirectory(
            blocks=[Block(id=b.id, name=b.name) for b in blocks],
            apartments=[
                Apartment(id=a.id, block_id=a.block_id, number=a.number)
                for a in apartments
            ],
        )

    async def load_existing_index(
        self, apartment_ids: Sequence[int]
    ) -> ExistingResidentIndex:
        async with self._session_factory() as db:
            pairs = await resident_crud.get_resident_contacts(
                db, apartment_ids, self.account_id, self.company_id
            )
        return ExistingResidentIndex(pairs)

    async def insert_resident(self, resident: NewResident) -> int:
        """Insert and commit one resident.

        Raises:
            RemoteInsertError: With the driver's message when the insert fails.
        """
        async with self._session_factory() as db:
            try:
                created = await resident_crud.create_resident(
                    db,
                    account_id=self.account_id,
                    company_id=self.company_id,
                    **resident.model_dump(),
                )
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                raw = str(getattr(exc, "orig", None) or exc)
                raise RemoteInsertError(raw) from exc
        return created.id
