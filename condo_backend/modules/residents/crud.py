"""CRUD operations for residents."""

from collections.abc import Sequence

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Resident


async def get_resident_contacts(
    db: AsyncSession,
    apartment_ids: Sequence[int],
    account_id: int,
    company_id: int,
) -> list[tuple[int, str | None]]:
    """Get (apartment_id, email) of every resident of the given apartments."""
    if not apartment_ids:
        return []
    result = await db.execute(
        select(Resident.apartment_id, Resident.email).where(
            and_(
                Resident.apartment_id.in_(apartment_ids),
                Resident.account_id == account_id,
                Resident.company_id == company_id,
            )
        )
    )
    return [(row.apartment_id, row.email) for row in result.all()]


async def create_resident(
    db: AsyncSession,
    account_id: int,
    company_id: int,
    apartment_id: int,
    full_name: str,
    **kwargs,
) -> Resident:
    """Create a new resident."""
    resident = Resident(
        account_id=account_id,
        company_id=company_id,
        apartment_id=apartment_id,
        full_name=full_name,
        **kwargs,
    )
    db.add(resident)
    await db.flush()
    return resident
