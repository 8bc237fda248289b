"""CRUD operations for the condominium registry."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Apartment, Block, Condominium


async def get_condominium_by_id(
    db: AsyncSession,
    condominium_id: int,
    account_id: int,
    company_id: int,
) -> Condominium | None:
    """Get a condominium by ID within tenant scope."""
    result = await db.execute(
        select(Condominium).where(
            and_(
                Condominium.id == condominium_id,
                Condominium.account_id == account_id,
                Condominium.company_id == company_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def get_blocks(
    db: AsyncSession,
    condominium_id: int,
    account_id: int,
    company_id: int,
) -> list[Block]:
    """Get the blocks of a condominium in creation order."""
    result = await db.execute(
        select(Block)
        .where(
            and_(
                Block.condominium_id == condominium_id,
                Block.account_id == account_id,
                Block.company_id == company_id,
            )
        )
        .order_by(Block.id)
    )
    return list(result.scalars().all())


async def get_apartments(
    db: AsyncSession,
    condominium_id: int,
    account_id: int,
    company_id: int,
) -> list[Apartment]:
    """Get every apartment of a condominium, grouped by block."""
    result = await db.execute(
        select(Apartment)
        .where(
            and_(
                Apartment.condominium_id == condominium_id,
                Apartment.account_id == account_id,
                Apartment.company_id == company_id,
            )
        )
        .order_by(Apartment.block_id, Apartment.id)
    )
    return list(result.scalars().all())
