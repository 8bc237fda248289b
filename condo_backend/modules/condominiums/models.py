"""Condominium registry models.

A condominium groups named blocks; each block holds numbered apartments.
"""

from sqlalchemy import Boolean, ForeignKeyConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...database import AccountScoped, Base, TimestampMixin


class Condominium(AccountScoped, TimestampMixin, Base):
    """Condominium within account + company scope."""

    __tablename__ = "condominiums"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (Index("ix_condominiums_name", "account_id", "company_id", "name"),)

    def __repr__(self) -> str:
        return f"<Condominium(id={self.id}, name={self.name})>"


class Block(AccountScoped, TimestampMixin, Base):
    """Named group of apartments (tower, wing) inside a condominium."""

    __tablename__ = "blocks"

    condominium_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "condominium_id"],
            ["condominiums.account_id", "condominiums.company_id", "condominiums.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_blocks_name",
            "account_id",
            "company_id",
            "condominium_id",
            "name",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return f"<Block(id={self.id}, name={self.name})>"


class Apartment(AccountScoped, TimestampMixin, Base):
    """Apartment; its number is unique only within its block."""

    __tablename__ = "apartments"

    condominium_id: Mapped[int] = mapped_column(Integer, nullable=False)
    block_id: Mapped[int] = mapped_column(Integer, nullable=False)
    number: Mapped[str] = mapped_column(String(20), nullable=False)
    floor: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "block_id"],
            ["blocks.account_id", "blocks.company_id", "blocks.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_apartments_number",
            "account_id",
            "company_id",
            "block_id",
            "number",
            unique=True,
        ),
        Index("ix_apartments_condominium", "account_id", "company_id", "condominium_id"),
    )

    def __repr__(self) -> str:
        return f"<Apartment(id={self.id}, block_id={self.block_id}, number={self.number})>"
