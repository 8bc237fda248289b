"""Resident models."""

from sqlalchemy import Boolean, ForeignKeyConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...database import AccountScoped, Base, TimestampMixin


class Resident(AccountScoped, TimestampMixin, Base):
    """Person living in (or owning) an apartment."""

    __tablename__ = "residents"

    apartment_id: Mapped[int] = mapped_column(Integer, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cpf: Mapped[str | None] = mapped_column(String(11), nullable=True)
    is_owner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_responsible: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["account_id", "company_id", "apartment_id"],
            ["apartments.account_id", "apartments.company_id", "apartments.id"],
            ondelete="CASCADE",
        ),
        Index(
            "ix_residents_apartment_email",
            "account_id",
            "company_id",
            "apartment_id",
            "email",
            unique=True,
        ),
    )

    def __repr__(self) -> str:
        return f"<Resident(id={self.id}, apartment_id={self.apartment_id}, name={self.full_name})>"
