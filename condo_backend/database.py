"""
Database configuration for the condominium backend.

Implements two-level multi-tenancy with account_id + company_id.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    UUID,
    DateTime,
    Integer,
    UniqueConstraint,
    event,
    text,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import (
    Mapped,
    declarative_base,
    declared_attr,
    mapped_column,
)
from sqlalchemy.sql import func

from .config import settings
from .core.database_types import UUID as UUID_DB

# Create async engine with SSL support for MySQL
connect_args = {}
if settings.database_url.startswith("mysql+asyncmy"):
    connect_args = {
        "ssl": {
            "ssl_check_hostname": settings.database_ssl_check_hostname,
            "ssl_verify_cert": settings.database_ssl_verify_cert,
            "ssl_verify_identity": settings.database_ssl_verify_identity,
        },
    }

engine = create_async_engine(
    settings.database_url,
    echo=settings.app_debug,
    future=True,
    connect_args=connect_args,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Base class
Base = declarative_base()


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class AccountScoped:
    """Mixin for account + company scoped models (two-level multi-tenancy).

    - account_id: Top-level tenant (SaaS account)
    - company_id: Second-level tenant (administrator company within the account)

    Models using this mixin have a composite primary key
    (account_id, company_id, id) and an account+company-scoped unique UUID.
    """

    account_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        nullable=False,
        index=True,
    )

    company_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        nullable=False,
        index=True,
    )

    # ID within the account+company scope
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        nullable=False,
    )

    # UUID for external references (unique within account+company)
    uuid: Mapped[UUID] = mapped_column(UUID_DB(), nullable=False, index=True)

    @declared_attr
    def __table_args__(cls):
        """Add account+company-scoped unique constraint on UUID."""
        return (
            UniqueConstraint(
                "account_id",
                "company_id",
                "uuid",
                name=f"uq_{cls.__tablename__}_acct_comp_uuid",
            ),
        )


@event.listens_for(AccountScoped, "before_insert", propagate=True)
def set_composite_key_fields(mapper, connection, target):
    """Event listener to set composite key fields before insert."""
    if getattr(target, "uuid", None) is None:
        target.uuid = uuid.uuid4()

    if (
        target.id is None
        and target.account_id is not None
        and target.company_id is not None
    ):
        table_name = mapper.local_table.name

        result = connection.execute(
            text(
                f"SELECT COALESCE(MAX(id), 0) + 1 FROM {table_name} "
                f"WHERE account_id = :account_id AND company_id = :company_id"
            ),
            {"account_id": target.account_id, "company_id": target.company_id},
        )
        target.id = result.scalar()
