"""Condominium registry and residents

Revision ID: 0001
Revises:
Create Date: 2026-06-01

Creates:
- condominiums, blocks, apartments
- residents (unique per apartment + email)
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _scoped_columns() -> list[sa.Column]:
    """Composite tenant key, UUID and timestamps shared by every table."""
    return [
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "condominiums",
        *_scoped_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("account_id", "company_id", "id"),
    )
    op.create_index("ix_condominiums_name", "condominiums", ["account_id", "company_id", "name"])

    op.create_table(
        "blocks",
        *_scoped_columns(),
        sa.Column("condominium_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.PrimaryKeyConstraint("account_id", "company_id", "id"),
        sa.ForeignKeyConstraint(
            ["account_id", "company_id", "condominium_id"],
            ["condominiums.account_id", "condominiums.company_id", "condominiums.id"],
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_blocks_name", "blocks", ["account_id", "company_id", "condominium_id", "name"], unique=True
    )

    op.create_table(
        "apartments",
        *_scoped_columns(),
        sa.Column("condominium_id", sa.Integer(), nullable=False),
        sa.Column("block_id", sa.Integer(), nullable=False),
        sa.Column("number", sa.String(20), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("account_id", "company_id", "id"),
        sa.ForeignKeyConstraint(
            ["account_id", "company_id", "block_id"],
            ["blocks.account_id", "blocks.company_id", "blocks.id"],
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_apartments_number", "apartments", ["account_id", "company_id", "block_id", "number"], unique=True
    )
    op.create_index(
        "ix_apartments_condominium", "apartments", ["account_id", "company_id", "condominium_id"]
    )

    op.create_table(
        "residents",
        *_scoped_columns(),
        sa.Column("apartment_id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("cpf", sa.String(11), nullable=True),
        sa.Column("is_owner", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("is_responsible", sa.Boolean(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("account_id", "company_id", "id"),
        sa.ForeignKeyConstraint(
            ["account_id", "company_id", "apartment_id"],
            ["apartments.account_id", "apartments.company_id", "apartments.id"],
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_residents_apartment_email",
        "residents",
        ["account_id", "company_id", "apartment_id", "email"],
        unique=True,
    )

    for table in ("condominiums", "blocks", "apartments", "residents"):
        op.create_unique_constraint(
            f"uq_{table}_acct_comp_uuid", table, ["account_id", "company_id", "uuid"]
        )


def downgrade() -> None:
    for table in ("residents", "apartments", "blocks", "condominiums"):
        op.drop_table(table)
