"""Create world, users and sessions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `country`, `city`, `users` and `sessions`.
How:   Column names match the classic world dataset (`ID`, `Name`,
       `CountryCode`, ...) so an existing dump can be loaded unchanged.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "country",
        sa.Column("Code", sa.String(3), nullable=False),
        sa.Column("Name", sa.String(52), nullable=False, server_default=sa.text("''")),
        sa.Column("Continent", sa.String(32), nullable=True),
        sa.Column("Region", sa.String(26), nullable=True),
        sa.Column("Population", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("Code", name="pk_country"),
    )
    op.create_index("idx_country_name", "country", ["Name"])

    op.create_table(
        "city",
        sa.Column("ID", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("Name", sa.String(35), nullable=True),
        sa.Column("CountryCode", sa.String(3), nullable=True),
        sa.Column("District", sa.String(20), nullable=True),
        sa.Column("Population", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("ID", name="pk_city"),
        sa.ForeignKeyConstraint(["CountryCode"], ["country.Code"], name="fk_city_country"),
    )
    op.create_index("idx_city_name", "city", ["Name"])
    op.create_index("idx_city_country_name", "city", ["CountryCode", "Name"])

    # Username is the key, so duplicate signups fail in the database too
    op.create_table(
        "users",
        sa.Column("Username", sa.String(255), nullable=False),
        sa.Column("HashedPass", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("Username", name="pk_users"),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("expires_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_sessions"),
    )
    op.create_index("ix_sessions_expires_at", "sessions", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_sessions_expires_at", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("users")
    op.drop_index("idx_city_country_name", table_name="city")
    op.drop_index("idx_city_name", table_name="city")
    op.drop_table("city")
    op.drop_index("idx_country_name", table_name="country")
    op.drop_table("country")
