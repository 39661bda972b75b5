"""initial schema

Revision ID: 3f9a1c7d2b10
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f9a1c7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("owner_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "tariff_configurations",
        sa.Column(
            "property_id",
            sa.Integer,
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("electricity_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("water_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("water_fixed_fee", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_fixed_fee", sa.Float, nullable=False, server_default="0"),
        sa.Column("last_electricity", sa.Float, nullable=False, server_default="0"),
        sa.Column("last_water", sa.Float, nullable=False, server_default="0"),
        sa.Column("last_gas", sa.Float, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "tariff_custom_fields",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "property_id",
            sa.Integer,
            sa.ForeignKey("tariff_configurations.property_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("field_id", sa.String(26), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("field_type", sa.String(10), nullable=False),
        sa.Column("unit", sa.Text, nullable=False, server_default=""),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("last_reading", sa.Float, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("property_id", "field_id"),
    )

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("property_id", sa.Integer, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text, nullable=False, server_default=""),
        sa.Column("electricity_consumption", sa.Float, nullable=False, server_default="0"),
        sa.Column("water_consumption", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_consumption", sa.Float, nullable=False, server_default="0"),
        sa.Column("electricity_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("water_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("water_fixed_fee", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("gas_fixed_fee", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_bills_property_created", "bills", ["property_id", "created_at"])

    op.create_table(
        "bill_custom_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("bill_id", sa.Integer, sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("field_id", sa.String(26), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("field_type", sa.String(10), nullable=False),
        sa.Column("unit", sa.Text, nullable=True),
        sa.Column("consumption", sa.Float, nullable=True),
        sa.Column("cost", sa.Float, nullable=False, server_default="0"),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_table("bill_custom_records")
    op.drop_index("ix_bills_property_created", table_name="bills")
    op.drop_table("bills")
    op.drop_table("tariff_custom_fields")
    op.drop_table("tariff_configurations")
    op.drop_table("properties")
    op.drop_table("users")
