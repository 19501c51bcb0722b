"""orders, sellers, settings, users

Revision ID: 20260201_initial_schema
Revises:
Create Date: 2026-02-01
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision = "20260201_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(inspect(bind).get_table_names())

    # databases bootstrapped by db.create_all() already have the tables
    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("username", sa.String(length=150), nullable=False, unique=True),
            sa.Column("password_hash", sa.String(length=200), nullable=False),
            sa.Column("is_admin", sa.Boolean(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )

    if "sellers" not in existing:
        op.create_table(
            "sellers",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(length=120), nullable=False),
            sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("total_sales", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=True),
        )

    if "settings" not in existing:
        op.create_table(
            "settings",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("key", sa.String(length=64), nullable=False),
            sa.Column("value", sa.String(length=500), nullable=False, server_default=""),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
        )
        op.create_index("ix_settings_key", "settings", ["key"], unique=True)

    if "orders" not in existing:
        op.create_table(
            "orders",
            sa.Column("id", sa.String(length=32), primary_key=True),
            sa.Column("order_code", sa.String(length=32), nullable=False),
            sa.Column("customer_name", sa.String(length=120), nullable=False),
            sa.Column("customer_whatsapp", sa.String(length=20), nullable=False),
            sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=True),
            sa.Column("product_type", sa.String(length=50), nullable=False),
            sa.Column("product_name", sa.String(length=150), nullable=False),
            sa.Column("price", sa.Numeric(10, 2), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False, server_default="paid"),
            sa.Column("receipt_url", sa.String(length=500), nullable=True),
            sa.Column("used_at", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
        )
        op.create_index("ix_orders_order_code", "orders", ["order_code"], unique=True)
        op.create_index("ix_orders_status", "orders", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index("ix_orders_order_code", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_settings_key", table_name="settings")
    op.drop_table("settings")
    op.drop_table("sellers")
    op.drop_table("users")
