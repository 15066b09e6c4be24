"""initial tables

Revision ID: 0001_init
Revises:
Create Date: 2026-01-09
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=200)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("avatar_url", sa.Text()),
        sa.Column("role", sa.String(length=16), server_default="employee", nullable=False),  # admin/employee
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("school", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_customers_name", "customers", ["name"])
    op.create_index("ix_customers_phone", "customers", ["phone"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("school", sa.String(length=100)),
        sa.Column("purchase_date", sa.Date()),
        sa.Column("due_date", sa.Date()),
        sa.Column("payment_status", sa.String(length=32)),
        sa.Column("delivery_status", sa.String(length=16), server_default="pending", nullable=False),  # pending/partial/delivered
        sa.Column("notes", sa.Text()),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("profiles.id", ondelete="SET NULL")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("amount_paid", sa.Numeric(12, 2), server_default="0", nullable=False),
    )
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])
    op.create_index("ix_orders_school", "orders", ["school"])
    op.create_index("ix_orders_delivery_status", "orders", ["delivery_status"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_name", sa.String(length=200), nullable=False),
        sa.Column("size", sa.String(length=32), nullable=False),
        sa.Column("quantity", sa.Integer, server_default="1", nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("quantity_delivered", sa.Integer, server_default="0", nullable=False),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=100)),
        sa.Column("school", sa.String(length=100)),
        sa.Column("price", sa.Numeric(12, 2), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "imported_orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("raw_header", sa.Text()),
        sa.Column("customer_name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("school", sa.String(length=100), nullable=False),
        sa.Column("payment_status", sa.String(length=32), server_default="Pending", nullable=False),
        sa.Column("original_text", sa.Text(), server_default="", nullable=False),
        sa.Column("raw_items", sa.JSON()),
        sa.Column("parsed_items", sa.JSON()),
        sa.Column("status", sa.String(length=16), server_default="pending", nullable=False),  # pending/approved/ignored
    )
    op.create_index("ix_imported_orders_created_at", "imported_orders", ["created_at"])
    op.create_index("ix_imported_orders_status", "imported_orders", ["status"])

def downgrade():
    op.drop_index("ix_imported_orders_status", table_name="imported_orders")
    op.drop_index("ix_imported_orders_created_at", table_name="imported_orders")
    op.drop_table("imported_orders")
    op.drop_index("ix_products_name", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")
    op.drop_index("ix_orders_created_at", table_name="orders")
    op.drop_index("ix_orders_delivery_status", table_name="orders")
    op.drop_index("ix_orders_school", table_name="orders")
    op.drop_index("ix_orders_customer_id", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_customers_phone", table_name="customers")
    op.drop_index("ix_customers_name", table_name="customers")
    op.drop_table("customers")
    op.drop_table("profiles")
