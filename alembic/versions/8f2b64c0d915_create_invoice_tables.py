"""create_invoice_tables

Revision ID: 8f2b64c0d915
Revises: 3c1d9e7a52b0
Create Date: 2026-10-12 10:19:37.604712

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8f2b64c0d915'
down_revision: Union[str, None] = '3c1d9e7a52b0'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("total_amount", sa.Numeric(18, 6), nullable=False),
        sa.Column("total_tax", sa.Numeric(18, 6), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # category_id carries no foreign key: deleting a category keeps history intact.
    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), sa.Identity(), nullable=False),
        sa.Column("invoice_id", sa.Integer(), nullable=False),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_per_item", sa.Numeric(12, 2), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("tax", sa.Numeric(18, 6), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
        sa.CheckConstraint("quantity > 0", name="ck_invoice_items_quantity"),
        sa.CheckConstraint("price_per_item >= 0", name="ck_invoice_items_price"),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])
    op.create_index("ix_invoice_items_category_id", "invoice_items", ["category_id"])


def downgrade() -> None:
    op.drop_index("ix_invoice_items_category_id", table_name="invoice_items")
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
