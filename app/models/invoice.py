from datetime import datetime
from decimal import Decimal
from sqlalchemy import func
from sqlmodel import SQLModel, Field

class InvoiceBase(SQLModel):
    total_amount: Decimal = Field(max_digits=18, decimal_places=6)
    total_tax: Decimal = Field(max_digits=18, decimal_places=6)

class Invoice(InvoiceBase, table=True):
    __tablename__ = "invoices"
    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime | None = Field(default=None, sa_column_kwargs={"server_default": func.now()})

class InvoiceItemBase(SQLModel):
    item_name: str
    quantity: int = Field(gt=0)
    price_per_item: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    # Plain reference: deleting a category must leave history untouched.
    category_id: int | None = Field(default=None, index=True)
    tax: Decimal = Field(max_digits=18, decimal_places=6)

class InvoiceItem(InvoiceItemBase, table=True):
    __tablename__ = "invoice_items"
    id: int | None = Field(default=None, primary_key=True)
    invoice_id: int = Field(foreign_key="invoices.id", ondelete="CASCADE", index=True)
