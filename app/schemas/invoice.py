from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, computed_field

class InvoiceRead(BaseModel):
    id: int
    created_at: datetime
    total_amount: Decimal
    total_tax: Decimal

class InvoiceItemRead(BaseModel):
    id: int
    invoice_id: int
    item_name: str
    quantity: int
    price_per_item: Decimal
    category_id: int | None
    category_name: str | None
    tax: Decimal

    @computed_field
    @property
    def total(self) -> Decimal:
        return self.price_per_item * self.quantity + self.tax

class InvoiceDetail(BaseModel):
    invoice: InvoiceRead
    items: list[InvoiceItemRead]
    subtotal: Decimal
