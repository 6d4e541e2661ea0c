from decimal import Decimal
from pydantic import BaseModel, Field, computed_field

class CategorySnapshot(BaseModel):
    id: int
    name: str
    tax_rate: Decimal = Field(ge=0, le=1, max_digits=5, decimal_places=4)

class CartLine(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category: CategorySnapshot

    @computed_field
    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    @computed_field
    @property
    def tax(self) -> Decimal:
        return self.unit_price * self.quantity * self.category.tax_rate

    @computed_field
    @property
    def total(self) -> Decimal:
        return self.subtotal + self.tax

class Cart(BaseModel):
    lines: list[CartLine] = Field(default_factory=list)

class CartTotals(BaseModel):
    subtotal: Decimal
    total_tax: Decimal
    grand_total: Decimal

class LineInput(BaseModel):
    name: str = Field(min_length=1)
    quantity: int = Field(default=1, gt=0)
    unit_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    category_id: int

class AddLineRequest(BaseModel):
    cart: Cart = Field(default_factory=Cart)
    line: LineInput

class CartResponse(BaseModel):
    cart: Cart
    totals: CartTotals
