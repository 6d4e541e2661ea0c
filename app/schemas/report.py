from decimal import Decimal
from pydantic import BaseModel

class CategorySales(BaseModel):
    revenue: Decimal = Decimal("0")
    items_sold: int = 0

class SalesSummary(BaseModel):
    total_revenue: Decimal
    total_invoices: int
    sales_by_category: dict[str, CategorySales]
