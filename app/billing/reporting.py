from decimal import Decimal

from app.models.invoice import Invoice
from app.schemas.invoice import InvoiceDetail, InvoiceItemRead, InvoiceRead
from app.schemas.report import CategorySales, SalesSummary

UNCATEGORIZED = "Uncategorized"

def resolve_category_name(name: str | None) -> str:
    return name or UNCATEGORIZED

def summarize_sales(invoices: list[Invoice], items: list[InvoiceItemRead]) -> SalesSummary:
    """Revenue and units sold per category, plus overall invoice totals.

    Recomputed from the full history on every call.
    """
    sales: dict[str, CategorySales] = {}
    for item in items:
        entry = sales.setdefault(resolve_category_name(item.category_name), CategorySales())
        entry.revenue += item.price_per_item * item.quantity
        entry.items_sold += item.quantity

    return SalesSummary(
        total_revenue=sum((invoice.total_amount for invoice in invoices), Decimal("0")),
        total_invoices=len(invoices),
        sales_by_category=sales,
    )

def build_invoice_detail(invoice: Invoice, items: list[InvoiceItemRead]) -> InvoiceDetail:
    resolved = [item.model_copy(update={"category_name": resolve_category_name(item.category_name)}) for item in items]
    return InvoiceDetail(
        invoice=InvoiceRead.model_validate(invoice, from_attributes=True),
        items=resolved,
        subtotal=sum((item.price_per_item * item.quantity for item in items), Decimal("0")),
    )
