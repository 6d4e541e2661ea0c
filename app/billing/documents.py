from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from app.agents.pdf import PdfAgent
from app.billing.pricing import aggregate
from app.billing.reporting import resolve_category_name
from app.config import settings
from app.errors import NotFoundError
from app.models.invoice import Invoice
from app.schemas.cart import Cart
from app.schemas.invoice import InvoiceItemRead

TITLE = "Invoice"
TABLE_HEADER = ["Item", "Category", "Qty", "Price", "Tax", "Total"]
CENT = Decimal("0.01")

def format_money(amount: Decimal) -> str:
    return f"{settings.CURRENCY_SYMBOL}{Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP):,}"

def filename_for(invoice_id: int) -> str:
    return f"invoice-{invoice_id}.pdf"

def _metadata(invoice_id: int, issued_on: date):
    return [f"Invoice ID: {invoice_id}", f"Date: {issued_on.isoformat()}"]

def _summary(subtotal: Decimal, total_tax: Decimal, grand_total: Decimal):
    return [
        f"Subtotal: {format_money(subtotal)}",
        f"Total Tax: {format_money(total_tax)}",
        f"Grand Total: {format_money(grand_total)}",
    ]

def render_cart_invoice(invoice: Invoice, cart: Cart, pdf_agent: PdfAgent | None = None) -> bytes:
    """PDF for a cart that has just been checked out as `invoice`."""
    totals = aggregate(cart)
    rows = [
        [
            line.name,
            line.category.name,
            str(line.quantity),
            format_money(line.unit_price),
            format_money(line.tax),
            format_money(line.total),
        ]
        for line in cart.lines
    ]
    issued_on = invoice.created_at.date() if invoice.created_at else date.today()
    return (pdf_agent or PdfAgent()).render(
        TITLE,
        _metadata(invoice.id, issued_on),
        TABLE_HEADER,
        rows,
        _summary(totals.subtotal, totals.total_tax, totals.grand_total),
    )

def render_stored_invoice(invoice: Invoice, items: list[InvoiceItemRead], pdf_agent: PdfAgent | None = None) -> bytes:
    """PDF for a committed invoice. Tax and grand total come from the invoice row."""
    if not items:
        raise NotFoundError(f"Invoice {invoice.id} has no items.")

    rows = [
        [
            item.item_name,
            resolve_category_name(item.category_name),
            str(item.quantity),
            format_money(item.price_per_item),
            format_money(item.tax),
            format_money(item.total),
        ]
        for item in items
    ]
    subtotal = sum((item.price_per_item * item.quantity for item in items), Decimal("0"))
    return (pdf_agent or PdfAgent()).render(
        TITLE,
        _metadata(invoice.id, invoice.created_at.date()),
        TABLE_HEADER,
        rows,
        _summary(subtotal, invoice.total_tax, invoice.total_amount),
    )
