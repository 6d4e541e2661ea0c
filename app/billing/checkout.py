import logging

from app.agents.postgres import PostgresAgent
from app.billing.pricing import aggregate
from app.errors import ConflictError, EmptyCartError, NotFoundError, StoreError
from app.models.invoice import Invoice, InvoiceItem
from app.schemas.cart import Cart

logger = logging.getLogger(__name__)

def build_invoice(cart: Cart):
    """Invoice and item rows for a cart. Items get their invoice_id when written."""
    totals = aggregate(cart)
    invoice = Invoice(total_amount=totals.grand_total, total_tax=totals.total_tax)
    items = [
        InvoiceItem(
            item_name=line.name,
            quantity=line.quantity,
            price_per_item=line.unit_price,
            category_id=line.category.id,
            tax=line.tax,
        )
        for line in cart.lines
    ]
    return invoice, items

async def verify_categories(cart: Cart, agent: PostgresAgent):
    """Check every line's category snapshot against the store.

    Unknown ids raise NotFoundError. A snapshot whose rate no longer matches
    the stored one raises ConflictError so the line gets re-added.
    """
    stored = {}
    for line in cart.lines:
        snapshot = line.category
        if snapshot.id not in stored:
            stored[snapshot.id] = await agent.get_category(snapshot.id)
        category = stored[snapshot.id]
        if category is None:
            raise NotFoundError(f"Category {snapshot.id} not found.")
        if category.tax_rate != snapshot.tax_rate:
            raise ConflictError(
                f"Tax rate of category {category.name} is {category.tax_rate}, cart has {snapshot.tax_rate}. Re-add the line."
            )

async def checkout(cart: Cart, agent: PostgresAgent):
    """Commit a cart as one invoice plus its items.

    Raises EmptyCartError without touching the store when the cart has no
    lines. Category snapshots are checked against the store before writing.
    Store failures surface as StoreError and nothing is written.
    """
    if not cart.lines:
        raise EmptyCartError()

    await verify_categories(cart, agent)
    invoice, items = build_invoice(cart)
    try:
        invoice, items = await agent.insert_invoice(invoice, items)
    except StoreError as e:
        logger.error("Checkout of %d lines failed: %s", len(cart.lines), e.message)
        raise

    logger.info("Checked out invoice %s: %d items, total %s", invoice.id, len(items), invoice.total_amount)
    return invoice, items
