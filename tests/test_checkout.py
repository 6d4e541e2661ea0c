import random
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from app.agents.postgres import PostgresAgent
from app.billing.checkout import build_invoice, checkout
from app.errors import ConflictError, EmptyCartError, NotFoundError, StoreError
from app.models.category import Category, CategoryCreate
from app.models.invoice import Invoice, InvoiceItem
from app.schemas.cart import Cart, CategorySnapshot
from tests.factories import make_category, make_line, random_cart


async def seed_categories(agent):
    rows = [
        await agent.insert_category(CategoryCreate(name="Food", tax_rate=Decimal("0.05"))),
        await agent.insert_category(CategoryCreate(name="Drinks", tax_rate=Decimal("0.2"))),
        await agent.insert_category(CategoryCreate(name="Books", tax_rate=Decimal("0"))),
        await agent.insert_category(CategoryCreate(name="Tobacco", tax_rate=Decimal("0.0725"))),
    ]
    return [CategorySnapshot(id=row.id, name=row.name, tax_rate=row.tax_rate) for row in rows]


def test_build_invoice_carries_cart_totals():
    cart = Cart(lines=[
        make_line(name="Rice", quantity=3, unit_price="10.00", category=make_category(tax_rate="0.05")),
        make_line(name="Tea", quantity=1, unit_price="2.50", category=make_category(id=2, name="Drinks", tax_rate="0.2")),
    ])

    invoice, items = build_invoice(cart)

    assert invoice.total_tax == Decimal("2.00")
    assert invoice.total_amount == Decimal("34.50")
    assert [(i.item_name, i.quantity, i.price_per_item, i.category_id, i.tax) for i in items] == [
        ("Rice", 3, Decimal("10.00"), 1, Decimal("1.50")),
        ("Tea", 1, Decimal("2.50"), 2, Decimal("0.50")),
    ]


async def test_empty_cart_makes_no_store_calls():
    agent = AsyncMock(spec=PostgresAgent)

    with pytest.raises(EmptyCartError):
        await checkout(Cart(), agent)

    agent.insert_invoice.assert_not_awaited()
    assert agent.method_calls == []


async def test_checkout_writes_invoice_and_items(agent):
    categories = await seed_categories(agent)
    cart = Cart(lines=[
        make_line(name="Rice", quantity=3, unit_price="10.00", category=categories[0]),
        make_line(name="Cola", quantity=2, unit_price="1.99", category=categories[1]),
    ])

    invoice, items = await checkout(cart, agent)

    assert invoice.id is not None
    assert invoice.created_at is not None
    stored = await agent.list_invoice_items(invoice.id)
    assert [item.item_name for item in stored] == ["Rice", "Cola"]
    assert all(item.invoice_id == invoice.id for item in stored)
    assert [item.category_name for item in stored] == ["Food", "Drinks"]


@pytest.mark.parametrize("seed", range(10))
async def test_stored_total_matches_stored_items(agent, seed):
    rng = random.Random(seed)
    categories = await seed_categories(agent)
    cart = random_cart(rng, categories, rng.randint(1, 50))

    invoice, _ = await checkout(cart, agent)

    stored_invoice = await agent.get_invoice(invoice.id)
    stored_items = await agent.list_invoice_items(invoice.id)
    assert len(stored_items) == len(cart.lines)
    assert stored_invoice.total_amount == sum(
        (item.price_per_item * item.quantity + item.tax for item in stored_items), Decimal("0")
    )
    assert stored_invoice.total_tax == sum((item.tax for item in stored_items), Decimal("0"))


async def test_failed_item_write_leaves_no_invoice(agent):
    invoice = Invoice(total_amount=Decimal("10"), total_tax=Decimal("0"))
    broken = InvoiceItem(item_name=None, quantity=1, price_per_item=Decimal("10"), category_id=1, tax=Decimal("0"))

    with pytest.raises(StoreError):
        await agent.insert_invoice(invoice, [broken])

    assert await agent.list_invoices() == []
    assert await agent.list_invoice_items() == []


async def test_store_failure_propagates_from_checkout():
    agent = AsyncMock(spec=PostgresAgent)
    agent.get_category.return_value = Category(id=1, name="Food", tax_rate=Decimal("0.05"))
    agent.insert_invoice.side_effect = StoreError("connection refused")

    with pytest.raises(StoreError, match="connection refused"):
        await checkout(Cart(lines=[make_line()]), agent)


async def test_unknown_category_is_rejected_before_writing(agent):
    categories = await seed_categories(agent)
    cart = Cart(lines=[
        make_line(category=categories[0]),
        make_line(category=make_category(id=999, name="Ghost", tax_rate="0")),
    ])

    with pytest.raises(NotFoundError):
        await checkout(cart, agent)

    assert await agent.list_invoices() == []


async def test_stale_or_forged_rate_is_rejected_before_writing(agent):
    categories = await seed_categories(agent)
    drinks = categories[1]
    forged = CategorySnapshot(id=drinks.id, name=drinks.name, tax_rate=Decimal("0"))
    cart = Cart(lines=[
        make_line(name="Cola", category=drinks),
        make_line(name="Juice", unit_price="10.00", category=forged),
    ])

    with pytest.raises(ConflictError):
        await checkout(cart, agent)

    assert await agent.list_invoices() == []
