"""Cart pricing.

A cart is an immutable value: every operation returns a new `Cart` and leaves
its input alone. All amounts are `Decimal`; nothing is rounded here.
"""
from decimal import Decimal
from pydantic import ValidationError

from app.errors import CartIndexError
from app.schemas.cart import Cart, CartLine, CartTotals, CategorySnapshot

ZERO = Decimal("0")

def add_line(cart: Cart, name: str, quantity: int, unit_price: Decimal, category: CategorySnapshot | None) -> Cart:
    """Append a priced line. Invalid input leaves the cart as it was."""
    if not name or not name.strip():
        return cart
    if quantity is None or quantity <= 0:
        return cart
    if unit_price is None or unit_price < 0:
        return cart
    if category is None:
        return cart

    try:
        line = CartLine(name=name.strip(), quantity=quantity, unit_price=unit_price, category=category)
    except ValidationError:
        return cart
    return Cart(lines=[*cart.lines, line])

def remove_line(cart: Cart, index: int) -> Cart:
    if index < 0 or index >= len(cart.lines):
        raise CartIndexError(f"No cart line at position {index}.")
    return Cart(lines=[line for i, line in enumerate(cart.lines) if i != index])

def aggregate(cart: Cart) -> CartTotals:
    subtotal = sum((line.subtotal for line in cart.lines), ZERO)
    total_tax = sum((line.tax for line in cart.lines), ZERO)
    return CartTotals(subtotal=subtotal, total_tax=total_tax, grand_total=subtotal + total_tax)
