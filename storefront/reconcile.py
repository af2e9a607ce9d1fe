"""
Line-item rules for a cart.

A cart's items are a list of ``{"product_id": int, "quantity": int}`` dicts
kept in first-add order, with at most one entry per product. Every function
here returns a new list and leaves its input untouched, so callers can assign
the result straight back to the stored document.
"""
from typing import Dict, List, Optional

from .errors import NotFound, ValidationFailed

LineItem = Dict[str, int]


def check_quantity(quantity) -> int:
    # bool is an int subclass; True must not count as 1
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationFailed("Quantity must be an integer")
    if quantity < 1:
        raise ValidationFailed("Quantity must be at least 1")
    return quantity


def find_line(items: List[LineItem], product_id: int) -> Optional[int]:
    for index, item in enumerate(items):
        if item["product_id"] == product_id:
            return index
    return None


def reconcile(items: List[LineItem], product_id: int, quantity: int) -> List[LineItem]:
    """Merge ``quantity`` of ``product_id`` into ``items``.

    An existing line for the product has its quantity increased; otherwise a
    new line is appended at the end.
    """
    check_quantity(quantity)
    updated = [dict(item) for item in items]
    index = find_line(updated, product_id)
    if index is None:
        updated.append({"product_id": product_id, "quantity": quantity})
    else:
        updated[index]["quantity"] += quantity
    return updated


def set_quantity(items: List[LineItem], product_id: int, quantity: int) -> List[LineItem]:
    """Replace the quantity of an existing line. Unlike ``reconcile`` it never creates one."""
    check_quantity(quantity)
    updated = [dict(item) for item in items]
    index = find_line(updated, product_id)
    if index is None:
        raise NotFound("Product not in cart")
    updated[index]["quantity"] = quantity
    return updated


def remove_item(items: List[LineItem], product_id: int) -> List[LineItem]:
    if find_line(items, product_id) is None:
        raise NotFound("Product not in cart")
    return [dict(item) for item in items if item["product_id"] != product_id]
