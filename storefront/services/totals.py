"""
Cart totals.

Pure functions over line items. Unresolved items (no unit cost) count
toward quantity but add nothing to the cart value.
"""

import math
from collections.abc import Sequence

from storefront.models.cart import LineItem


def total_quantity(items: Sequence[LineItem] = ()) -> int:
    """Total number of units across all line items."""
    return sum(item.quantity for item in items)


def total_value(items: Sequence[LineItem] = ()) -> float:
    """
    Get the total value of all products added to the cart.

    Items with no unit cost, or a non-finite one, contribute 0.
    """
    total = 0.0
    for item in items:
        if item.unit_cost is None or not math.isfinite(item.unit_cost):
            continue
        total += item.quantity * item.unit_cost
    return total


def format_cart_summary(items: Sequence[LineItem]) -> str:
    """
    Format line items and totals for plain-text display.

    Args:
        items: Reconciled cart

    Returns:
        Human-readable summary, one line per item followed by totals
    """
    if not items:
        return "Cart is empty. Add more items to the cart to checkout."

    lines: list[str] = []
    for item in items:
        if item.resolved:
            lines.append(
                f"- {item.name} ({item.category}): {item.quantity} x "
                f"${item.unit_cost:g} = ${item.subtotal:g}"
            )
        else:
            lines.append(f"- {item.product_id}: {item.quantity} x (unavailable)")

    lines.append("")
    lines.append(f"Products: {total_quantity(items)}")
    lines.append(f"Order total: ${total_value(items):g}")
    return "\n".join(lines)
