"""Order pricing.

Pure functions that price order lines and aggregate them into order totals.
Nothing here touches the database; callers pass plain dicts (validated
serializer data or line snapshots) and get new dicts back. All arithmetic is
done on ``Decimal`` without intermediate rounding; rounding is a presentation
concern handled by the quotation renderer.

A discount descriptor is a mapping ``{"kind": ..., "amount": ...}`` where kind
is one of ``DiscountKind``. A missing descriptor behaves like ``NONE``.
"""

from decimal import Decimal, InvalidOperation

from .models import DiscountKind

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Coerce numbers, numeric strings and ``None`` to Decimal (None -> 0)."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats keep their shortest repr instead of binary noise
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")


def resolve_discount(base, discount) -> Decimal:
    """Return the amount a discount takes off ``base``.

    - NONE (or no descriptor): 0, whatever the amount says
    - FIXED_AMOUNT: the amount itself, independent of base
    - PERCENT: base * amount / 100 (amount is not clamped to 0..100)
    """
    if not discount:
        return ZERO
    kind = discount.get("kind") or DiscountKind.NONE
    amount = to_decimal(discount.get("amount"))
    if kind == DiscountKind.FIXED_AMOUNT:
        return amount
    if kind == DiscountKind.PERCENT:
        return to_decimal(base) * amount / HUNDRED
    return ZERO


def price_line(line: dict) -> dict:
    """Price one dish or combo line.

    Returns a copy of ``line`` with ``line_subtotal`` and ``line_final_amount``
    set. Missing quantity or unit price count as 0. The final amount may go
    negative when the discount exceeds the subtotal.
    """
    subtotal = to_decimal(line.get("quantity")) * to_decimal(line.get("unit_price_snapshot"))
    final = subtotal - resolve_discount(subtotal, line.get("line_discount"))
    return {**line, "line_subtotal": subtotal, "line_final_amount": final}


def compute_order_totals(dish_lines=None, combo_lines=None, order_discount=None, additional_charges=None) -> dict:
    """Price every line and aggregate the order.

    subtotal = sum of all line final amounts (dishes and combos alike)
    total    = subtotal - order discount (resolved on subtotal) + additional charges
    """
    priced_dishes = [price_line(line) for line in dish_lines or []]
    priced_combos = [price_line(line) for line in combo_lines or []]

    subtotal = sum(
        (line["line_final_amount"] for line in priced_dishes + priced_combos), ZERO
    )
    discount_amount = resolve_discount(subtotal, order_discount)
    total = subtotal - discount_amount + to_decimal(additional_charges)

    return {
        "priced_dish_lines": priced_dishes,
        "priced_combo_lines": priced_combos,
        "subtotal": subtotal,
        "order_discount_amount": discount_amount,
        "total": total,
    }
