"""Order lifecycle services.

Everything that writes orders goes through this module: snapshot capture from
the catalog, pricing, order numbering and persistence. Creation and pricing
updates run inside ``transaction.atomic`` so the counter increment, the order
row and its lines are committed together or not at all. All lookups are
scoped by cook; another cook's order is indistinguishable from a missing one.
"""

import logging

from django.db import transaction
from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError

from catalog.models import Combo, Dish, Unit
from common.api.exceptions import NotFoundError
from .models import DiscountKind, Order, OrderLine, PricingMode
from .pricing import compute_order_totals, to_decimal
from .quotation import render_quotation
from .sequence import assign_order_number

log = logging.getLogger(__name__)

PRICING_FIELDS = ("dishes", "combos", "order_discount", "additional_charges")
SCALAR_FIELDS = ("client_name", "client_phone", "event_date", "notes", "order_type", "status")

DEFAULT_PRICING_MODE = {
    Order.OrderType.WITH_MATERIAL: PricingMode.WITH_MATERIALS,
    Order.OrderType.WITHOUT_MATERIAL: PricingMode.WITHOUT_MATERIALS,
}


# ----------------------------- snapshot helpers -----------------------------

def _plain(value) -> str:
    """Decimal('2.500') -> '2.5' for JSON snapshots."""
    return format(value.normalize(), "f")


def _catalog_price(entity, pricing_mode):
    if pricing_mode == PricingMode.WITHOUT_MATERIALS:
        return entity.price_without_materials
    return entity.price_with_materials


def _combo_composition(combo):
    return [
        {"dish_id": item.dish_id, "name": item.dish.name, "quantity": _plain(item.quantity)}
        for item in combo.items.all()
    ]


def _load_source(cook, kind, source_id):
    if kind == OrderLine.Kind.COMBO:
        source = (
            Combo.objects.filter(cook=cook, pk=source_id)
            .prefetch_related("items__dish")
            .first()
        )
        label = "Combo"
    else:
        source = Dish.objects.filter(cook=cook, pk=source_id).first()
        label = "Dish"
    if source is None:
        raise NotFoundError(f"{label} {source_id} not found.")
    return source


def build_line_snapshot(cook, kind, data, position, order_type) -> dict:
    """Turn one validated input line into a priced-ready snapshot dict.

    Values given explicitly win; anything missing is captured from the
    referenced catalog entity (when ``source_id`` is set).
    """
    pricing_mode = data.get("pricing_mode") or DEFAULT_PRICING_MODE.get(
        order_type, PricingMode.WITH_MATERIALS
    )
    snapshot = {
        "kind": kind,
        "position": position,
        "source_id": data.get("source_id"),
        "name_snapshot": data.get("name"),
        "unit": data.get("unit"),
        "quantity": data.get("quantity"),
        "unit_price_snapshot": data.get("unit_price"),
        "pricing_mode": pricing_mode,
        "line_discount": data.get("discount") or {"kind": DiscountKind.NONE, "amount": 0},
        "included_dishes": data.get("included_dishes"),
    }

    if snapshot["source_id"] is not None:
        source = _load_source(cook, kind, snapshot["source_id"])
        if not snapshot["name_snapshot"]:
            snapshot["name_snapshot"] = source.name
        if snapshot["unit_price_snapshot"] is None:
            snapshot["unit_price_snapshot"] = _catalog_price(source, pricing_mode)
        if kind == OrderLine.Kind.DISH and not snapshot["unit"]:
            snapshot["unit"] = source.unit
        if kind == OrderLine.Kind.COMBO and snapshot["included_dishes"] is None:
            snapshot["included_dishes"] = _combo_composition(source)

    if not snapshot["name_snapshot"]:
        raise ValidationError({"lines": "Each line needs a source_id or a name."})

    if kind == OrderLine.Kind.COMBO:
        snapshot["unit"] = Unit.PKG
        snapshot["included_dishes"] = [
            {"dish_id": d.get("dish_id"), "name": d["name"], "quantity": _plain(to_decimal(d["quantity"]))}
            for d in snapshot["included_dishes"] or []
        ]
    else:
        snapshot["unit"] = snapshot["unit"] or Unit.PIECE
        snapshot["included_dishes"] = []
    return snapshot


def build_line_snapshots(cook, kind, lines, order_type):
    return [
        build_line_snapshot(cook, kind, data, position, order_type)
        for position, data in enumerate(lines or [])
    ]


def stored_line_snapshot(line: OrderLine) -> dict:
    """Snapshot dict for an already persisted line (kept unchanged on merge)."""
    return {
        "kind": line.kind,
        "position": line.position,
        "source_id": line.source_id,
        "name_snapshot": line.name_snapshot,
        "unit": line.unit,
        "quantity": line.quantity,
        "unit_price_snapshot": line.unit_price_snapshot,
        "pricing_mode": line.pricing_mode,
        "line_discount": line.line_discount,
        "included_dishes": line.included_dishes,
    }


def _line_model(order, priced: dict) -> OrderLine:
    is_combo = priced["kind"] == OrderLine.Kind.COMBO
    discount = priced["line_discount"]
    return OrderLine(
        order=order,
        kind=priced["kind"],
        position=priced["position"],
        dish_id=None if is_combo else priced["source_id"],
        combo_id=priced["source_id"] if is_combo else None,
        name_snapshot=priced["name_snapshot"],
        unit=priced["unit"],
        quantity=priced["quantity"] or 0,
        unit_price_snapshot=priced["unit_price_snapshot"] or 0,
        pricing_mode=priced["pricing_mode"],
        discount_kind=discount.get("kind") or DiscountKind.NONE,
        discount_amount=discount.get("amount") or 0,
        included_dishes=priced["included_dishes"],
        line_subtotal=priced["line_subtotal"],
        line_final_amount=priced["line_final_amount"],
    )


def _apply_discount(order, discount):
    discount = discount or {}
    order.discount_kind = discount.get("kind") or DiscountKind.NONE
    order.discount_amount = discount.get("amount") or 0


# --------------------------------- queries ---------------------------------

def orders_for_cook(cook):
    return Order.objects.filter(cook=cook).prefetch_related("lines")


def get_order(cook, pk) -> Order:
    """Return the cook's order or raise NotFoundError."""
    order = orders_for_cook(cook).filter(pk=pk).first()
    if order is None:
        raise NotFoundError("Order not found.")
    return order


def filter_orders(queryset, params):
    """Apply the status/order_type/date-range filters of the query endpoint."""
    status_value = params.get("status")
    if status_value:
        if status_value not in Order.Status.values:
            raise ValidationError({"status": f"Must be one of: {', '.join(Order.Status.values)}."})
        queryset = queryset.filter(status=status_value)

    order_type = params.get("order_type")
    if order_type:
        if order_type not in Order.OrderType.values:
            raise ValidationError({"order_type": f"Must be one of: {', '.join(Order.OrderType.values)}."})
        queryset = queryset.filter(order_type=order_type)

    from_date = _parse_date_param(params, "from_date")
    if from_date:
        queryset = queryset.filter(created_at__date__gte=from_date)
    to_date = _parse_date_param(params, "to_date")
    if to_date:
        queryset = queryset.filter(created_at__date__lte=to_date)
    return queryset


def _parse_date_param(params, key):
    raw = params.get(key)
    if not raw:
        return None
    try:
        value = parse_date(raw[:10])
    except ValueError:
        value = None
    if value is None:
        raise ValidationError({key: "Must be a date (YYYY-MM-DD)."})
    return value


# --------------------------------- commands ---------------------------------

@transaction.atomic
def create_order(cook, data: dict) -> Order:
    """Snapshot, price, number and persist a new order in one transaction."""
    order_type = data.get("order_type") or Order.OrderType.WITH_MATERIAL
    dishes = build_line_snapshots(cook, OrderLine.Kind.DISH, data.get("dishes"), order_type)
    combos = build_line_snapshots(cook, OrderLine.Kind.COMBO, data.get("combos"), order_type)
    totals = compute_order_totals(
        dishes, combos, data.get("order_discount"), data.get("additional_charges")
    )

    order = Order(
        cook=cook,
        client_name=data["client_name"],
        client_phone=data.get("client_phone") or "",
        event_date=data.get("event_date"),
        notes=data.get("notes") or "",
        order_type=order_type,
        status=data.get("status") or Order.Status.DRAFT,
        additional_charges=data.get("additional_charges") or 0,
        subtotal=totals["subtotal"],
        total=totals["total"],
    )
    _apply_discount(order, data.get("order_discount"))
    assign_order_number(order)
    order.save()
    OrderLine.objects.bulk_create(
        [_line_model(order, p) for p in totals["priced_dish_lines"] + totals["priced_combo_lines"]]
    )

    log.info(f"[Order: {order.order_number}] Created for cook {cook.id} with total {totals['total']}.")
    return get_order(cook, order.pk)


@transaction.atomic
def update_order(cook, pk, data: dict) -> Order:
    """Apply a partial update; pricing fields trigger a full recomputation.

    Groups not present in ``data`` are taken from the stored order, merged
    with the supplied ones and re-priced from scratch. A status-only update
    never touches the totals.
    """
    order = Order.objects.select_for_update().filter(cook=cook, pk=pk).first()
    if order is None:
        raise NotFoundError("Order not found.")

    for field in SCALAR_FIELDS:
        if field in data:
            setattr(order, field, data[field])

    if any(field in data for field in PRICING_FIELDS):
        _reprice(cook, order, data)
        log.info(f"[Order: {order.order_number}] Re-priced, total now {order.total}.")

    order.save()
    return get_order(cook, order.pk)


def _reprice(cook, order, data):
    stored = list(order.lines.all())

    def group(kind, key):
        if key in data:
            return build_line_snapshots(cook, kind, data[key], order.order_type), True
        return [stored_line_snapshot(l) for l in stored if l.kind == kind], False

    dishes, dishes_replaced = group(OrderLine.Kind.DISH, "dishes")
    combos, combos_replaced = group(OrderLine.Kind.COMBO, "combos")
    discount = data["order_discount"] if "order_discount" in data else order.order_discount
    charges = data["additional_charges"] if "additional_charges" in data else order.additional_charges

    totals = compute_order_totals(dishes, combos, discount, charges)

    replaced_kinds = []
    if dishes_replaced:
        replaced_kinds.append(OrderLine.Kind.DISH)
    if combos_replaced:
        replaced_kinds.append(OrderLine.Kind.COMBO)
    if replaced_kinds:
        order.lines.filter(kind__in=replaced_kinds).delete()
    new_lines = [
        p for p in totals["priced_dish_lines"] + totals["priced_combo_lines"]
        if p["kind"] in replaced_kinds
    ]
    OrderLine.objects.bulk_create([_line_model(order, p) for p in new_lines])

    kept = {(l.kind, l.position): l for l in stored if l.kind not in replaced_kinds}
    for p in totals["priced_dish_lines"] + totals["priced_combo_lines"]:
        line = kept.get((p["kind"], p["position"]))
        if line is not None:
            line.line_subtotal = p["line_subtotal"]
            line.line_final_amount = p["line_final_amount"]
    if kept:
        OrderLine.objects.bulk_update(kept.values(), ["line_subtotal", "line_final_amount"])

    _apply_discount(order, discount)
    order.additional_charges = charges or 0
    order.subtotal = totals["subtotal"]
    order.total = totals["total"]


def update_order_status(cook, pk, status_value) -> Order:
    """Set the status only. Transitions are unrestricted; totals stay as they are."""
    order = get_order(cook, pk)
    previous = order.status
    order.status = status_value
    order.save(update_fields=["status", "updated_at"])
    log.info(f"[Order: {order.order_number}] Status {previous} -> {status_value}.")
    return order


def delete_order(cook, pk):
    order = get_order(cook, pk)
    number = order.order_number
    order.delete()
    log.info(f"[Order: {number}] Deleted by cook {cook.id}.")


def quotation_for_order(cook, pk):
    """Render the quotation PDF for one of the cook's orders.

    Returns ``(filename, pdf_bytes)``.
    """
    order = get_order(cook, pk)
    profile = getattr(order.cook, "profile", None)
    if profile is None:
        raise NotFoundError("Cook details not found.")
    pdf = render_quotation(order, profile)
    return f"Quotation-{order.order_number or 'DRAFT'}.pdf", pdf
