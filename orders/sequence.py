"""Per-cook order numbering.

Each cook owns one OrderSequenceCounter row. Issuing a number increments that
row with a single ``UPDATE ... SET seq = seq + 1`` inside a transaction, so
concurrent order creations for the same cook serialize on the row lock while
different cooks never contend.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F

from .models import OrderSequenceCounter

log = logging.getLogger(__name__)


def format_order_number(seq: int) -> str:
    """7 -> 'ORD-00007' (prefix and width come from settings)."""
    return f"{settings.ORDER_NUMBER_PREFIX}-{str(seq).zfill(settings.ORDER_NUMBER_WIDTH)}"


@transaction.atomic
def next_order_number(cook_id: int) -> str:
    """Atomically increment the cook's counter and return the formatted number.

    The counter row is created on first use. When called inside an outer
    transaction (order creation) the increment is rolled back together with
    the order if anything later fails.
    """
    counter, created = (
        OrderSequenceCounter.objects.select_for_update().get_or_create(cook_id=cook_id)
    )
    if created:
        log.info(f"Created order counter for cook {cook_id}.")
    OrderSequenceCounter.objects.filter(pk=counter.pk).update(seq=F("seq") + 1)
    counter.refresh_from_db(fields=["seq"])
    return format_order_number(counter.seq)


def assign_order_number(order) -> bool:
    """Give ``order`` a number unless it already has one.

    Returns True when a number was issued. Retrying the same creation with an
    already numbered order never consumes a second sequence value.
    """
    if order.order_number:
        return False
    order.order_number = next_order_number(order.cook_id)
    return True
