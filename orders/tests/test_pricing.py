from decimal import Decimal

from django.test import SimpleTestCase

from orders.models import DiscountKind
from orders.pricing import compute_order_totals, price_line, resolve_discount, to_decimal


def line(qty, price, kind=DiscountKind.NONE, amount=0):
    return {
        "quantity": qty,
        "unit_price_snapshot": price,
        "line_discount": {"kind": kind, "amount": amount},
    }


class ResolveDiscountTests(SimpleTestCase):
    def test_none_ignores_amount(self):
        self.assertEqual(resolve_discount(Decimal("500"), {"kind": DiscountKind.NONE, "amount": 99}), 0)

    def test_missing_descriptor_is_zero(self):
        self.assertEqual(resolve_discount(Decimal("500"), None), 0)

    def test_fixed_amount_is_independent_of_base(self):
        discount = {"kind": DiscountKind.FIXED_AMOUNT, "amount": "50"}
        self.assertEqual(resolve_discount(Decimal("10"), discount), Decimal("50"))
        self.assertEqual(resolve_discount(Decimal("1000"), discount), Decimal("50"))

    def test_percent_of_base(self):
        discount = {"kind": DiscountKind.PERCENT, "amount": "50"}
        self.assertEqual(resolve_discount(Decimal("300"), discount), Decimal("150"))

    def test_percent_is_exact_without_rounding(self):
        discount = {"kind": DiscountKind.PERCENT, "amount": "12.5"}
        self.assertEqual(resolve_discount(Decimal("99.99"), discount), Decimal("12.49875"))

    def test_percent_above_hundred_not_clamped(self):
        discount = {"kind": DiscountKind.PERCENT, "amount": "150"}
        self.assertEqual(resolve_discount(Decimal("100"), discount), Decimal("150"))


class PriceLineTests(SimpleTestCase):
    def test_dish_line_without_discount(self):
        priced = price_line(line(2, 100))
        self.assertEqual(priced["line_subtotal"], Decimal("200"))
        self.assertEqual(priced["line_final_amount"], Decimal("200"))

    def test_combo_line_with_percent_discount(self):
        priced = price_line(line(1, 500, DiscountKind.PERCENT, 10))
        self.assertEqual(priced["line_subtotal"], Decimal("500"))
        self.assertEqual(priced["line_final_amount"], Decimal("450"))

    def test_missing_quantity_or_price_counts_as_zero(self):
        priced = price_line({"quantity": None, "unit_price_snapshot": "80"})
        self.assertEqual(priced["line_subtotal"], 0)
        self.assertEqual(priced["line_final_amount"], 0)

    def test_fixed_discount_above_subtotal_goes_negative(self):
        priced = price_line(line(1, 30, DiscountKind.FIXED_AMOUNT, 50))
        self.assertEqual(priced["line_final_amount"], Decimal("-20"))

    def test_input_is_not_mutated(self):
        original = line(2, 100)
        price_line(original)
        self.assertNotIn("line_subtotal", original)

    def test_fractional_quantity(self):
        priced = price_line(line("1.5", "450.00"))
        self.assertEqual(priced["line_subtotal"], Decimal("675"))


class ComputeOrderTotalsTests(SimpleTestCase):
    def test_fixed_order_discount_and_charges(self):
        totals = compute_order_totals(
            [line(2, 100)],
            [line(1, 500, DiscountKind.PERCENT, 10)],
            {"kind": DiscountKind.FIXED_AMOUNT, "amount": 50},
            30,
        )
        self.assertEqual(totals["subtotal"], Decimal("650"))
        self.assertEqual(totals["order_discount_amount"], Decimal("50"))
        self.assertEqual(totals["total"], Decimal("630"))
        self.assertEqual(totals["priced_dish_lines"][0]["line_final_amount"], Decimal("200"))
        self.assertEqual(totals["priced_combo_lines"][0]["line_final_amount"], Decimal("450"))

    def test_no_discount_no_charges_total_equals_subtotal(self):
        totals = compute_order_totals([line(3, "12.50")], [], {"kind": DiscountKind.NONE, "amount": 40}, 0)
        self.assertEqual(totals["subtotal"], Decimal("37.50"))
        self.assertEqual(totals["total"], totals["subtotal"])

    def test_percent_order_discount_resolved_on_subtotal(self):
        totals = compute_order_totals([line(1, 300)], [], {"kind": DiscountKind.PERCENT, "amount": 50}, None)
        self.assertEqual(totals["order_discount_amount"], Decimal("150"))
        self.assertEqual(totals["total"], Decimal("150"))

    def test_empty_order_totals_zero(self):
        totals = compute_order_totals()
        self.assertEqual(totals["subtotal"], 0)
        self.assertEqual(totals["total"], 0)
        self.assertEqual(totals["priced_dish_lines"], [])

    def test_line_order_does_not_change_totals(self):
        dishes = [line(2, 100), line("0.5", 420, DiscountKind.FIXED_AMOUNT, 10), line(7, "3.30")]
        discount = {"kind": DiscountKind.PERCENT, "amount": "7.5"}
        forward = compute_order_totals(dishes, [], discount, 25)
        backward = compute_order_totals(list(reversed(dishes)), [], discount, 25)
        self.assertEqual(forward["subtotal"], backward["subtotal"])
        self.assertEqual(forward["total"], backward["total"])

    def test_recomputing_priced_lines_is_stable(self):
        first = compute_order_totals([line(2, 100)], [line(1, 500, DiscountKind.PERCENT, 10)], None, 30)
        second = compute_order_totals(first["priced_dish_lines"], first["priced_combo_lines"], None, 30)
        self.assertEqual(first["total"], second["total"])
        self.assertEqual(
            second["priced_combo_lines"][0]["line_final_amount"],
            first["priced_combo_lines"][0]["line_final_amount"],
        )

    def test_over_discounted_order_total_negative(self):
        totals = compute_order_totals([line(1, 40)], [], {"kind": DiscountKind.FIXED_AMOUNT, "amount": 100}, 0)
        self.assertEqual(totals["total"], Decimal("-60"))


class ToDecimalTests(SimpleTestCase):
    def test_float_uses_shortest_repr(self):
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))

    def test_blank_values_are_zero(self):
        self.assertEqual(to_decimal(None), 0)
        self.assertEqual(to_decimal(""), 0)

    def test_garbage_raises_value_error(self):
        with self.assertRaises(ValueError):
            to_decimal("abc")
