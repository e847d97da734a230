"""Quotation PDF renderer.

Draws a priced order onto A4 pages with reportlab: business header, order and
client block, the line table (combos first, then individual dishes), the
right-aligned summary and optional notes. A vertical cursor measured from the
top of the page drives the layout; whenever the next block would run into the
footer zone a new page is started and the cursor resets to the top margin.

The document is built entirely in memory. Callers get the bytes only after
``canvas.save()`` succeeded; any failure surfaces as RenderingError.
"""

import io
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.utils import dateformat, numberformat, timezone
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from common.api.exceptions import RenderingError
from .models import DiscountKind, OrderLine
from .pricing import resolve_discount, to_decimal

log = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 50
RIGHT = 545
TOP_MARGIN = 50
TABLE_BOTTOM = 760       # rows and summary must end above the footer zone
FOOTER_Y = 790

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TEXT_COLOR = HexColor("#444444")
ACCENT_COLOR = HexColor("#fc8019")
MUTED_COLOR = HexColor("#777777")
RULE_COLOR = HexColor("#eeeeee")
DISCOUNT_COLOR = HexColor("#e53e3e")
FOOTER_COLOR = HexColor("#aaaaaa")

# Combos are always listed before individual dishes.
LINE_GROUPS = (
    (OrderLine.Kind.COMBO, "COMBOS"),
    (OrderLine.Kind.DISH, "INDIVIDUAL DISHES"),
)

DESCRIPTION_WIDTH = 220
ROW_LEADING = 12
NOT_AVAILABLE = "N/A"


# ------------------------------- formatting -------------------------------

def format_currency(amount) -> str:
    """Whole currency units with locale grouping, e.g. 'Rs. 1,23,457'."""
    value = to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    number = numberformat.format(
        value,
        ".",
        decimal_pos=0,
        grouping=settings.QUOTATION_NUMBER_GROUPING,
        thousand_sep=settings.QUOTATION_THOUSAND_SEPARATOR,
        force_grouping=True,
    )
    return f"{settings.QUOTATION_CURRENCY_SYMBOL} {number}"


def format_date(value) -> str:
    """'7 Mar 2026' or 'N/A'."""
    if not value:
        return NOT_AVAILABLE
    if hasattr(value, "tzinfo") and timezone.is_aware(value):
        value = timezone.localtime(value)
    return dateformat.format(value, "j M Y")


def format_quantity(value) -> str:
    return format(to_decimal(value).normalize(), "f")


def status_label(status) -> str:
    return (status or "").replace("_", " ")


def includes_text(line) -> str:
    dishes = ", ".join(
        f"{d.get('quantity')}x {d.get('name')}" for d in line.included_dishes or []
    )
    return f"Includes: {dishes}"


def summary_rows(order):
    """Rows of the summary block above the grand total, as (label, value, color).

    Additional charges and the order discount only appear when they are
    positive. The discount value is always the resolved currency amount.
    """
    rows = [("Subtotal:", format_currency(order.subtotal), TEXT_COLOR)]

    if to_decimal(order.additional_charges) > 0:
        rows.append(("Addl. Charges:", format_currency(order.additional_charges), TEXT_COLOR))

    discount = order.order_discount
    if discount["kind"] != DiscountKind.NONE and to_decimal(discount["amount"]) > 0:
        if discount["kind"] == DiscountKind.PERCENT:
            label = f"Discount ({format_quantity(discount['amount'])}%):"
        else:
            label = "Discount:"
        amount = resolve_discount(order.subtotal, discount)
        rows.append((label, f"- {format_currency(amount)}", DISCOUNT_COLOR))

    return rows


# -------------------------------- renderer --------------------------------

class QuotationRenderer:
    """Single-pass layout of one order. Use ``render()`` once per instance."""

    def __init__(self, order, cook):
        self.order = order
        self.cook = cook
        self.buffer = io.BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setTitle(f"Quotation {order.order_number or 'DRAFT'}")
        self.y = TOP_MARGIN
        self.page_count = 1

    # --- primitives (y is measured from the top edge) ---
    def _text(self, x, y, text, size=10, font=FONT, color=TEXT_COLOR, align="left"):
        c = self.canvas
        c.setFont(font, size)
        c.setFillColor(color)
        baseline = PAGE_HEIGHT - y - size
        if align == "right":
            c.drawRightString(x, baseline, str(text))
        elif align == "center":
            c.drawCentredString(x, baseline, str(text))
        else:
            c.drawString(x, baseline, str(text))

    def _wrapped(self, x, y, text, width, size=10, font=FONT, color=TEXT_COLOR):
        lines = simpleSplit(str(text), font, size, width) or [""]
        leading = size + 2
        for i, line in enumerate(lines):
            self._text(x, y + i * leading, line, size=size, font=font, color=color)
        return len(lines) * leading

    def _rule(self, y, x1=LEFT, x2=RIGHT, color=RULE_COLOR, width=1):
        c = self.canvas
        c.setStrokeColor(color)
        c.setLineWidth(width)
        c.line(x1, PAGE_HEIGHT - y, x2, PAGE_HEIGHT - y)

    def _ensure_space(self, height):
        if self.y + height > TABLE_BOTTOM:
            self._footer()
            self.canvas.showPage()
            self.page_count += 1
            self.y = TOP_MARGIN

    # --- sections ---
    def _header(self):
        cook = self.cook
        self._text(LEFT, 57, cook.business_name or cook.name, size=20, font=FONT_BOLD)
        self._text(LEFT, 82, cook.name)
        self._text(LEFT, 97, cook.address or "Address Not Available")
        self._text(LEFT, 112, f"{cook.email} | {cook.phone}")
        self._rule(135, color=ACCENT_COLOR, width=2)

    def _order_info(self):
        order = self.order
        self._text(LEFT, 160, "QUOTATION", size=18, font=FONT_BOLD)
        self._rule(185)

        top = 200
        self._text(LEFT, top, "Order No:")
        self._text(120, top, order.order_number or "DRAFT", font=FONT_BOLD)
        self._text(LEFT, top + 15, "Order Date:")
        self._text(120, top + 15, format_date(order.created_at))
        self._text(LEFT, top + 30, "Event Date:")
        self._text(120, top + 30, format_date(order.event_date))

        self._text(350, top, "CLIENT DETAILS:", font=FONT_BOLD)
        self._text(350, top + 15, order.client_name)
        self._text(350, top + 30, order.client_phone or "No Phone Provided")
        self._text(350, top + 45, f"Status: {status_label(order.status)}")
        self._rule(265)
        self.y = 300

    def _table_row(self, description, unit, qty, price, total, font=FONT):
        height = max(
            self._wrapped(LEFT, self.y, description, DESCRIPTION_WIDTH, font=font),
            ROW_LEADING,
        )
        self._text(330, self.y, unit, font=font, align="right")
        self._text(370, self.y, qty, font=font, align="center")
        self._text(470, self.y, price, font=font, align="right")
        self._text(RIGHT, self.y, total, font=font, align="right")
        return height

    def _row_height(self, line):
        label = self._line_label(line)
        height = len(simpleSplit(label, FONT, 10, DESCRIPTION_WIDTH) or [""]) * ROW_LEADING
        if line.kind == OrderLine.Kind.COMBO and line.included_dishes:
            height += 3 + len(simpleSplit(includes_text(line), FONT, 8, DESCRIPTION_WIDTH)) * 10
        return height + 13

    def _line_label(self, line):
        if line.kind == OrderLine.Kind.COMBO:
            return f"Combo: {line.name_snapshot}"
        return line.name_snapshot

    def _line_table(self):
        self._table_row("Item Description", "Unit", "Qty", "Price", "Total", font=FONT_BOLD)
        self._rule(self.y + 15)
        self.y += 25

        for kind, title in LINE_GROUPS:
            lines = [line for line in self.order.lines.all() if line.kind == kind]
            if not lines:
                continue
            self._ensure_space(30 + self._row_height(lines[0]))
            self._text(LEFT, self.y + 10, title, font=FONT_BOLD, color=ACCENT_COLOR)
            self.y += 30
            for line in lines:
                self._line_row(line)

    def _line_row(self, line):
        self._ensure_space(self._row_height(line))
        self.y += self._table_row(
            self._line_label(line),
            line.unit,
            format_quantity(line.quantity),
            format_currency(line.unit_price_snapshot),
            format_currency(line.line_final_amount),
        )
        if line.kind == OrderLine.Kind.COMBO and line.included_dishes:
            self.y += 3
            self.y += self._wrapped(
                LEFT, self.y, includes_text(line), DESCRIPTION_WIDTH, size=8, color=MUTED_COLOR
            )
        self._rule(self.y + 5)
        self.y += 13

    def _summary_row(self, label, value, color=TEXT_COLOR, font=FONT):
        self._ensure_space(20)
        self._text(450, self.y, label, font=font, color=color, align="right")
        self._text(RIGHT, self.y, value, font=font, color=color, align="right")
        self.y += 20

    def _summary(self):
        self.y += 20
        for label, value, color in summary_rows(self.order):
            self._summary_row(label, value, color)

        self._ensure_space(35)
        self.y += 5
        self._rule(self.y, x1=350, color=HexColor("#aaaaaa"))
        self.y += 10
        self._summary_row("GRAND TOTAL:", format_currency(self.order.total), ACCENT_COLOR, FONT_BOLD)

    def _notes(self):
        notes = self.order.notes
        if not notes:
            return
        self.y += 30
        self._ensure_space(30)
        self._text(LEFT, self.y, "Notes:", font=FONT_BOLD)
        self.y += 15
        for paragraph in notes.splitlines():
            for line in simpleSplit(paragraph, FONT, 9, RIGHT - LEFT) or [""]:
                self._ensure_space(11)
                self._text(LEFT, self.y, line, size=9)
                self.y += 11

    def _footer(self):
        self._text(
            PAGE_WIDTH / 2, FOOTER_Y, settings.QUOTATION_FOOTER_TEXT,
            color=FOOTER_COLOR, align="center",
        )

    def render(self) -> bytes:
        self._header()
        self._order_info()
        self._line_table()
        self._summary()
        self._notes()
        self._footer()
        self.canvas.save()
        return self.buffer.getvalue()


def render_quotation(order, cook) -> bytes:
    """Render ``order`` for ``cook`` (a profile) and return the PDF bytes."""
    try:
        return QuotationRenderer(order, cook).render()
    except Exception as exc:
        log.exception(f"[Order: {order.order_number}] Quotation rendering failed: {exc}")
        raise RenderingError() from exc
