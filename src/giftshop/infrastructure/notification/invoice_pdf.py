"""PDF invoice rendering with fpdf2.

``render_invoice`` is a pure function of the order: the same order always
yields the same layout, and nothing is written to disk.  It is shared by
the confirmation mailer and the "download invoice" command.
"""

from __future__ import annotations

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from giftshop.domain.model.order import Order

_PRIMARY = (31, 41, 55)
_SECONDARY = (75, 85, 99)
_HEADER_BG = (243, 244, 246)
_LINE = (229, 231, 235)

_MARGIN = 25
_COLUMNS = (("Item Description", 0.5, "L"), ("Qty", 0.15, "R"), ("Unit Price", 0.2, "R"), ("Total", 0.15, "R"))


def invoice_filename(order: Order) -> str:
    return f"Invoice_{order.order_number}.pdf"


def _latin1(text: str) -> str:
    # core fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def render_invoice(order: Order) -> tuple[str, bytes]:
    """Return ``(filename, pdf_bytes)`` for *order*."""
    pdf = FPDF(format="A4")
    pdf.set_margins(_MARGIN, _MARGIN, _MARGIN)
    pdf.set_auto_page_break(auto=True, margin=_MARGIN)
    pdf.set_creation_date(order.placed_at)
    pdf.add_page()
    content_width = pdf.w - 2 * _MARGIN

    # --- Header ---
    pdf.set_text_color(*_PRIMARY)
    pdf.set_font("helvetica", "B", 24)
    pdf.cell(content_width, 12, "INVOICE", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_draw_color(*_LINE)
    pdf.line(_MARGIN, pdf.get_y() + 3, pdf.w - _MARGIN, pdf.get_y() + 3)
    pdf.ln(10)

    # --- Customer and invoice details ---
    address = order.shipping_address
    details = [
        ("Invoice To:", address.full_name),
        ("", address.address),
        ("", f"{address.city}, {address.zip_code}"),
        ("", order.customer_email),
        ("Invoice Number:", f"INV-{order.order_number}"),
        ("Order Number:", order.order_number),
        ("Date:", order.placed_at.strftime("%B %d, %Y")),
        ("Payment:", str(order.payment_method)),
    ]
    pdf.set_font("helvetica", size=10)
    for label, value in details:
        pdf.set_font("helvetica", "B", 10)
        pdf.cell(40, 6, label)
        pdf.set_font("helvetica", "", 10)
        pdf.cell(content_width - 40, 6, _latin1(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(8)

    # --- Items table ---
    pdf.set_font("helvetica", "B", 14)
    pdf.cell(content_width, 8, "Order Summary", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_fill_color(*_HEADER_BG)
    pdf.set_font("helvetica", "B", 10)
    for title, share, align in _COLUMNS:
        pdf.cell(content_width * share, 10, title, align=align, fill=True)
    pdf.ln(10)

    pdf.set_font("helvetica", "", 9)
    pdf.set_text_color(*_SECONDARY)
    for item in order.items:
        row = (_latin1(item.name), str(item.quantity), str(item.unit_price), str(item.line_total))
        for text, (_, share, align) in zip(row, _COLUMNS):
            pdf.cell(content_width * share, 10, text, align=align, border="B")
        pdf.ln(10)

    # --- Total ---
    pdf.ln(4)
    pdf.set_text_color(*_PRIMARY)
    pdf.set_font("helvetica", "B", 12)
    pdf.cell(content_width, 8, f"Total: {order.total}", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    # --- Gift card keys ---
    pdf.ln(6)
    pdf.set_font("helvetica", "B", 10)
    pdf.cell(content_width, 7, "Gift Card Keys:", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("courier", "", 10)
    for item in order.items:
        pdf.cell(
            content_width, 6, _latin1(f"{item.name}: {item.gift_card_key}"),
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )

    # --- Footer note ---
    pdf.ln(10)
    pdf.set_font("helvetica", "I", 8)
    pdf.set_text_color(*_SECONDARY)
    pdf.multi_cell(
        content_width, 5,
        "Thank you for your purchase. Keep your gift card keys private; "
        "anyone holding a key can redeem it.",
    )

    return invoice_filename(order), bytes(pdf.output())
