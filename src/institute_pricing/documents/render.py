"""
Document Renderer - Printable PDF for a priced document.

Layout: header, contact block, items table and the
total / discount / final amount block.
"""
import io
import json
from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..config.settings import Settings, get_settings
from ..engine.models import PricingDocument

TITLES = {
    'quotation': "Quotation",
    'proposal': "Training Proposal",
    'invoice': "Invoice",
}

BRAND_BLUE = colors.HexColor("#1F4E79")


def _text(value) -> str:
    return escape(str(value)) if value not in (None, "") else "-"


def _sections(content) -> list[dict]:
    """Proposal content is stored as a JSON list of {title, text}."""
    if not content:
        return []
    if isinstance(content, list):
        parsed = content
    else:
        try:
            parsed = json.loads(content)
        except (TypeError, ValueError):
            return [{"title": "", "text": str(content)}]
        if not isinstance(parsed, list):
            return []
    # Bare strings are untitled paragraphs
    return [entry if isinstance(entry, dict) else {"title": "", "text": str(entry)} for entry in parsed]


def render_document_pdf(
    document: PricingDocument,
    details: Optional[dict] = None,
    settings: Optional[Settings] = None,
) -> bytes:
    """Render ``document`` with its header ``details`` to PDF bytes."""
    settings = settings or get_settings()
    details = details or {}
    currency = settings.currency

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4, leftMargin=18*mm, rightMargin=18*mm, topMargin=16*mm, bottomMargin=16*mm,
        title=TITLES[document.kind],
    )
    styles = getSampleStyleSheet()
    right = ParagraphStyle("Right", parent=styles["Normal"], alignment=TA_RIGHT)
    story = []

    # Proposal cover page
    if document.kind == 'proposal':
        story.append(Spacer(1, 60*mm))
        story.append(Paragraph(_text(details.get('coverPage') or details.get('cover_page') or TITLES['proposal']), styles["Title"]))
        story.append(Paragraph(f"Prepared for {_text(details.get('companyName') or details.get('company_name'))}", styles["h2"]))
        story.append(PageBreak())
        for section in _sections(details.get('content')):
            if section.get('title'):
                story.append(Paragraph(_text(section['title']), styles["h2"]))
            story.append(Paragraph(_text(section.get('text', '')), styles["Normal"]))
            story.append(Spacer(1, 6))

    story.append(Paragraph(f"<b>{TITLES[document.kind]}</b>", styles["Title"]))

    number = details.get('number') or details.get('quotationNumber') or details.get('invoiceNumber') or details.get('proposalNumber')
    meta = [
        [Paragraph(f"<b>Company:</b> {_text(details.get('companyName') or details.get('company_name'))}", styles["Normal"]),
         Paragraph(f"<b>No.:</b> {_text(number)}", right)],
        [Paragraph(f"<b>Contact:</b> {_text(details.get('contactPerson') or details.get('contact_person'))}", styles["Normal"]),
         Paragraph(f"<b>Date:</b> {datetime.now().strftime('%d-%b-%Y')}", right)],
        [Paragraph(f"<b>Email:</b> {_text(details.get('email'))}", styles["Normal"]),
         Paragraph(f"<b>Status:</b> {_text(document.status)}", right)],
    ]
    meta_table = Table(meta, colWidths=[110*mm, 64*mm])
    meta_table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    story.append(meta_table)
    story.append(Spacer(1, 8))

    rows = [["#", "Course", "Duration", "Persons", f"Rate ({currency})", f"Total ({currency})"]]
    for n, item in enumerate(document.items, start=1):
        rows.append([
            str(n),
            Paragraph(_text(item.description), styles["Normal"]),
            item.duration or "-",
            str(item.quantity),
            f"{item.unit_rate:,.2f}",
            f"{item.line_total:,.2f}",
        ])

    if document.discount_mode == 'percent':
        discount_label = f"Discount ({document.discount:g}%)"
    else:
        discount_label = "Discount"
    rows.append(["", "", "", "", "Total", f"{document.subtotal:,.2f}"])
    rows.append(["", "", "", "", discount_label, f"-{document.applied_discount:,.2f}"])
    rows.append(["", "", "", "", "Final Amount", f"{document.final_amount:,.2f}"])

    items_table = Table(rows, colWidths=[10*mm, 62*mm, 24*mm, 18*mm, 30*mm, 30*mm], repeatRows=1)
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -4), 0.5, colors.HexColor("#D1D5DB")),
        ("ALIGN", (3, 1), (-1, -1), "RIGHT"),
        ("FONTNAME", (4, -3), (-1, -1), "Helvetica-Bold"),
        ("LINEABOVE", (4, -1), (-1, -1), 1, BRAND_BLUE),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    story.append(items_table)

    validity = details.get('validity')
    if validity:
        story.append(Spacer(1, 8))
        story.append(Paragraph(f"This quotation is valid until {_text(validity)}.", styles["Italic"]))

    doc.build(story)
    return buf.getvalue()
