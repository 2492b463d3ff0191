from pathlib import Path
from typing import Optional
import io
import logging
import re
from xml.sax.saxutils import escape

from portal.core.config import settings
from portal.schemas.payslip import Payslip

logger = logging.getLogger(__name__)

CURRENCY = "GHS"

def _safe_part(value: str) -> str:
    return re.sub(r"[\s/\\]+", "_", value)

def default_filename(payslip: Payslip) -> str:
    return f"{_safe_part(payslip.employee_name)}_payslip_{_safe_part(payslip.period)}.pdf"

def payslip_title() -> str:
    return f"{settings.COMPANY_NAME} — Payslip"

def _load_engine():
    if not settings.PDF_ENABLED:
        return None
    try:
        import reportlab.platypus as platypus
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import getSampleStyleSheet
    except ImportError:
        return None
    return platypus, colors, A4, getSampleStyleSheet

def render_payslip_pdf(payslip: Payslip, engine) -> bytes:
    platypus, colors, A4, getSampleStyleSheet = engine
    buffer = io.BytesIO()
    doc = platypus.SimpleDocTemplate(buffer, pagesize=A4, title=f"Payslip {payslip.period}")
    styles = getSampleStyleSheet()
    elements = []

    # 1. Header
    elements.append(platypus.Paragraph(escape(payslip_title()), styles['Title']))
    elements.append(platypus.Spacer(1, 12))
    elements.append(platypus.Paragraph(f"<b>Employee:</b> {escape(payslip.employee_name)}", styles['Normal']))
    elements.append(platypus.Paragraph(f"<b>Period:</b> {escape(payslip.period)}", styles['Normal']))
    elements.append(platypus.Spacer(1, 24))

    # 2. Amounts
    amounts = [
        ["Item", "Amount"],
        ["Gross", f"{CURRENCY} {payslip.gross:.2f}"],
        ["Tax", f"{CURRENCY} {payslip.tax:.2f}"],
        ["Deductions", f"{CURRENCY} {payslip.deductions:.2f}"],
        ["Net Pay", f"{CURRENCY} {payslip.net:.2f}"],
    ]
    table = platypus.Table(amounts, colWidths=[200, 150])
    table.setStyle(platypus.TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.navy),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey)
    ]))
    elements.append(table)

    # 3. Notes
    if payslip.notes:
        elements.append(platypus.Spacer(1, 24))
        elements.append(platypus.Paragraph("Notes", styles['Heading2']))
        elements.append(platypus.Paragraph(escape(str(payslip.notes)), styles['Normal']))

    doc.build(elements)
    return buffer.getvalue()

def generate_payslip_pdf(payslip: Payslip, filename: Optional[str] = None, output_dir: Optional[str] = None) -> Optional[Path]:
    """
    Write a payslip PDF and return its path.

    Returns None when the PDF engine is unavailable or the build fails;
    callers branch on the return value.
    """
    engine = _load_engine()
    if engine is None:
        logger.warning("PDF engine not available; payslip not generated")
        return None

    target_dir = Path(output_dir or settings.PAYSLIP_DIR)
    # Only the final path component is used; the file always lands in target_dir.
    name = Path(filename or default_filename(payslip)).name
    if name in ("", ".", ".."):
        logger.error(f"Rejected payslip filename: {filename!r}")
        return None
    target = target_dir / name
    try:
        pdf_bytes = render_payslip_pdf(payslip, engine)
        target_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(pdf_bytes)
    except Exception as e:
        logger.error(f"Payslip PDF build failed: {e}")
        return None

    logger.info(f"Payslip written: {target}")
    return target
