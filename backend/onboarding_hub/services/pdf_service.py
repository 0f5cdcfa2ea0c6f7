import io
from datetime import datetime

from fpdf import FPDF
from pypdf import PdfReader, PdfWriter


def _latin1(text: str) -> str:
    """Encode to latin-1, replacing unsupported chars. fpdf built-in fonts are latin-1 only."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def generate_signature_page(
    document_name: str,
    signer_name: str,
    entity_name: str,
    signer_title: str,
    signed_at: datetime,
) -> bytes:
    """Render a one-page signature certificate for an e-signed document."""
    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(0, 10, _latin1("Signature Certificate"), align="L")
    pdf.ln(2)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(80, 80, 80)
    pdf.cell(0, 7, _latin1(f"Document: {document_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 7, _latin1(f"Entity: {entity_name}"), new_x="LMARGIN", new_y="NEXT")

    pdf.ln(3)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(8)

    # Typed signature, rendered larger in the signer's block
    pdf.set_text_color(0, 0, 153)
    pdf.set_font("Helvetica", "BI", 22)
    pdf.cell(0, 12, _latin1(signer_name), new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", "", 11)
    pdf.cell(0, 7, _latin1(f"Name: {signer_name}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 7, _latin1(f"Title: {signer_title}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 7, _latin1(f"Date: {signed_at.strftime('%B %d, %Y')}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 7, _latin1(f"Time: {signed_at.strftime('%I:%M %p UTC')}"), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())


def append_pages(original_pdf: bytes, extra_pdf: bytes) -> bytes:
    """Return original_pdf with every page of extra_pdf appended."""
    writer = PdfWriter()
    for page in PdfReader(io.BytesIO(original_pdf)).pages:
        writer.add_page(page)
    for page in PdfReader(io.BytesIO(extra_pdf)).pages:
        writer.add_page(page)

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()
