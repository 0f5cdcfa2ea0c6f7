from fpdf import FPDF

from onboarding_hub.services.text_service import extract_text_from_file


def _ascii_pdf(text):
    pdf = FPDF()
    pdf.set_compression(False)
    pdf.add_page()
    pdf.set_font("Helvetica", "", 12)
    pdf.cell(0, 10, text)
    return bytes(pdf.output())


class TestExtractText:
    def test_uncompressed_pdf_goes_through_pdf_reader(self, tmp_path):
        path = tmp_path / "sow.pdf"
        path.write_bytes(_ascii_pdf("Statement of Work"))

        text = extract_text_from_file(path, "application/pdf")
        assert "Statement of Work" in text
        assert "%PDF" not in text
        assert "endobj" not in text

    def test_pdf_detected_by_extension(self, tmp_path):
        path = tmp_path / "sow.pdf"
        path.write_bytes(_ascii_pdf("Statement of Work"))

        text = extract_text_from_file(path, "application/octet-stream")
        assert "%PDF" not in text

    def test_broken_pdf_yields_nothing(self, tmp_path):
        path = tmp_path / "sow.pdf"
        path.write_bytes(b"this is not really a pdf")
        assert extract_text_from_file(path, "application/pdf") == ""

    def test_plain_text(self, tmp_path):
        path = tmp_path / "sow.txt"
        path.write_text("Phase 1: discovery\nPhase 2: build\n", encoding="utf-8")
        assert "Phase 2" in extract_text_from_file(path, "text/plain")

    def test_binary_rejected(self, tmp_path):
        path = tmp_path / "sow.bin"
        path.write_bytes(bytes(range(32)) * 20)
        assert extract_text_from_file(path, None) == ""

    def test_missing_file(self, tmp_path):
        assert extract_text_from_file(tmp_path / "gone.txt", "text/plain") == ""
