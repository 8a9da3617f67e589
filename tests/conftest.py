import io
from pathlib import Path

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docarchive.config.settings import Settings


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


def _encode(image: Image.Image, fmt: str) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    """A small white RGB PNG."""
    return _encode(Image.new("RGB", (120, 80), (255, 255, 255)), "PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _encode(Image.new("RGB", (64, 48), (200, 200, 200)), "JPEG")


@pytest.fixture()
def transparent_png_bytes() -> bytes:
    """A fully transparent RGBA PNG."""
    return _encode(Image.new("RGBA", (40, 30), (0, 0, 0, 0)), "PNG")


@pytest.fixture()
def gif_bytes() -> bytes:
    return _encode(Image.new("P", (32, 32), 0), "GIF")


@pytest.fixture()
def metadata_fields() -> dict[str, str]:
    return {
        "incomingOutgoing": "Incoming",
        "letterDate": "2024-03-15",
        "letterNumber": "L-42",
        "from": "Ministry of Works",
        "to": "City Council",
        "subject": "Road repairs",
        "summary": "Schedule for spring road repairs.",
        "reference": "REF-7",
    }


@pytest.fixture()
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "uploads",
        suggestion_provider="example",
        document_store="memory",
    )
