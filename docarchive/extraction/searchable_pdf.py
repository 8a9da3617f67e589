import io

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from docarchive.preprocessing.images import NormalizedImage

_INVISIBLE = 3
_FONT = "Helvetica"
_FONT_SIZE = 8


def build_searchable_pdf(image: NormalizedImage, text: str) -> bytes:
    """Wrap an image in a one-page PDF with the text as an invisible layer.

    The page is sized to the image at its own resolution and the image
    covers it completely.
    """
    width, height = image.width_points, image.height_points
    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=(width, height), pageCompression=1)
    pdf.drawImage(ImageReader(io.BytesIO(image.png_bytes)), 0, 0, width=width, height=height)

    if text:
        layer = pdf.beginText()
        layer.setTextRenderMode(_INVISIBLE)
        layer.setFont(_FONT, _FONT_SIZE)
        layer.setTextOrigin(4, max(height - _FONT_SIZE - 4, 0))
        for line in text.splitlines():
            layer.textLine(_latin1(line))
        pdf.drawText(layer)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()


def _latin1(line: str) -> str:
    # standard Type 1 fonts only cover Latin-1
    return line.encode("latin-1", "replace").decode("latin-1")
