import io

import pdfplumber
from pdfplumber.page import Page

from docarchive.pdf.base import BasePdfRasterizer
from docarchive.pdf.exceptions import PdfRasterizationError


class PdfPlumberRasterizer(BasePdfRasterizer):
    """Renders PDF pages to PNG using pdfplumber's page images."""

    def rasterize(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                self._check_page_count(len(pdf.pages), max_pages)
                return [self._render_page(page, dpi) for page in pdf.pages]
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pdfplumber rasterization failed: {exc}") from exc

    @staticmethod
    def _render_page(page: Page, dpi: int) -> bytes:
        image = page.to_image(resolution=dpi).original.convert("RGB")
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()
