import pymupdf

from docarchive.pdf.base import BasePdfRasterizer
from docarchive.pdf.exceptions import PdfRasterizationError


class PyMuPdfRasterizer(BasePdfRasterizer):
    """Renders PDF pages to PNG using PyMuPDF."""

    def rasterize(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                self._check_page_count(doc.page_count, max_pages)
                return [
                    page.get_pixmap(dpi=dpi, colorspace=pymupdf.csRGB, alpha=False).tobytes("png")
                    for page in doc
                ]
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pymupdf rasterization failed: {exc}") from exc
