from abc import ABC, abstractmethod

from docarchive.pdf.exceptions import PdfRasterizationError


class BasePdfRasterizer(ABC):
    """Contract for all PDF page rasterization adapters."""

    @abstractmethod
    def rasterize(self, pdf_bytes: bytes, *, dpi: int, max_pages: int) -> list[bytes]:
        """Render every page of a PDF to a lossless RGB PNG.

        Args:
            pdf_bytes: Raw PDF file content.
            dpi: Rendering resolution.
            max_pages: Refuse documents with more pages than this.

        Returns:
            One PNG per page, in page order. Empty for a zero-page PDF.

        Raises:
            PdfRasterizationError: if the PDF cannot be opened or rendered,
                or exceeds max_pages.
        """

    @staticmethod
    def _check_page_count(page_count: int, max_pages: int) -> None:
        if page_count > max_pages:
            raise PdfRasterizationError(
                f"PDF has {page_count} pages, limit is {max_pages}"
            )
