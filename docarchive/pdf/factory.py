from docarchive.config.settings import Settings
from docarchive.pdf.base import BasePdfRasterizer
from docarchive.pdf.pdfplumber_adapter import PdfPlumberRasterizer
from docarchive.pdf.pymupdf_adapter import PyMuPdfRasterizer


class PdfRasterizerFactory:
    """Creates the correct PDF rasterizer based on settings."""

    ADAPTERS: dict[str, type[BasePdfRasterizer]] = {
        "pdfplumber": PdfPlumberRasterizer,
        "pymupdf": PyMuPdfRasterizer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRasterizer:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
