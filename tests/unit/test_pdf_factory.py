import pytest

from docarchive.config.settings import Settings
from docarchive.pdf.factory import PdfRasterizerFactory
from docarchive.pdf.pdfplumber_adapter import PdfPlumberRasterizer
from docarchive.pdf.pymupdf_adapter import PyMuPdfRasterizer


class TestPdfRasterizerFactory:
    def test_returns_pymupdf_by_default(self) -> None:
        assert isinstance(PdfRasterizerFactory.create(Settings(_env_file=None)), PyMuPdfRasterizer)

    def test_returns_pdfplumber(self) -> None:
        settings = Settings(_env_file=None, pdf_engine="pdfplumber")
        assert isinstance(PdfRasterizerFactory.create(settings), PdfPlumberRasterizer)

    def test_engine_name_is_case_insensitive(self) -> None:
        settings = Settings(_env_file=None, pdf_engine="PyMuPDF")
        assert isinstance(PdfRasterizerFactory.create(settings), PyMuPdfRasterizer)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfRasterizerFactory.create(Settings(_env_file=None, pdf_engine="unknown"))
