from docarchive.extraction.models import ExtractionResult
from docarchive.extraction.searchable_pdf import build_searchable_pdf
from docarchive.logging.logger import Log
from docarchive.pdf.base import BasePdfRasterizer
from docarchive.pdf.exceptions import PdfRasterizationError
from docarchive.pipeline.deadline import Deadline
from docarchive.pipeline.exceptions import ExtractionFailedError
from docarchive.pipeline.validator import IMAGE_MIME_TYPES, PDF_MIME_TYPE, normalize_mime_type
from docarchive.preprocessing.images import ImagePreprocessingError, normalize_image
from docarchive.recognition.engine import RecognitionEngine
from docarchive.recognition.exceptions import EngineUnavailableError, RecognitionError

PAGE_SEPARATOR = "\n"


class TextExtractor:
    """Recognizes text in images and PDFs.

    Images come back wrapped in a searchable one-page PDF; PDFs are
    rasterized page by page and pass through unchanged.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        rasterizer: BasePdfRasterizer,
        *,
        ocr_timeout_seconds: float = 60.0,
        raster_dpi: int = 300,
        max_pdf_pages: int = 100,
    ) -> None:
        self._engine = engine
        self._rasterizer = rasterizer
        self._ocr_timeout_seconds = ocr_timeout_seconds
        self._raster_dpi = raster_dpi
        self._max_pdf_pages = max_pdf_pages

    def extract(
        self,
        content: bytes,
        mime_type: str,
        deadline: Deadline | None = None,
    ) -> ExtractionResult:
        """Extract text from an image or PDF.

        Raises:
            ExtractionFailedError: on preprocessing or recognition failure,
                or for a type that carries no recognizable raster.
            PipelineTimeoutError: if the deadline passes between pages.
        """
        deadline = deadline or Deadline(None)
        kind = normalize_mime_type(mime_type)
        try:
            if kind in IMAGE_MIME_TYPES:
                return self._extract_image(content, deadline)
            if kind == PDF_MIME_TYPE:
                return self._extract_pdf(content, deadline)
        except EngineUnavailableError as exc:
            raise ExtractionFailedError(f"recognition engine unavailable: {exc}") from exc
        except (RecognitionError, PdfRasterizationError, ImagePreprocessingError) as exc:
            raise ExtractionFailedError(f"text extraction failed: {exc}") from exc
        raise ExtractionFailedError(f"no text extraction for mime type '{kind}'")

    def _extract_image(self, content: bytes, deadline: Deadline) -> ExtractionResult:
        image = normalize_image(content)
        text = self._recognize(image.png_bytes, deadline)
        Log.info(f"Recognized {len(text)} chars from {image.width}x{image.height} image")
        return ExtractionResult(
            text=text,
            processed_bytes=build_searchable_pdf(image, text),
            page_texts=[text],
            text_layer_embedded=True,
        )

    def _extract_pdf(self, content: bytes, deadline: Deadline) -> ExtractionResult:
        pages = self._rasterizer.rasterize(
            content, dpi=self._raster_dpi, max_pages=self._max_pdf_pages
        )
        page_texts = [self._recognize(page, deadline) for page in pages]
        text = PAGE_SEPARATOR.join(page_texts).strip()
        Log.info(f"Recognized {len(text)} chars from {len(pages)} PDF pages")
        return ExtractionResult(
            text=text,
            processed_bytes=content,
            page_texts=page_texts,
        )

    def _recognize(self, raster: bytes, deadline: Deadline) -> str:
        timeout = deadline.budget(self._ocr_timeout_seconds)
        return self._engine.recognize(raster, timeout_seconds=timeout)
