from collections.abc import Callable

from docarchive.config.settings import Settings
from docarchive.recognition.base import BaseRecognizer
from docarchive.recognition.engine import RecognitionEngine
from docarchive.recognition.tesseract_adapter import TesseractRecognizer


class RecognizerFactory:
    """Creates the configured recognition engine from settings."""

    ADAPTERS: dict[str, Callable[[Settings], BaseRecognizer]] = {
        "tesseract": lambda settings: TesseractRecognizer(
            language=settings.ocr_language,
            command=settings.tesseract_command,
            load_timeout_seconds=settings.ocr_load_timeout_seconds,
        ),
    }

    @classmethod
    def create_engine(cls, settings: Settings) -> RecognitionEngine:
        """Build an uninitialized engine; the recognizer loads on first use."""
        engine = settings.ocr_engine.lower()
        builder = cls.ADAPTERS.get(engine)
        if builder is None:
            raise ValueError(
                f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return RecognitionEngine(
            lambda: builder(settings),
            timeout_seconds=settings.ocr_timeout_seconds,
        )
