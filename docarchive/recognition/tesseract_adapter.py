import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from docarchive.archival.process import ExternalProcessError, ExternalProcessTimeout, run_external
from docarchive.logging.logger import Log
from docarchive.recognition.base import BaseRecognizer
from docarchive.recognition.exceptions import RecognitionError, RecognitionTimeoutError


class TesseractRecognizer(BaseRecognizer):
    """Recognizes text with the Tesseract engine via pytesseract."""

    def __init__(
        self,
        *,
        language: str = "eng",
        command: str = "tesseract",
        load_timeout_seconds: float = 15.0,
    ) -> None:
        self._language = language
        self._command = command
        self._load_timeout_seconds = load_timeout_seconds

    def load(self) -> None:
        """Check the binary and its language data under a hard timeout."""
        try:
            version = self._query("--version")
            listing = self._query("--list-langs")
        except ExternalProcessTimeout as exc:
            raise RecognitionError(
                f"tesseract did not answer within {self._load_timeout_seconds}s"
            ) from exc
        except ExternalProcessError as exc:
            raise RecognitionError(str(exc)) from exc

        # first line is the "List of available languages" header
        languages = {line.strip() for line in listing.splitlines()[1:] if line.strip()}
        missing = [lang for lang in self._language.split("+") if lang not in languages]
        if missing:
            raise RecognitionError(f"tesseract language data not installed: {missing}")
        # pytesseract reads the binary path from a module global
        pytesseract.pytesseract.tesseract_cmd = self._command
        banner = version.splitlines()[0] if version else self._command
        Log.info(f"{banner} ready (lang={self._language})")

    def recognize(self, raster_bytes: bytes, timeout_seconds: float) -> str:
        try:
            with Image.open(io.BytesIO(raster_bytes)) as image:
                text = pytesseract.image_to_string(
                    image,
                    lang=self._language,
                    timeout=timeout_seconds,
                )
        except UnidentifiedImageError as exc:
            raise RecognitionError("raster bytes are not a decodable image") from exc
        except pytesseract.TesseractError as exc:
            raise RecognitionError(f"tesseract failed: {exc}") from exc
        except RuntimeError as exc:
            # pytesseract signals a killed run with a bare RuntimeError
            if "timeout" in str(exc).lower():
                raise RecognitionTimeoutError(
                    f"tesseract exceeded {timeout_seconds}s"
                ) from exc
            raise RecognitionError(f"tesseract failed: {exc}") from exc
        except OSError as exc:
            raise RecognitionError(f"tesseract could not run: {exc}") from exc
        return text.strip()

    def _query(self, flag: str) -> str:
        proc = run_external([self._command, flag], timeout_seconds=self._load_timeout_seconds)
        # tesseract 3.x writes these listings to stderr
        return proc.stdout or proc.stderr
