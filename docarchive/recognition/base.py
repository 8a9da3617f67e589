from abc import ABC, abstractmethod


class BaseRecognizer(ABC):
    """Contract for all text recognition adapters.

    Implementations are not assumed to be safe for concurrent use;
    RecognitionEngine serializes every call onto one worker thread.
    """

    @abstractmethod
    def load(self) -> None:
        """Prepare the underlying engine. Called exactly once per instance.

        RecognitionEngine holds its lock for the whole call, so every
        implementation must finish or fail within a bounded time.

        Raises:
            RecognitionError: if the engine cannot be brought up.
        """

    @abstractmethod
    def recognize(self, raster_bytes: bytes, timeout_seconds: float) -> str:
        """Recognize text in a normalized raster image.

        Args:
            raster_bytes: Lossless image bytes produced by preprocessing.
            timeout_seconds: Upper bound for the underlying engine run.

        Returns:
            Recognized text; an empty string when the image holds none.

        Raises:
            RecognitionError: if recognition fails for any reason.
        """

    def close(self) -> None:
        """Release engine resources. Default is a no-op."""
