class RecognitionError(Exception):
    """Raised when text recognition fails."""


class EngineUnavailableError(RecognitionError):
    """Raised when the engine is shut down or could not be initialized."""


class RecognitionTimeoutError(RecognitionError):
    """Raised when a single recognition call exceeds its time budget."""
