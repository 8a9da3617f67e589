class PipelineError(Exception):
    """Base exception for all ingestion pipeline failures.

    ``public_message`` is safe to return to clients; the exception text
    itself may carry internal detail and is only logged.
    """

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str, public_message: str | None = None) -> None:
        super().__init__(message)
        if public_message is not None:
            self.public_message = public_message


class InvalidInputError(PipelineError):
    """Raised when an upload or its metadata is rejected before any stage runs."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message, public_message=message)


class ExtractionFailedError(PipelineError):
    """Raised when text recognition or preprocessing fails."""

    public_message = "Failed to process document text. Please try again."


class ConversionFailedError(PipelineError):
    """Raised when the archival renderer fails or produces no artifact."""

    public_message = "Failed to convert document to PDF/A-3 format. Please try again."


class ValidationFailedError(PipelineError):
    """Raised when the converted artifact does not pass the conformance check."""

    public_message = "Converted document failed PDF/A-3 conformance validation."


class PipelineBusyError(PipelineError):
    """Raised when no processing slot frees up within the queue timeout."""

    status_code = 503
    public_message = "Server is busy processing other documents. Please retry shortly."


class PipelineTimeoutError(PipelineError):
    """Raised when the per-request processing deadline has elapsed."""

    public_message = "Document processing timed out. Please try again."
