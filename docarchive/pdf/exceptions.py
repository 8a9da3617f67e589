class PdfRasterizationError(Exception):
    """Raised when PDF pages cannot be rendered to images."""
