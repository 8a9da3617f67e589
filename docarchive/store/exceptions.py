class DocumentStoreError(Exception):
    """Raised when the document store cannot complete an operation."""


class DuplicateDocumentError(DocumentStoreError):
    """Raised when a record with the same id has already been appended."""
