from abc import ABC, abstractmethod

from docarchive.store.models import DocumentRecord, StoredDocument


class BaseDocumentStore(ABC):
    """Contract for the append-only document ledger.

    Records are never updated or deleted once appended.
    """

    @abstractmethod
    def append(self, record: DocumentRecord) -> StoredDocument:
        """Add exactly one record.

        The stored ``created_at`` is never earlier than that of any record
        appended before it; a lagging timestamp is raised to the latest one.

        Raises:
            DuplicateDocumentError: if the id is already present.
            DocumentStoreError: if the record could not be written.
        """

    @abstractmethod
    def list_all(self) -> list[StoredDocument]:
        """Snapshot of all records, newest first.

        Ties on ``created_at`` are ordered by insertion, later first.
        """
