import threading
from dataclasses import replace

from docarchive.store.base import BaseDocumentStore
from docarchive.store.exceptions import DuplicateDocumentError
from docarchive.store.models import DocumentRecord, StoredDocument, preview_url


class InMemoryDocumentStore(BaseDocumentStore):
    """Process-local ledger guarded by a single lock."""

    def __init__(self, preview_url_prefix: str) -> None:
        self._preview_url_prefix = preview_url_prefix
        self._lock = threading.Lock()
        self._records: list[DocumentRecord] = []
        self._ids: set[str] = set()

    def append(self, record: DocumentRecord) -> StoredDocument:
        with self._lock:
            if record.id in self._ids:
                raise DuplicateDocumentError(f"Document {record.id} already stored")
            if self._records and record.created_at < self._records[-1].created_at:
                record = replace(record, created_at=self._records[-1].created_at)
            self._records.append(record)
            self._ids.add(record.id)
        return self._to_stored(record)

    def list_all(self) -> list[StoredDocument]:
        with self._lock:
            snapshot = list(enumerate(self._records))
        snapshot.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [self._to_stored(record) for _, record in snapshot]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _to_stored(self, record: DocumentRecord) -> StoredDocument:
        return StoredDocument(
            record=record,
            preview_url=preview_url(self._preview_url_prefix, record.artifact_path),
        )
