from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

import psycopg
from psycopg.errors import UniqueViolation
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docarchive.logging.logger import Log
from docarchive.pipeline.models import DocumentMetadata
from docarchive.store.base import BaseDocumentStore
from docarchive.store.connection import get_connection
from docarchive.store.exceptions import DocumentStoreError, DuplicateDocumentError
from docarchive.store.models import DocumentRecord, StoredDocument, preview_url

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS archived_documents (
    seq BIGSERIAL PRIMARY KEY,
    id UUID NOT NULL UNIQUE,
    file_name TEXT NOT NULL,
    original_format TEXT NOT NULL,
    artifact_path TEXT NOT NULL,
    extracted_text TEXT NOT NULL,
    metadata JSONB NOT NULL,
    conformant BOOLEAN NOT NULL,
    created_at TIMESTAMPTZ NOT NULL
)
"""


class PostgresDocumentStore(BaseDocumentStore):
    """Append-only ledger in the archived_documents table.

    Only INSERT and SELECT are issued. Appends take a table lock so the
    timestamp clamp and the insert are atomic with respect to other writers;
    readers are not blocked by it.
    """

    def __init__(self, preview_url_prefix: str) -> None:
        self._preview_url_prefix = preview_url_prefix

    def ensure_schema(self) -> None:
        with get_connection() as conn:
            conn.execute(SCHEMA_SQL)
            conn.commit()
        Log.info("archived_documents table ready")

    def append(self, record: DocumentRecord) -> StoredDocument:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("LOCK TABLE archived_documents IN SHARE ROW EXCLUSIVE MODE")
                    cur.execute("SELECT max(created_at) FROM archived_documents")
                    row = cur.fetchone()
                    latest: datetime | None = row[0] if row else None
                    created_at = record.created_at
                    if latest is not None and latest > created_at:
                        created_at = latest
                    cur.execute(
                        """
                        INSERT INTO archived_documents
                        (id, file_name, original_format, artifact_path,
                         extracted_text, metadata, conformant, created_at)
                        VALUES (%s::uuid, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            record.id,
                            record.file_name,
                            record.original_format,
                            str(record.artifact_path),
                            record.extracted_text,
                            Jsonb(record.metadata.to_dict()),
                            record.conformant,
                            created_at,
                        ),
                    )
                conn.commit()
        except UniqueViolation as exc:
            raise DuplicateDocumentError(f"Document {record.id} already stored") from exc
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to append document {record.id}: {exc}") from exc

        if created_at != record.created_at:
            record = replace(record, created_at=created_at)
        return self._to_stored(record)

    def list_all(self) -> list[StoredDocument]:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, file_name, original_format, artifact_path,
                               extracted_text, metadata, conformant, created_at
                        FROM archived_documents
                        ORDER BY created_at DESC, seq DESC
                        """
                    )
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to list documents: {exc}") from exc
        return [self._to_stored(self._row_to_record(row)) for row in rows]

    @staticmethod
    def _row_to_record(row: dict[str, Any]) -> DocumentRecord:
        return DocumentRecord(
            id=str(row["id"]),
            file_name=row["file_name"],
            original_format=row["original_format"],
            artifact_path=Path(row["artifact_path"]),
            extracted_text=row["extracted_text"],
            metadata=DocumentMetadata.from_dict(row["metadata"]),
            created_at=row["created_at"],
            conformant=row["conformant"],
        )

    def _to_stored(self, record: DocumentRecord) -> StoredDocument:
        return StoredDocument(
            record=record,
            preview_url=preview_url(self._preview_url_prefix, record.artifact_path),
        )
