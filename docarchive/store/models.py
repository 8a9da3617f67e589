from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from docarchive.pipeline.models import DocumentMetadata


@dataclass(frozen=True)
class DocumentRecord:
    """A committed, immutable archive entry."""

    id: str
    file_name: str
    original_format: str
    artifact_path: Path
    extracted_text: str
    metadata: DocumentMetadata
    created_at: datetime
    conformant: bool = True


def preview_url(prefix: str, artifact_path: Path) -> str:
    """Public URL of an artifact under the static converted-files prefix."""
    return f"{prefix.rstrip('/')}/{artifact_path.name}"


@dataclass(frozen=True)
class StoredDocument:
    """A record as read back from the store, with its preview reference."""

    record: DocumentRecord
    preview_url: str

    def to_dict(self) -> dict[str, Any]:
        record = self.record
        return {
            "id": record.id,
            "fileName": record.file_name,
            "originalFormat": record.original_format,
            "extractedText": record.extracted_text,
            "metadata": record.metadata.to_dict(),
            "uploadedAt": record.created_at.isoformat(),
            "conformant": record.conformant,
            "previewUrl": self.preview_url,
        }
