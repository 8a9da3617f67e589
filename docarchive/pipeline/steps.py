from collections.abc import Callable
from datetime import datetime, timezone

from docarchive.archival.converter import ArchivalConverter
from docarchive.archival.scratch import discard_artifact
from docarchive.extraction.extractor import TextExtractor
from docarchive.extraction.models import ExtractionResult
from docarchive.logging.logger import Log
from docarchive.pipeline.exceptions import PipelineError
from docarchive.pipeline.models import PipelineState
from docarchive.pipeline.pipeline import PipelineContext, PipelineStep
from docarchive.pipeline.validator import (
    OFFICE_MIME_TYPES,
    build_metadata,
    normalize_mime_type,
    validate_upload,
)
from docarchive.store.base import BaseDocumentStore
from docarchive.store.exceptions import DocumentStoreError
from docarchive.store.models import DocumentRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidateUploadStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        upload = validate_upload(context.upload)
        context.metadata = build_metadata(context.fields)
        context.state = PipelineState.VALIDATED
        Log.info(
            f"[{context.request_id}] Accepted {upload.size} bytes "
            f"({normalize_mime_type(upload.mime_type)})"
        )
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        upload = context.require_upload()
        mime_type = normalize_mime_type(upload.mime_type)
        if mime_type in OFFICE_MIME_TYPES:
            context.extraction = ExtractionResult(
                text="",
                processed_bytes=upload.content,
                processed_mime_type=mime_type,
            )
        else:
            context.extraction = self._extractor.extract(
                upload.content, mime_type, deadline=context.deadline
            )
        context.state = PipelineState.EXTRACTED
        Log.info(
            f"[{context.request_id}] Extracted {len(context.extraction.text)} chars"
        )
        return context


class ConvertDocumentStep(PipelineStep):
    def __init__(self, converter: ArchivalConverter) -> None:
        self._converter = converter

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before conversion")
        extraction = context.extraction
        context.conversion = self._converter.convert(
            extraction.processed_bytes,
            extraction.processed_mime_type,
            context.require_upload().file_name,
            page_texts=None if extraction.text_layer_embedded else extraction.page_texts,
            request_id=context.request_id,
            deadline=context.deadline,
        )
        context.state = PipelineState.CONVERTED
        return context


class StoreRecordStep(PipelineStep):
    def __init__(
        self,
        store: BaseDocumentStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None or context.extraction is None or context.conversion is None:
            raise ValueError("PipelineContext must be validated, extracted and converted before store")
        upload = context.require_upload()
        record = DocumentRecord(
            id=context.request_id,
            file_name=upload.file_name,
            original_format=normalize_mime_type(upload.mime_type),
            artifact_path=context.conversion.artifact_path,
            extracted_text=context.extraction.text,
            metadata=context.metadata,
            created_at=self._clock(),
            conformant=context.conversion.conformant,
        )
        try:
            context.stored = self._store.append(record)
        except DocumentStoreError as exc:
            raise PipelineError(
                f"store append failed: {exc}",
                public_message="Failed to save document record. Please try again.",
            ) from exc
        context.state = PipelineState.STORED
        Log.info(f"[{context.request_id}] Stored document {record.id}")
        return context


class DiscardArtifactStep(PipelineStep):
    """Failure handler: removes a converted artifact that was never stored."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.conversion is not None and context.stored is None:
            discard_artifact(context.conversion.artifact_path)
            Log.info(f"[{context.request_id}] Discarded unstored artifact")
        return context
