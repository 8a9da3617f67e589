"""Runs one ingestion request through validate -> extract -> convert -> store.

Validation happens before a processing slot is taken, so malformed
requests never queue and never touch scratch space. Every later step runs
inside one of a fixed number of slots; a failure anywhere is terminal for
the request, removes any unstored artifact and leaves the store untouched.
"""

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from docarchive.archival.converter import ArchivalConverter
from docarchive.archival.scratch import ScratchSpace, new_request_id
from docarchive.archival.validators import ConformanceValidatorFactory
from docarchive.config.settings import Settings
from docarchive.extraction.extractor import TextExtractor
from docarchive.extraction.models import ExtractionResult
from docarchive.logging.logger import Log
from docarchive.pdf.factory import PdfRasterizerFactory
from docarchive.pipeline.deadline import Deadline
from docarchive.pipeline.exceptions import PipelineBusyError, PipelineError
from docarchive.pipeline.models import PipelineState, RawUpload
from docarchive.pipeline.pipeline import PipelineContext, PipelineStep
from docarchive.pipeline.steps import (
    ConvertDocumentStep,
    DiscardArtifactStep,
    ExtractTextStep,
    StoreRecordStep,
    ValidateUploadStep,
)
from docarchive.pipeline.validator import normalize_mime_type, validate_recognizable
from docarchive.recognition.engine import RecognitionEngine
from docarchive.recognition.factory import RecognizerFactory
from docarchive.store.base import BaseDocumentStore
from docarchive.store.factory import DocumentStoreFactory
from docarchive.store.models import StoredDocument


class ProcessingSlots:
    """Bounded pool of concurrent pipeline runs with a queueing timeout."""

    def __init__(self, max_concurrent: int, queue_timeout_seconds: float) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._semaphore = threading.BoundedSemaphore(max_concurrent)
        self._queue_timeout_seconds = queue_timeout_seconds

    @contextmanager
    def acquire(self) -> Iterator[None]:
        if not self._semaphore.acquire(timeout=self._queue_timeout_seconds):
            Log.warning(f"No processing slot free within {self._queue_timeout_seconds}s")
            raise PipelineBusyError(
                f"no processing slot within {self._queue_timeout_seconds}s"
            )
        try:
            yield
        finally:
            self._semaphore.release()


class DocumentPipeline:
    """Orchestrates the full ingestion pipeline for single requests."""

    def __init__(
        self,
        *,
        validate_step: PipelineStep,
        steps: list[PipelineStep],
        failed_step: PipelineStep,
        extractor: TextExtractor,
        engine: RecognitionEngine,
        store: BaseDocumentStore,
        slots: ProcessingSlots,
        pipeline_timeout_seconds: float | None = None,
    ) -> None:
        self._validate_step = validate_step
        self._steps = steps
        self._failed_step = failed_step
        self._extractor = extractor
        self._engine = engine
        self._store = store
        self._slots = slots
        self._pipeline_timeout_seconds = pipeline_timeout_seconds

    @property
    def store(self) -> BaseDocumentStore:
        return self._store

    @property
    def engine(self) -> RecognitionEngine:
        return self._engine

    def commit(self, upload: RawUpload | None, fields: Mapping[str, Any]) -> StoredDocument:
        """Validate, extract, convert and store one upload.

        Raises:
            PipelineError: the first failure; nothing has been stored.
        """
        context = PipelineContext(request_id=new_request_id(), upload=upload, fields=fields)
        Log.info(f"[{context.request_id}] Received upload")
        self._run(context, [self._validate_step])
        with self._slots.acquire():
            context.deadline = Deadline(self._pipeline_timeout_seconds)
            self._run(context, self._steps)
        if context.stored is None:
            raise PipelineError(f"[{context.request_id}] pipeline finished without a record")
        return context.stored

    def extract_only(self, upload: RawUpload | None) -> ExtractionResult:
        """Run the text extraction stage alone; nothing is converted or stored.

        Raises:
            PipelineError: the validation or extraction failure, already logged.
        """
        request_id = new_request_id()
        Log.info(f"[{request_id}] Received extraction request")
        try:
            upload = validate_recognizable(upload)
            with self._slots.acquire():
                return self._extractor.extract(
                    upload.content,
                    normalize_mime_type(upload.mime_type),
                    deadline=Deadline(self._pipeline_timeout_seconds),
                )
        except PipelineError as exc:
            self._log_failure(request_id, "during extraction", exc)
            raise
        except Exception as exc:
            error = PipelineError(f"unexpected failure in extraction: {exc}")
            self._log_failure(request_id, "during extraction", error)
            raise error from exc

    def list_documents(self) -> list[StoredDocument]:
        return self._store.list_all()

    def shutdown(self) -> None:
        self._engine.shutdown()

    def _run(self, context: PipelineContext, steps: list[PipelineStep]) -> None:
        for step in steps:
            try:
                step.run(context)
            except PipelineError as exc:
                self._fail(context, exc)
                raise
            except Exception as exc:
                error = PipelineError(f"unexpected failure in {type(step).__name__}: {exc}")
                self._fail(context, error)
                raise error from exc

    def _fail(self, context: PipelineContext, error: PipelineError) -> None:
        failed_in = context.state
        context.state = PipelineState.FAILED
        context.error = error
        self._log_failure(context.request_id, f"after {failed_in.value}", error)
        try:
            self._failed_step.run(context)
        except Exception as exc:
            Log.error(f"[{context.request_id}] Failure cleanup raised: {exc}")

    @staticmethod
    def _log_failure(request_id: str, where: str, error: PipelineError) -> None:
        log = Log.warning if error.status_code < 500 else Log.error
        log(f"[{request_id}] Failed {where}: {type(error).__name__}: {error}")


def build_pipeline(
    settings: Settings,
    *,
    engine: RecognitionEngine | None = None,
    store: BaseDocumentStore | None = None,
) -> DocumentPipeline:
    """Build a DocumentPipeline with all required adapters."""
    if engine is None:
        engine = RecognizerFactory.create_engine(settings)
    if store is None:
        store = DocumentStoreFactory.create(settings)
    extractor = TextExtractor(
        engine,
        PdfRasterizerFactory.create(settings),
        ocr_timeout_seconds=settings.ocr_timeout_seconds,
        raster_dpi=settings.pdf_raster_dpi,
        max_pdf_pages=settings.max_pdf_pages,
    )
    converter = ArchivalConverter(
        ScratchSpace(settings.scratch_dir, settings.converted_dir),
        ConformanceValidatorFactory.create(settings),
        ghostscript_command=settings.ghostscript_command,
        office_converter_command=settings.office_converter_command,
        conversion_timeout_seconds=settings.conversion_timeout_seconds,
        validation_timeout_seconds=settings.validation_timeout_seconds,
        retain_non_conformant=settings.retain_non_conformant,
    )
    return DocumentPipeline(
        validate_step=ValidateUploadStep(),
        steps=[
            ExtractTextStep(extractor),
            ConvertDocumentStep(converter),
            StoreRecordStep(store),
        ],
        failed_step=DiscardArtifactStep(),
        extractor=extractor,
        engine=engine,
        store=store,
        slots=ProcessingSlots(settings.max_concurrent_jobs, settings.queue_timeout_seconds),
        pipeline_timeout_seconds=settings.pipeline_timeout_seconds,
    )
