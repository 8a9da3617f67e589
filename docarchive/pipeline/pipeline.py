from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from docarchive.archival.models import ConversionResult
from docarchive.extraction.models import ExtractionResult
from docarchive.pipeline.deadline import Deadline
from docarchive.pipeline.exceptions import PipelineError
from docarchive.pipeline.models import DocumentMetadata, PipelineState, RawUpload
from docarchive.store.models import StoredDocument


@dataclass(slots=True)
class PipelineContext:
    request_id: str
    upload: RawUpload | None
    fields: Mapping[str, Any] = field(default_factory=dict)
    deadline: Deadline = field(default_factory=lambda: Deadline(None))
    state: PipelineState = PipelineState.RECEIVED
    metadata: DocumentMetadata | None = None
    extraction: ExtractionResult | None = None
    conversion: ConversionResult | None = None
    stored: StoredDocument | None = None
    error: PipelineError | None = None

    def require_upload(self) -> RawUpload:
        if self.upload is None:
            raise ValueError("PipelineContext.upload must be set")
        return self.upload


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
