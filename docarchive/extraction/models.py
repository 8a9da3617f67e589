from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionResult:
    """Recognized text plus the bytes that continue into archival conversion.

    ``text`` may be empty but is never None. ``text_layer_embedded`` is True
    when ``processed_bytes`` already carries the recognized text as an
    invisible layer, so conversion must not add another one.
    """

    text: str
    processed_bytes: bytes
    processed_mime_type: str = "application/pdf"
    page_texts: list[str] = field(default_factory=list)
    text_layer_embedded: bool = False
