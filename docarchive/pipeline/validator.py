"""Validates an upload and its metadata before any pipeline stage runs."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from docarchive.pipeline.exceptions import InvalidInputError
from docarchive.pipeline.models import Direction, DocumentMetadata, RawUpload

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif"})
OFFICE_MIME_TYPES = frozenset({
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})
ALLOWED_MIME_TYPES = IMAGE_MIME_TYPES | OFFICE_MIME_TYPES | {PDF_MIME_TYPE}

REQUIRED_METADATA_FIELDS = (
    "incomingOutgoing",
    "letterDate",
    "letterNumber",
    "from",
    "to",
    "subject",
    "summary",
)


def normalize_mime_type(raw: str | None) -> str:
    """Lowercase a content type and drop parameters such as ``charset``."""
    if not raw:
        return ""
    return raw.split(";", 1)[0].strip().lower()


def validate_upload(upload: RawUpload | None) -> RawUpload:
    """Check presence, size ceiling and MIME allow-list of an upload.

    Raises:
        InvalidInputError: on any violation.
    """
    if upload is None or upload.size == 0:
        raise InvalidInputError("No file uploaded")
    if upload.size > MAX_UPLOAD_BYTES:
        raise InvalidInputError("File size exceeds 10MB limit")
    if normalize_mime_type(upload.mime_type) not in ALLOWED_MIME_TYPES:
        raise InvalidInputError(
            "Invalid file type. Please upload a supported document format."
        )
    return upload


def validate_recognizable(upload: RawUpload | None) -> RawUpload:
    """Like validate_upload, but only for types text can be recognized from."""
    upload = validate_upload(upload)
    mime_type = normalize_mime_type(upload.mime_type)
    if mime_type != PDF_MIME_TYPE and mime_type not in IMAGE_MIME_TYPES:
        raise InvalidInputError("Text extraction supports only images and PDF files")
    return upload


def build_metadata(fields: Mapping[str, Any]) -> DocumentMetadata:
    """Validate raw form fields and build DocumentMetadata.

    Raises:
        InvalidInputError: if a required field is missing or blank, the
            direction is unknown, or the letter date does not parse.
    """
    values = {name: _clean(fields.get(name)) for name in (*REQUIRED_METADATA_FIELDS, "reference")}
    missing = [name for name in REQUIRED_METADATA_FIELDS if not values[name]]
    if missing:
        raise InvalidInputError(
            f"Missing required metadata fields: {', '.join(missing)}"
        )
    return DocumentMetadata(
        direction=_build_direction(values["incomingOutgoing"]),
        letter_date=_build_letter_date(values["letterDate"]),
        letter_number=values["letterNumber"],
        sender=values["from"],
        recipient=values["to"],
        subject=values["subject"],
        summary=values["summary"],
        reference=values["reference"],
    )


def _clean(raw: Any) -> str:
    if raw is None or not isinstance(raw, str):
        return ""
    return raw.strip()


def _build_direction(raw: str) -> Direction:
    for direction in Direction:
        if direction.value.lower() == raw.lower():
            return direction
    raise InvalidInputError(
        f"'incomingOutgoing' must be one of {[d.value for d in Direction]}"
    )


def _build_letter_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise InvalidInputError("'letterDate' must be a valid calendar date") from exc
