"""Validates a provider's raw JSON answer and builds a MetadataSuggestion."""

from datetime import date
from typing import Any

from docarchive.suggestion.exceptions import SuggestionValidationError
from docarchive.suggestion.models import MetadataSuggestion

_FIELDS = ("type", "date", "reference", "from", "to", "subject", "additionalReference", "summary")
_DIRECTIONS = {"incoming": "Incoming", "outgoing": "Outgoing"}


def validate_and_build(data: dict[str, Any]) -> MetadataSuggestion:
    """Check field types and normalize values.

    Unknown directions and unparseable dates are dropped to None rather
    than rejected, since the suggestion only pre-fills a form.

    Raises:
        SuggestionValidationError: if a field is missing or not a string/null.
    """
    values = {name: _optional_string(data, name) for name in _FIELDS}
    return MetadataSuggestion(
        direction=_normalize_direction(values["type"]),
        letter_date=_normalize_date(values["date"]),
        reference=values["reference"],
        sender=values["from"],
        recipient=values["to"],
        subject=values["subject"],
        additional_reference=values["additionalReference"],
        summary=values["summary"],
    )


def _optional_string(data: dict[str, Any], name: str) -> str | None:
    if name not in data:
        raise SuggestionValidationError(f"Missing required field: {name}")
    raw = data[name]
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise SuggestionValidationError(f"'{name}' must be a string or null")
    return raw.strip() or None


def _normalize_direction(raw: str | None) -> str | None:
    if raw is None:
        return None
    return _DIRECTIONS.get(raw.lower())


def _normalize_date(raw: str | None) -> str | None:
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        return None
