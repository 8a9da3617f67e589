"""Prompt template and response schema shipped with the package.

Either one can be replaced by a file on disk; the replacement is checked
the same way as the bundled copy.
"""

import json
from pathlib import Path

from docarchive.suggestion.exceptions import SuggestionError

_BUNDLED_DIR = Path(__file__).parent / "prompts"
PROMPT_TEMPLATE = "suggestion_prompt.txt"
RESPONSE_SCHEMA = "suggestion_schema.json"
TEXT_PLACEHOLDER = "{document_text}"


def _read(name: str, override: Path | None) -> str:
    path = override if override is not None else _BUNDLED_DIR / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SuggestionError(f"Cannot read {name} from {path}: {exc}") from exc


def load_prompt(override: Path | None = None) -> str:
    """Return the user prompt template.

    Raises:
        SuggestionError: if the file is unreadable or lacks the text placeholder.
    """
    template = _read(PROMPT_TEMPLATE, override)
    if TEXT_PLACEHOLDER not in template:
        raise SuggestionError(f"{PROMPT_TEMPLATE} has no {TEXT_PLACEHOLDER} placeholder")
    return template


def load_schema(override: Path | None = None) -> dict[str, object]:
    """Return the parsed JSON schema the provider must answer with.

    Raises:
        SuggestionError: if the file is unreadable or not a JSON object.
    """
    raw = _read(RESPONSE_SCHEMA, override)
    try:
        schema = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SuggestionError(f"{RESPONSE_SCHEMA} is not valid JSON: {exc}") from exc
    if not isinstance(schema, dict):
        raise SuggestionError(f"{RESPONSE_SCHEMA} must hold a JSON object")
    return schema
