"""AI-assisted letter metadata suggestion."""

import json
from pathlib import Path

from docarchive.logging.logger import Log
from docarchive.suggestion.client_base import BaseSuggestionClient, CompletionRequest
from docarchive.suggestion.exceptions import SuggestionError
from docarchive.suggestion.models import MetadataSuggestion
from docarchive.suggestion.resources import load_prompt, load_schema
from docarchive.suggestion.validator import validate_and_build

DEFAULT_SYSTEM_PROMPT = (
    "You are a document analysis assistant. Extract key information from "
    "letters and answer only with JSON matching the given schema."
)
MAX_TEXT_CHARS = 12_000


class MetadataSuggester:
    """Proposes letter metadata from extracted text using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseSuggestionClient,
        model: str,
        temperature: float = 0.3,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt(prompt_template_path)
        self._json_schema = load_schema(json_schema_path)

    def suggest(self, text: str) -> MetadataSuggestion:
        """Ask the provider for metadata and validate its answer.

        Raises:
            SuggestionError: on provider, parsing or validation failure.
        """
        if not text.strip():
            raise SuggestionError("No text provided for analysis")
        prompt = self._prompt_template.format(document_text=text[:MAX_TEXT_CHARS])
        raw_response = self._client.complete(
            CompletionRequest(
                model=self._model,
                temperature=self._temperature,
                system_prompt=self._system_prompt,
                user_prompt=prompt,
                response_schema=self._json_schema,
            )
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        suggestion = validate_and_build(self._parse_json(raw_response))
        Log.info("Metadata suggestion complete")
        return suggestion

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SuggestionError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise SuggestionError("JSON response must be an object")
        return parsed
