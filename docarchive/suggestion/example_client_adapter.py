"""Offline suggestion client.

Returns a fixed, schema-valid answer without any network call. Selected
with ``SUGGESTION_PROVIDER=example`` for local development and tests.
"""

import json
from typing import ClassVar

from docarchive.suggestion.client_base import BaseSuggestionClient, CompletionRequest


class ExampleClientAdapter(BaseSuggestionClient):
    """Answers every request with DEFAULT_RESPONSE."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "type": None,
        "date": None,
        "reference": None,
        "from": None,
        "to": None,
        "subject": None,
        "additionalReference": None,
        "summary": None,
    }

    def complete(self, request: CompletionRequest) -> str:
        _ = request
        return json.dumps(self.DEFAULT_RESPONSE)
