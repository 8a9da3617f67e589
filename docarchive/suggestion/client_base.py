from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionRequest:
    """One structured-output call to an AI provider."""

    model: str
    temperature: float
    system_prompt: str
    user_prompt: str
    response_schema: dict[str, object]
    schema_name: str = "metadata_suggestion"

    def messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_prompt},
        ]


class BaseSuggestionClient(ABC):
    """Sends a CompletionRequest to one provider and returns its raw answer."""

    @abstractmethod
    def complete(self, request: CompletionRequest) -> str:
        """Return the answer text, expected to be JSON matching the schema.

        Raises:
            SuggestionNetworkError: if the provider cannot be reached or
                answers with an error status.
            SuggestionError: if the answer is empty, refused or truncated.
        """
