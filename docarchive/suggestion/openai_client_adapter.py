import httpx
import openai

from docarchive.suggestion.client_base import BaseSuggestionClient, CompletionRequest
from docarchive.suggestion.exceptions import SuggestionError, SuggestionNetworkError

_MAX_COMPLETION_TOKENS = 500


class OpenAIClientAdapter(BaseSuggestionClient):
    """Suggestion client for OpenAI and OpenAI-compatible chat endpoints.

    Retries are disabled; a failing provider surfaces on the first attempt.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def complete(self, request: CompletionRequest) -> str:
        try:
            response = self._client.chat.completions.create(
                model=request.model,
                temperature=request.temperature,
                max_tokens=_MAX_COMPLETION_TOKENS,
                response_format=_strict_schema_format(request),
                messages=request.messages(),
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise SuggestionNetworkError(f"AI provider unreachable: {exc}") from exc
        except openai.RateLimitError as exc:
            raise SuggestionNetworkError("AI provider rate limit reached") from exc
        except openai.APIStatusError as exc:
            raise SuggestionNetworkError(
                f"AI provider returned HTTP {exc.status_code}: {exc.message}"
            ) from exc
        except openai.APIError as exc:
            raise SuggestionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise SuggestionError("AI returned no choices")
        choice = response.choices[0]
        refusal = getattr(choice.message, "refusal", None)
        if isinstance(refusal, str) and refusal:
            raise SuggestionError(f"AI refused the request: {refusal}")
        if choice.finish_reason == "length":
            raise SuggestionError("AI response was cut off at the token limit")
        if choice.message.content is None:
            raise SuggestionError("AI returned empty response")
        return choice.message.content


def _strict_schema_format(request: CompletionRequest) -> dict[str, object]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": request.schema_name,
            "strict": True,
            "schema": request.response_schema,
        },
    }
