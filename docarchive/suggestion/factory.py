from typing import ClassVar

from docarchive.config.settings import Settings
from docarchive.suggestion.example_client_adapter import ExampleClientAdapter
from docarchive.suggestion.openai_client_adapter import OpenAIClientAdapter
from docarchive.suggestion.suggester import MetadataSuggester


class SuggesterFactory:
    """Creates the configured metadata suggester."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> MetadataSuggester:
        """Create a configured suggester from application settings."""
        provider = settings.suggestion_provider.lower()
        if provider == "example":
            return MetadataSuggester(client=ExampleClientAdapter(), model="example")
        client = OpenAIClientAdapter(
            api_key=settings.suggestion_api_key,
            timeout_seconds=settings.suggestion_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return MetadataSuggester(
            client=client,
            model=settings.suggestion_model_name,
            temperature=settings.suggestion_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = settings.suggestion_base_url.strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "suggestion_base_url is required for suggestion_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]
        raise ValueError(
            f"Unknown suggestion provider '{provider}'. Choose from: {supported}"
        )
