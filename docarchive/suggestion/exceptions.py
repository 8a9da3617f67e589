class SuggestionError(Exception):
    """Raised when a metadata suggestion cannot be produced."""


class SuggestionValidationError(SuggestionError):
    """Raised when the provider's answer does not match the suggestion shape."""


class SuggestionNetworkError(SuggestionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
