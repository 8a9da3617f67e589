from docarchive.suggestion.factory import SuggesterFactory
from docarchive.suggestion.models import MetadataSuggestion
from docarchive.suggestion.suggester import MetadataSuggester

__all__ = ["MetadataSuggester", "MetadataSuggestion", "SuggesterFactory"]
