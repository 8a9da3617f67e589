from pathlib import Path

import pytest

from docarchive.suggestion.exceptions import SuggestionError
from docarchive.suggestion.resources import load_prompt, load_schema


class TestLoadPrompt:
    def test_bundled_template_formats_cleanly(self) -> None:
        assert "hello" in load_prompt().format(document_text="hello")

    def test_override_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.txt"
        path.write_text("Read: {document_text}", encoding="utf-8")
        assert load_prompt(path) == "Read: {document_text}"

    def test_override_without_placeholder_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.txt"
        path.write_text("Summarize the letter.", encoding="utf-8")
        with pytest.raises(SuggestionError, match="placeholder"):
            load_prompt(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SuggestionError, match="Cannot read suggestion_prompt.txt"):
            load_prompt(tmp_path / "missing.txt")


class TestLoadSchema:
    def test_bundled_schema_requires_every_field(self) -> None:
        schema = load_schema()
        assert set(schema["required"]) == set(schema["properties"])
        assert len(schema["required"]) == 8

    def test_malformed_override_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SuggestionError, match="not valid JSON"):
            load_schema(path)

    def test_non_object_override_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(SuggestionError, match="JSON object"):
            load_schema(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SuggestionError, match="Cannot read suggestion_schema.json"):
            load_schema(tmp_path / "missing.json")
