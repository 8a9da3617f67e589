from pathlib import Path

import pytest
from pydantic import ValidationError

from docarchive.config.settings import Settings


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[arg-type]


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert _settings().app_env == "dev"

    def test_default_port(self) -> None:
        assert _settings().port == 5000

    def test_default_ocr_engine(self) -> None:
        s = _settings()
        assert s.ocr_engine == "tesseract"
        assert s.ocr_language == "eng"
        assert s.tesseract_command == "tesseract"
        assert s.ocr_load_timeout_seconds == 15.0

    def test_default_pdf_engine(self) -> None:
        assert _settings().pdf_engine == "pymupdf"

    def test_default_store_is_memory(self) -> None:
        assert _settings().document_store == "memory"

    def test_non_conformant_artifacts_rejected_by_default(self) -> None:
        assert _settings().retain_non_conformant is False

    def test_default_suggestion_provider(self) -> None:
        s = _settings()
        assert s.suggestion_provider == "openai"
        assert s.suggestion_timeout_seconds == 30


class TestSettingsDerived:
    def test_scratch_and_converted_dirs_live_under_data_dir(self) -> None:
        s = _settings(data_dir=Path("/srv/archive"))
        assert s.scratch_dir == Path("/srv/archive/temp")
        assert s.converted_dir == Path("/srv/archive/converted")

    def test_cors_origins_split_and_trimmed(self) -> None:
        s = _settings(cors_allowed_origins="http://a.test, http://b.test ,")
        assert s.cors_origins() == ["http://a.test", "http://b.test"]


class TestSettingsFromEnv:
    def test_loads_app_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        assert _settings().app_env == "production"

    def test_loads_max_concurrent_jobs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENT_JOBS", "8")
        assert _settings().max_concurrent_jobs == 8

    def test_loads_retain_non_conformant(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RETAIN_NON_CONFORMANT", "true")
        assert _settings().retain_non_conformant is True

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        assert _settings().db_host == "db.example.com"


class TestSettingsValidation:
    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "not_a_number")
        with pytest.raises(ValidationError):
            _settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_TIMEOUT_SECONDS", "abc")
        with pytest.raises(ValidationError):
            _settings()
