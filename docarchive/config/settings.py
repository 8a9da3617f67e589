from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5000
    cors_allowed_origins: str = "http://localhost:3000"

    data_dir: Path = Path("uploads")
    preview_url_prefix: str = "/uploads/converted"

    max_concurrent_jobs: int = 4
    queue_timeout_seconds: float = 30.0
    pipeline_timeout_seconds: float = 300.0

    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    ocr_timeout_seconds: float = 60.0
    tesseract_command: str = "tesseract"
    ocr_load_timeout_seconds: float = 15.0

    pdf_engine: str = "pymupdf"
    pdf_raster_dpi: int = 300
    max_pdf_pages: int = 100

    ghostscript_command: str = "gs"
    office_converter_command: str = "soffice"
    conversion_timeout_seconds: float = 120.0

    validator_engine: str = "ghostscript"
    verapdf_command: str = "verapdf"
    validation_timeout_seconds: float = 60.0
    retain_non_conformant: bool = False

    document_store: str = "memory"
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docarchive"
    db_username: str = "docarchive"
    db_password: str = "secret"

    suggestion_provider: str = "openai"
    suggestion_api_key: str = ""
    suggestion_model_name: str = "gpt-4o-mini"
    suggestion_base_url: str = ""
    suggestion_timeout_seconds: int = 30
    suggestion_temperature: float = 0.3

    @property
    def scratch_dir(self) -> Path:
        return self.data_dir / "temp"

    @property
    def converted_dir(self) -> Path:
        return self.data_dir / "converted"

    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.cors_allowed_origins.split(",")
            if origin.strip()
        ]
