"""HTTP surface: extraction preview, advisory analysis, commit and listing."""

import base64
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from docarchive.config.settings import Settings
from docarchive.logging.logger import Log
from docarchive.pipeline.exceptions import PipelineError
from docarchive.pipeline.models import RawUpload
from docarchive.pipeline.orchestrator import DocumentPipeline, build_pipeline
from docarchive.pipeline.validator import MAX_UPLOAD_BYTES
from docarchive.store.connection import close_pool, init_pool
from docarchive.store.postgres_store import PostgresDocumentStore
from docarchive.suggestion.exceptions import SuggestionError
from docarchive.suggestion.factory import SuggesterFactory
from docarchive.suggestion.suggester import MetadataSuggester


class AnalyzeDocumentRequest(BaseModel):
    text: str = ""


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def _read_upload(form: FormData) -> RawUpload | None:
    file = form.get("file")
    if not isinstance(file, UploadFile):
        return None
    # one byte past the ceiling is enough to reject an oversize file
    content = await file.read(MAX_UPLOAD_BYTES + 1)
    await file.close()
    return RawUpload(
        content=content,
        mime_type=file.content_type or "",
        file_name=file.filename or "",
    )


def _text_fields(form: FormData) -> dict[str, str]:
    return {key: value for key, value in form.items() if isinstance(value, str)}


def create_app(
    settings: Settings | None = None,
    *,
    pipeline: DocumentPipeline | None = None,
    suggester: MetadataSuggester | None = None,
) -> FastAPI:
    """Build the application. Pipeline and suggester are injectable for tests."""
    settings = settings or Settings()
    if pipeline is None:
        pipeline = build_pipeline(settings)
    if suggester is None:
        suggester = SuggesterFactory.create(settings)
    uses_database = isinstance(pipeline.store, PostgresDocumentStore)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if uses_database:
            init_pool(settings)
            pipeline.store.ensure_schema()  # type: ignore[attr-defined]
        Log.info(f"docarchive ready ({settings.app_env}, store={settings.document_store})")
        try:
            yield
        finally:
            pipeline.shutdown()
            if uses_database:
                close_pool()
            Log.info("docarchive stopped")

    app = FastAPI(title="Document Archive API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    settings.converted_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.preview_url_prefix,
        StaticFiles(directory=settings.converted_dir),
        name="converted",
    )

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(_request: Request, exc: PipelineError) -> JSONResponse:
        return _failure(exc.status_code, exc.public_message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # /analyze-document is the only route with a typed body
        Log.warning(f"Rejected malformed body on {request.url.path}: {len(exc.errors())} error(s)")
        return _failure(400, "No text provided for analysis")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        Log.exception(f"Unhandled error on {request.url.path}: {exc}")
        return _failure(500, "Internal server error")

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/extract-text")
    async def extract_text(request: Request) -> dict[str, Any]:
        upload = await _read_upload(await request.form())
        result = await run_in_threadpool(pipeline.extract_only, upload)
        return {
            "success": True,
            "text": result.text,
            "processedBuffer": base64.b64encode(result.processed_bytes).decode("ascii"),
        }

    @app.post("/analyze-document", response_model=None)
    async def analyze_document(body: AnalyzeDocumentRequest) -> dict[str, Any] | JSONResponse:
        if not body.text.strip():
            return _failure(400, "No text provided for analysis")
        try:
            suggestion = await run_in_threadpool(suggester.suggest, body.text)
        except SuggestionError as exc:
            Log.error(f"Metadata suggestion failed: {exc}")
            return _failure(502, "Failed to analyze document")
        return suggestion.to_dict()

    @app.post("/upload")
    async def upload_document(request: Request) -> dict[str, Any]:
        form = await request.form()
        upload = await _read_upload(form)
        stored = await run_in_threadpool(pipeline.commit, upload, _text_fields(form))
        document = stored.to_dict()
        return {
            "success": True,
            "message": "File uploaded and converted successfully",
            "document": {
                "id": document["id"],
                "fileName": document["fileName"],
                "previewUrl": document["previewUrl"],
                "metadata": document["metadata"],
                "extractedText": document["extractedText"],
            },
        }

    @app.get("/documents")
    async def list_documents() -> list[dict[str, Any]]:
        documents = await run_in_threadpool(pipeline.list_documents)
        return [document.to_dict() for document in documents]

    return app
