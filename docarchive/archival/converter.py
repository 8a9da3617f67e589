"""Archival conversion stage: render any accepted input to PDF/A-3.

All inputs reach Ghostscript as PDF: images arrive already wrapped by the
extraction stage, word and spreadsheet files are first rendered by a
headless LibreOffice run. The artifact counts as produced only if the
renderer exits cleanly *and* the output file exists.
"""

from pathlib import Path

from docarchive.archival.models import ConversionResult
from docarchive.archival.process import ExternalProcessError, run_external
from docarchive.archival.scratch import ScratchPaths, ScratchSpace
from docarchive.archival.text_layer import overlay_text_layer
from docarchive.archival.validators import PDFA_PART, BaseConformanceValidator
from docarchive.logging.logger import Log
from docarchive.pipeline.deadline import Deadline
from docarchive.pipeline.exceptions import ConversionFailedError, ValidationFailedError
from docarchive.pipeline.validator import OFFICE_MIME_TYPES, normalize_mime_type

INPUT_SUFFIXES: dict[str, str] = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
}


def ghostscript_pdfa_command(command: str, source: Path, output: Path) -> list[str]:
    """PDF/A-3 rendering profile: embedded subset fonts, RGB colour
    conversion, Flate-only image compression and no page auto-rotation."""
    return [
        command,
        f"-dPDFA={PDFA_PART}",
        "-dBATCH",
        "-dNOPAUSE",
        "-dQUIET",
        "-dSAFER",
        "-sDEVICE=pdfwrite",
        "-dPDFACompatibilityPolicy=1",
        "-sColorConversionStrategy=RGB",
        "-sProcessColorModel=DeviceRGB",
        "-dAutoRotatePages=/None",
        "-dCompatibilityLevel=1.7",
        "-dPDFSETTINGS=/prepress",
        "-dEmbedAllFonts=true",
        "-dSubsetFonts=true",
        "-dAutoFilterColorImages=false",
        "-dAutoFilterGrayImages=false",
        "-dColorImageFilter=/FlateEncode",
        "-dGrayImageFilter=/FlateEncode",
        "-dMonoImageFilter=/FlateEncode",
        f"-sOutputFile={output}",
        str(source),
    ]


class ArchivalConverter:
    """Renders input bytes to a validated PDF/A-3 artifact."""

    def __init__(
        self,
        scratch: ScratchSpace,
        validator: BaseConformanceValidator,
        *,
        ghostscript_command: str = "gs",
        office_converter_command: str = "soffice",
        conversion_timeout_seconds: float = 120.0,
        validation_timeout_seconds: float = 60.0,
        retain_non_conformant: bool = False,
    ) -> None:
        self._scratch = scratch
        self._validator = validator
        self._ghostscript_command = ghostscript_command
        self._office_converter_command = office_converter_command
        self._conversion_timeout_seconds = conversion_timeout_seconds
        self._validation_timeout_seconds = validation_timeout_seconds
        self._retain_non_conformant = retain_non_conformant

    def convert(
        self,
        content: bytes,
        mime_type: str,
        original_name: str,
        *,
        page_texts: list[str] | None = None,
        request_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> ConversionResult:
        """Render, then validate, one document.

        Args:
            content: Bytes to render (PDF, or an office file).
            mime_type: Declared type of ``content``.
            original_name: Untrusted display name; only its sanitized stem
                appears in the artifact name.
            page_texts: Per-page recognized text to lay invisibly onto
                pages without native text. None when already embedded.
            request_id: Scratch namespace id; generated when omitted.
            deadline: Per-request time budget.

        Raises:
            ConversionFailedError: renderer error, timeout, or no artifact.
            ValidationFailedError: artifact is not conformant and
                non-conformant artifacts are not retained.
        """
        deadline = deadline or Deadline(None)
        kind = normalize_mime_type(mime_type)
        suffix = INPUT_SUFFIXES.get(kind, ".bin")

        with self._scratch.session(original_name, suffix, request_id) as paths:
            paths.input_path.write_bytes(content)
            source = paths.input_path
            if kind in OFFICE_MIME_TYPES:
                source = self._prerender_office(paths, deadline)
            if page_texts:
                source = self._embed_text_layer(source, page_texts, paths)

            self._render(source, paths.output_path, deadline)
            conformant = self._check_conformance(paths.output_path, deadline)

        Log.info(
            f"Converted {paths.request_id} to {paths.output_path.name} "
            f"(conformant={conformant})"
        )
        return ConversionResult(artifact_path=paths.output_path, conformant=conformant)

    def _render(self, source: Path, output: Path, deadline: Deadline) -> None:
        cmd = ghostscript_pdfa_command(self._ghostscript_command, source, output)
        try:
            run_external(cmd, timeout_seconds=deadline.budget(self._conversion_timeout_seconds))
        except ExternalProcessError as exc:
            raise ConversionFailedError(f"PDF/A-3 rendering failed: {exc}") from exc
        if not output.is_file():
            raise ConversionFailedError("renderer exited cleanly but produced no output file")

    def _prerender_office(self, paths: ScratchPaths, deadline: Deadline) -> Path:
        profile_dir = paths.workdir / "lo-profile"
        cmd = [
            self._office_converter_command,
            "--headless",
            f"-env:UserInstallation={profile_dir.resolve().as_uri()}",
            "--convert-to",
            "pdf",
            "--outdir",
            str(paths.workdir),
            str(paths.input_path),
        ]
        try:
            run_external(cmd, timeout_seconds=deadline.budget(self._conversion_timeout_seconds))
        except ExternalProcessError as exc:
            raise ConversionFailedError(f"office document rendering failed: {exc}") from exc
        rendered = paths.input_path.with_suffix(".pdf")
        if not rendered.is_file():
            raise ConversionFailedError("office renderer produced no PDF")
        return rendered

    @staticmethod
    def _embed_text_layer(source: Path, page_texts: list[str], paths: ScratchPaths) -> Path:
        try:
            layered = overlay_text_layer(source.read_bytes(), page_texts)
        except Exception as exc:
            raise ConversionFailedError(f"could not embed text layer: {exc}") from exc
        target = paths.workdir / "layered.pdf"
        target.write_bytes(layered)
        return target

    def _check_conformance(self, artifact: Path, deadline: Deadline) -> bool:
        try:
            self._validator.validate(
                artifact,
                timeout_seconds=deadline.budget(self._validation_timeout_seconds),
            )
        except ValidationFailedError as exc:
            if not self._retain_non_conformant:
                raise
            Log.warning(f"Keeping non-conformant artifact {artifact.name}: {exc}")
            return False
        return True
