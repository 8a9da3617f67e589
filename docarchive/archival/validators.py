from abc import ABC, abstractmethod
from pathlib import Path

from docarchive.archival.process import ExternalProcessError, run_external
from docarchive.config.settings import Settings
from docarchive.pipeline.exceptions import ValidationFailedError

PDFA_PART = 3


class BaseConformanceValidator(ABC):
    """Contract for PDF/A conformance checkers. Pass/fail only."""

    @abstractmethod
    def validate(self, artifact_path: Path, timeout_seconds: float) -> None:
        """Check an artifact against the PDF/A-3 profile.

        Raises:
            ValidationFailedError: on non-conformance, a non-zero exit,
                an invocation error or a timeout.
        """


class GhostscriptValidator(BaseConformanceValidator):
    """Re-interprets the artifact with Ghostscript in PDF/A-3 mode and
    stops on the first error."""

    def __init__(self, command: str = "gs") -> None:
        self._command = command

    def validate(self, artifact_path: Path, timeout_seconds: float) -> None:
        cmd = [
            self._command,
            "-dNODISPLAY",
            "-dSAFER",
            f"-dPDFA={PDFA_PART}",
            "-dBATCH",
            "-dNOPAUSE",
            "-dQUIET",
            "-dPDFSTOPONERROR",
            str(artifact_path),
        ]
        try:
            proc = run_external(cmd, timeout_seconds=timeout_seconds)
        except ExternalProcessError as exc:
            raise ValidationFailedError(f"ghostscript check failed: {exc}") from exc
        report = f"{proc.stdout}\n{proc.stderr}"
        if "error" in report.lower():
            raise ValidationFailedError(f"ghostscript reported errors: {report.strip()[:500]}")


class VeraPdfValidator(BaseConformanceValidator):
    """Validates against the PDF/A-3b profile with veraPDF."""

    FLAVOUR = f"{PDFA_PART}b"

    def __init__(self, command: str = "verapdf") -> None:
        self._command = command

    def validate(self, artifact_path: Path, timeout_seconds: float) -> None:
        cmd = [
            self._command,
            "--flavour",
            self.FLAVOUR,
            "--format",
            "text",
            str(artifact_path),
        ]
        try:
            proc = run_external(cmd, timeout_seconds=timeout_seconds)
        except ExternalProcessError as exc:
            raise ValidationFailedError(f"veraPDF check failed: {exc}") from exc
        verdicts = [line.split(maxsplit=1)[0] for line in proc.stdout.splitlines() if line.strip()]
        if "PASS" not in verdicts or "FAIL" in verdicts:
            raise ValidationFailedError(f"veraPDF reported non-conformance: {proc.stdout.strip()[:500]}")


class ConformanceValidatorFactory:
    """Creates the configured conformance validator."""

    @classmethod
    def create(cls, settings: Settings) -> BaseConformanceValidator:
        engine = settings.validator_engine.lower()
        if engine == "ghostscript":
            return GhostscriptValidator(settings.ghostscript_command)
        if engine == "verapdf":
            return VeraPdfValidator(settings.verapdf_command)
        raise ValueError(
            f"Unknown validator engine '{engine}'. Choose from: ['ghostscript', 'verapdf']"
        )
