import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from docarchive.archival.process import ExternalProcessError, ExternalProcessTimeout
from docarchive.archival.validators import (
    ConformanceValidatorFactory,
    GhostscriptValidator,
    VeraPdfValidator,
)
from docarchive.config.settings import Settings
from docarchive.pipeline.exceptions import ValidationFailedError

_RUN = "docarchive.archival.validators.run_external"
ARTIFACT = Path("/data/converted/abc_letter.pdf")


def _completed(stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr=stderr)


class TestGhostscriptValidator:
    def test_clean_run_passes(self) -> None:
        with patch(_RUN, return_value=_completed()) as run:
            GhostscriptValidator("gs").validate(ARTIFACT, timeout_seconds=30)
        cmd = run.call_args.args[0]
        assert cmd[0] == "gs"
        assert "-dPDFA=3" in cmd
        assert "-dPDFSTOPONERROR" in cmd
        assert cmd[-1] == str(ARTIFACT)
        assert run.call_args.kwargs["timeout_seconds"] == 30

    def test_reported_error_fails(self) -> None:
        with patch(_RUN, return_value=_completed(stderr="Error: /undefined in --run--")):
            with pytest.raises(ValidationFailedError, match="reported errors"):
                GhostscriptValidator().validate(ARTIFACT, timeout_seconds=30)

    def test_non_zero_exit_fails(self) -> None:
        with patch(_RUN, side_effect=ExternalProcessError("gs exited with code 1", returncode=1)):
            with pytest.raises(ValidationFailedError):
                GhostscriptValidator().validate(ARTIFACT, timeout_seconds=30)

    def test_timeout_fails(self) -> None:
        with patch(_RUN, side_effect=ExternalProcessTimeout("gs exceeded 1.0s")):
            with pytest.raises(ValidationFailedError):
                GhostscriptValidator().validate(ARTIFACT, timeout_seconds=1)


class TestVeraPdfValidator:
    def test_pass_verdict_passes(self) -> None:
        with patch(_RUN, return_value=_completed(stdout=f"PASS {ARTIFACT}\n")) as run:
            VeraPdfValidator().validate(ARTIFACT, timeout_seconds=30)
        assert run.call_args.args[0][1:3] == ["--flavour", "3b"]

    def test_fail_verdict_fails(self) -> None:
        with patch(_RUN, return_value=_completed(stdout=f"FAIL {ARTIFACT}\n")):
            with pytest.raises(ValidationFailedError, match="non-conformance"):
                VeraPdfValidator().validate(ARTIFACT, timeout_seconds=30)

    def test_missing_verdict_fails(self) -> None:
        with patch(_RUN, return_value=_completed(stdout="")):
            with pytest.raises(ValidationFailedError):
                VeraPdfValidator().validate(ARTIFACT, timeout_seconds=30)


class TestConformanceValidatorFactory:
    def test_ghostscript_by_default(self) -> None:
        validator = ConformanceValidatorFactory.create(Settings(_env_file=None))
        assert isinstance(validator, GhostscriptValidator)

    def test_verapdf(self) -> None:
        settings = Settings(_env_file=None, validator_engine="verapdf")
        assert isinstance(ConformanceValidatorFactory.create(settings), VeraPdfValidator)

    def test_unknown_engine_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown validator engine"):
            ConformanceValidatorFactory.create(Settings(_env_file=None, validator_engine="x"))
