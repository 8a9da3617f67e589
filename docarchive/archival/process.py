import subprocess

from docarchive.logging.logger import Log

_STDERR_TAIL = 500


class ExternalProcessError(Exception):
    """Raised when an external executable cannot run or exits non-zero."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class ExternalProcessTimeout(ExternalProcessError):
    """Raised when an external executable exceeds its timeout and is killed."""


def run_external(cmd: list[str], *, timeout_seconds: float) -> subprocess.CompletedProcess[str]:
    """Run an executable with an argument vector and a hard timeout.

    No shell is involved, so paths are never interpreted.

    Raises:
        ExternalProcessError: if the executable is missing, fails to start,
            or exits non-zero.
        ExternalProcessTimeout: if it runs longer than timeout_seconds.
    """
    program = cmd[0]
    Log.debug(f"Running {program} (timeout={timeout_seconds:.1f}s)")
    try:
        proc = subprocess.run(
            cmd,
            check=False,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise ExternalProcessError(f"{program} binary not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise ExternalProcessTimeout(
            f"{program} exceeded {timeout_seconds:.1f}s and was killed"
        ) from exc
    except OSError as exc:
        raise ExternalProcessError(f"{program} could not start: {exc}") from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()[-_STDERR_TAIL:]
        raise ExternalProcessError(
            f"{program} exited with code {proc.returncode}: {stderr}",
            returncode=proc.returncode,
        )
    return proc
