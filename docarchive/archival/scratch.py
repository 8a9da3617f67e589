"""Request-scoped scratch namespace for archival conversion.

Every run gets its own directory under the scratch root, named by a
random request id. The untrusted original filename never becomes a path
component; it only contributes a sanitized, human-readable suffix to the
artifact name.
"""

import re
import shutil
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from docarchive.logging.logger import Log

_SLUG_RE = re.compile(r"[^A-Za-z0-9_-]+")
_MAX_SLUG_LENGTH = 40


@dataclass(frozen=True)
class ScratchPaths:
    request_id: str
    workdir: Path
    input_path: Path
    output_path: Path


def new_request_id() -> str:
    return str(uuid.uuid4())


def display_slug(original_name: str) -> str:
    """Reduce an untrusted filename to a safe, readable stem."""
    stem = PurePosixPath(original_name.replace("\\", "/")).stem
    slug = _SLUG_RE.sub("-", stem).strip("-_")[:_MAX_SLUG_LENGTH]
    return slug or "document"


class ScratchSpace:
    """Allocates and cleans up per-request scratch and artifact paths."""

    def __init__(self, scratch_dir: Path, output_dir: Path) -> None:
        self._scratch_dir = scratch_dir
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def ensure_dirs(self) -> None:
        self._scratch_dir.mkdir(parents=True, exist_ok=True)
        self._output_dir.mkdir(parents=True, exist_ok=True)

    def allocate(
        self,
        original_name: str,
        input_suffix: str,
        request_id: str | None = None,
    ) -> ScratchPaths:
        request_id = request_id or new_request_id()
        workdir = self._scratch_dir / request_id
        return ScratchPaths(
            request_id=request_id,
            workdir=workdir,
            input_path=workdir / f"input{input_suffix}",
            output_path=self._output_dir / f"{request_id}_{display_slug(original_name)}.pdf",
        )

    @contextmanager
    def session(
        self,
        original_name: str,
        input_suffix: str,
        request_id: str | None = None,
    ) -> Iterator[ScratchPaths]:
        """Yield fresh paths; the workdir is always removed afterwards and
        the output artifact is removed too if the block raises."""
        self.ensure_dirs()
        paths = self.allocate(original_name, input_suffix, request_id)
        paths.workdir.mkdir()
        try:
            yield paths
        except BaseException:
            discard_artifact(paths.output_path)
            raise
        finally:
            shutil.rmtree(paths.workdir, ignore_errors=True)


def discard_artifact(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        Log.warning(f"Could not remove artifact {path.name}: {exc}")
