from pathlib import Path

import pytest

from docarchive.archival.scratch import ScratchSpace, discard_artifact, display_slug


class TestDisplaySlug:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("letter.pdf", "letter"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\clerk\\My Letter (1).docx", "My-Letter-1"),
            ("", "document"),
            ("....pdf", "document"),
        ],
    )
    def test_reduces_untrusted_names(self, name: str, expected: str) -> None:
        assert display_slug(name) == expected

    def test_slug_length_capped(self) -> None:
        assert len(display_slug("a" * 200 + ".pdf")) == 40


class TestScratchSpace:
    def test_allocates_paths_inside_roots(self, tmp_path: Path) -> None:
        space = ScratchSpace(tmp_path / "temp", tmp_path / "converted")
        paths = space.allocate("../../../evil name.pdf", ".pdf")

        assert paths.workdir.parent == tmp_path / "temp"
        assert paths.input_path.parent == paths.workdir
        assert paths.output_path.parent == tmp_path / "converted"
        assert paths.output_path.name == f"{paths.request_id}_evil-name.pdf"

    def test_concurrent_allocations_do_not_collide(self, tmp_path: Path) -> None:
        space = ScratchSpace(tmp_path / "temp", tmp_path / "converted")
        first = space.allocate("same.pdf", ".pdf")
        second = space.allocate("same.pdf", ".pdf")
        assert first.workdir != second.workdir
        assert first.output_path != second.output_path

    def test_session_removes_workdir(self, tmp_path: Path) -> None:
        space = ScratchSpace(tmp_path / "temp", tmp_path / "converted")
        with space.session("a.pdf", ".pdf", "req-1") as paths:
            paths.input_path.write_bytes(b"data")
            paths.output_path.write_bytes(b"%PDF")
        assert not paths.workdir.exists()
        assert paths.output_path.exists()

    def test_failed_session_discards_output(self, tmp_path: Path) -> None:
        space = ScratchSpace(tmp_path / "temp", tmp_path / "converted")
        with pytest.raises(RuntimeError):
            with space.session("a.pdf", ".pdf") as paths:
                paths.output_path.write_bytes(b"%PDF partial")
                raise RuntimeError("renderer crashed")
        assert not paths.output_path.exists()
        assert not paths.workdir.exists()

    def test_discard_missing_artifact_is_noop(self, tmp_path: Path) -> None:
        discard_artifact(tmp_path / "missing.pdf")
