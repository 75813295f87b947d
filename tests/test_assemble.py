"""Tests for the assemble stage and the PDF join adapter."""

from pathlib import Path
from unittest.mock import MagicMock

import fitz  # PyMuPDF
import pytest

from bookocr.errors import AssembleError
from bookocr.models import JoinedDocument
from bookocr.pipeline.stage_assemble import Assembler, natural_sort_key, sorted_artifacts
from bookocr.pipeline.staging import open_staging_area
from bookocr.tools import PdfJoiner


def write_page_pdf(path: Path, label: str, width: float = 200, height: float = 300) -> Path:
    doc = fitz.open()
    page = doc.new_page(width=width, height=height)
    page.insert_text((20, 40), label, fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


def page_labels(path: Path) -> list[str]:
    with fitz.open(str(path)) as doc:
        return [page.get_text().strip() for page in doc]


@pytest.fixture
def staging(tmp_path):
    with open_staging_area(tmp_path / ".book") as area:
        yield area


class TestNaturalSortKey:
    """Tests for the join order."""

    def test_numbers_compare_numerically(self):
        names = ["doc10-A.pdf", "doc2-A.pdf", "doc1-A.pdf"]

        ordered = sorted_artifacts([Path(n) for n in names])

        assert [p.name for p in ordered] == ["doc1-A.pdf", "doc2-A.pdf", "doc10-A.pdf"]

    def test_left_page_before_right(self):
        ordered = sorted_artifacts([Path("s-B.pdf"), Path("s-A.pdf")])

        assert [p.name for p in ordered] == ["s-A.pdf", "s-B.pdf"]

    def test_base_name_before_numbered_siblings(self):
        """scan.tif, scan1.tif, scan2.tif keep their scanner order."""
        names = ["scan2-A.pdf", "scan1-B.pdf", "scan-A.pdf", "scan1-A.pdf", "scan-B.pdf"]

        ordered = sorted_artifacts([Path(n) for n in names])

        assert [p.name for p in ordered] == [
            "scan-A.pdf", "scan-B.pdf", "scan1-A.pdf", "scan1-B.pdf", "scan2-A.pdf",
        ]

    def test_matches_intake_filename_order(self):
        names = ["p-10-A.pdf", "a1-A.pdf", "scan-A.pdf", "p-9-A.pdf", "a-A.pdf", "Scan-A.pdf"]

        ordered = sorted_artifacts([Path(n) for n in names])

        assert [p.name for p in ordered] == [
            "Scan-A.pdf", "a-A.pdf", "a1-A.pdf", "p-9-A.pdf", "p-10-A.pdf", "scan-A.pdf",
        ]

    def test_plain_names_sort_lexically(self):
        assert natural_sort_key(Path("a-A.pdf")) < natural_sort_key(Path("b-A.pdf"))

    def test_mixed_digit_and_text_parts(self):
        """Names that differ in kind at the same position still compare."""
        ordered = sorted_artifacts([Path("page-A.pdf"), Path("01-A.pdf")])

        assert [p.name for p in ordered] == ["01-A.pdf", "page-A.pdf"]


class TestPdfJoiner:
    """Tests for the join adapter."""

    def test_keeps_landscape_pages_unrotated(self, tmp_path):
        portrait = write_page_pdf(tmp_path / "a.pdf", "portrait")
        landscape = write_page_pdf(tmp_path / "b.pdf", "landscape", width=300, height=200)

        joined = PdfJoiner().join([portrait, landscape], tmp_path / "out.pdf")

        assert joined.page_count == 2
        with fitz.open(joined.path) as doc:
            assert doc[1].rotation == 0
            assert doc[1].rect.width == pytest.approx(300)
            assert doc[1].rect.height == pytest.approx(200)

    def test_nothing_to_join_writes_nothing(self, tmp_path):
        joined = PdfJoiner().join([], tmp_path / "out.pdf")

        assert joined.page_count == 0
        assert not (tmp_path / "out.pdf").exists()


class TestAssembler:
    """Tests for joining artifacts into the output file."""

    def test_joins_in_natural_order(self, staging, caller_dir):
        for name in ["doc10-A", "doc2-B", "doc2-A", "doc1-A"]:
            write_page_pdf(staging.file(f"{name}.pdf"), name)

        joined = Assembler().assemble(staging, "book.pdf", caller_dir)

        assert joined.path_obj == caller_dir / "book.pdf"
        assert joined.page_count == 4
        assert page_labels(caller_dir / "book.pdf") == ["doc1-A", "doc2-A", "doc2-B", "doc10-A"]
        assert not staging.file(".joined.pdf").exists()

    def test_replaces_existing_output(self, staging, caller_dir):
        (caller_dir / "book.pdf").write_bytes(b"old")
        write_page_pdf(staging.file("scan-A.pdf"), "new")

        Assembler().assemble(staging, "book.pdf", caller_dir)

        assert page_labels(caller_dir / "book.pdf") == ["new"]

    def test_no_artifacts(self, staging, caller_dir):
        with pytest.raises(AssembleError) as exc_info:
            Assembler().assemble(staging, "book.pdf", caller_dir)

        assert exc_info.value.exit_code == 2
        assert not (caller_dir / "book.pdf").exists()

    def test_join_failure(self, staging, caller_dir):
        write_page_pdf(staging.file("scan-A.pdf"), "page")
        joiner = MagicMock(spec=PdfJoiner)
        joiner.join.side_effect = RuntimeError("cannot open")

        with pytest.raises(AssembleError, match="cannot open"):
            Assembler(joiner=joiner).assemble(staging, "book.pdf", caller_dir)

        assert not (caller_dir / "book.pdf").exists()

    def test_page_count_mismatch(self, staging, caller_dir):
        write_page_pdf(staging.file("scan-A.pdf"), "a")
        write_page_pdf(staging.file("scan-B.pdf"), "b")
        joiner = MagicMock(spec=PdfJoiner)

        def short_join(paths, output_path):
            write_page_pdf(output_path, "only one")
            return JoinedDocument(path=str(output_path), page_count=1)

        joiner.join.side_effect = short_join

        with pytest.raises(AssembleError, match="expected 2"):
            Assembler(joiner=joiner).assemble(staging, "book.pdf", caller_dir)
