"""Assemble Stage - Join the per-page PDFs into the final document.

Artifacts are joined by page base name, then side, with digit runs compared
as numbers: ``doc2-A.pdf`` comes before ``doc10-A.pdf`` and ``scan-A.pdf``
before ``scan1-A.pdf``, regardless of the order in which they were produced.
The join never rotates pages.
"""

import logging
import re
import shutil
from pathlib import Path

from bookocr.errors import AssembleError
from bookocr.models import JoinedDocument
from bookocr.pipeline.stage_split import SIDES
from bookocr.pipeline.staging import ScopedStagingArea
from bookocr.tools import PdfJoiner

logger = logging.getLogger(__name__)

JOINED_NAME = ".joined.pdf"

_DIGITS_RE = re.compile(r"(\d+)")


def _natural_parts(name: str) -> tuple:
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGITS_RE.split(name)
        if part
    )


def natural_sort_key(path: Path) -> tuple:
    """Sort key for ``{page_base}-{side}.pdf`` artifacts.

    Compares the page base name with digit runs taken numerically, then the
    side. A base name sorts before any longer name it prefixes, so
    ``scan-A`` precedes ``scan1-A``, just as ``scan.tif`` precedes
    ``scan1.tif`` at intake.
    """
    stem = Path(path).stem
    base, sep, side = stem.rpartition("-")
    if not sep or side not in SIDES:
        base, side = stem, ""
    return (_natural_parts(base), side)


def sorted_artifacts(paths: list[Path]) -> list[Path]:
    """Artifacts in join order."""
    return sorted(paths, key=natural_sort_key)


class Assembler:
    """Joins enrichment artifacts and relocates the result."""

    def __init__(self, joiner: PdfJoiner = None):
        self.joiner = joiner or PdfJoiner()

    def assemble(
        self,
        staging: ScopedStagingArea,
        output_name: str,
        caller_dir: Path,
    ) -> JoinedDocument:
        """Join every artifact in the staging area into ``caller_dir/output_name``.

        An existing file at the destination is replaced.

        Raises:
            AssembleError: If there is nothing to join or the join failed.
        """
        artifacts = sorted_artifacts(
            [p for p in staging.files("*.pdf") if p.name != JOINED_NAME]
        )
        if not artifacts:
            raise AssembleError("No single-page PDFs to join")

        logger.info("Joining %d single-page PDFs", len(artifacts))
        joined_path = staging.file(JOINED_NAME)
        try:
            joined = self.joiner.join(artifacts, joined_path)
        except (RuntimeError, OSError) as exc:
            raise AssembleError(f"Joining PDFs failed: {exc}") from exc

        if joined.page_count == 0 or not joined_path.exists():
            raise AssembleError("Joining PDFs produced no output")
        if joined.page_count != len(artifacts):
            raise AssembleError(
                f"Joined document has {joined.page_count} pages, expected {len(artifacts)}"
            )

        destination = Path(caller_dir) / output_name
        shutil.move(str(joined_path), str(destination))
        logger.info("Wrote %s (%d pages)", destination, joined.page_count)

        return JoinedDocument(path=str(destination), page_count=joined.page_count)
