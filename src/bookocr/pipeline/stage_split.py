"""Split Stage - Deskew, crop and split canonical pages into sub-pages.

Each canonical page is converted to a PBM bitmap, handed to the page
splitter with a one- or two-page layout, and replaced in the staging area
by ``{base}-A.pbm`` (and ``{base}-B.pbm`` for double pages).
"""

import logging
from pathlib import Path

from bookocr.errors import SplitError
from bookocr.models import CanonicalPage, Orientation, SplitLayout, SubPage
from bookocr.pipeline.stage_orient import resolve_layout
from bookocr.tools import ImageConverter, SplitterFailed, UnpaperSplitter

logger = logging.getLogger(__name__)

SIDES = ("A", "B")


def sub_page_names(base_name: str, layout: SplitLayout) -> list[str]:
    """Base names of the sub-pages for a layout, left page first."""
    return [f"{base_name}-{side}" for side in SIDES[: layout.value]]


class PageSplitter:
    """Drives the page splitter for one canonical page at a time."""

    def __init__(
        self,
        dpi: int = 300,
        converter: ImageConverter = None,
        splitter: UnpaperSplitter = None,
    ):
        """Initialize page splitter stage.

        Args:
            dpi: Run resolution.
            converter: Image conversion service (bitmap pre-conversion).
            splitter: Page splitter service.
        """
        self.dpi = dpi
        self.converter = converter or ImageConverter(dpi=dpi)
        self.splitter = splitter or UnpaperSplitter(dpi=dpi)

    def split(self, page: CanonicalPage, orientation: Orientation) -> list[SubPage]:
        """Split a canonical page according to its orientation.

        On success the canonical page and its bitmap are deleted.

        Args:
            page: Page to split.
            orientation: Decision from the orientation stage.

        Returns:
            Sub-pages in left-then-right order.

        Raises:
            SplitError: If the page cannot be converted to a bitmap or the
                splitter fails; partial outputs are removed.
        """
        source = page.image_path_obj
        layout = resolve_layout(orientation, source.name)
        names = sub_page_names(page.base_name, layout)

        bitmap = source.with_name(f"{page.base_name}.pbm")
        outputs = [source.with_name(f"{name}.pbm") for name in names]

        logger.info("%s: 'tif' -> 'pbm'", source.name)
        try:
            self.converter.to_bitmap(source, bitmap)
        except (OSError, ValueError) as exc:
            self._discard([bitmap])
            raise SplitError(
                page.base_name, f"cannot convert {source.name} to a bitmap: {exc}"
            ) from exc

        logger.info("%s: calling page splitter with %d output page(s)", bitmap.name, layout.value)
        try:
            result = self.splitter.split(bitmap, outputs, layout)
        except SplitterFailed as exc:
            self._discard(outputs + [bitmap])
            raise SplitError(page.base_name, exc.reason, exc.returncode) from exc

        bitmap.unlink()
        source.unlink()

        return [
            SubPage(
                image_path=str(path),
                base_name=name,
                parent_base_name=page.base_name,
                side=name[-1],
            )
            for name, path in zip(names, result.output_path_objs)
        ]

    @staticmethod
    def _discard(paths: list[Path]) -> None:
        for path in paths:
            path.unlink(missing_ok=True)
