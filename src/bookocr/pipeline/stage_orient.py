"""Orientation Stage - Decide whether a sheet holds one page or two.

Heuristic on the height/width ratio of the raster:

    ratio <= 0.8  -> landscape, presumably two pages side by side (double)
    ratio >= 1.2  -> portrait, presumably one page (single)
    otherwise     -> ambiguous

The classifier reports ``ambiguous`` as its own outcome. Callers decide what
to do with it; ``resolve_layout`` treats it as double and logs a warning,
since a near-square single page cannot be told apart from two narrow ones.
"""

import logging

from bookocr.models import Orientation, SplitLayout

logger = logging.getLogger(__name__)

DOUBLE_MAX_RATIO = 0.8
SINGLE_MIN_RATIO = 1.2


def classify(width: int, height: int) -> Orientation:
    """Classify a raster by its pixel dimensions.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Orientation decision.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid raster size {width}x{height}")

    ratio = height / width
    if ratio <= DOUBLE_MAX_RATIO:
        return Orientation.DOUBLE
    if ratio >= SINGLE_MIN_RATIO:
        return Orientation.SINGLE
    return Orientation.AMBIGUOUS


def resolve_layout(orientation: Orientation, page_name: str = "") -> SplitLayout:
    """Map an orientation decision to the splitter layout.

    Ambiguous pages are split as double pages.
    """
    if orientation == Orientation.SINGLE:
        logger.info("%s in portrait mode, assuming it to be single-paged", page_name)
        return SplitLayout.ONE_PAGE

    if orientation == Orientation.AMBIGUOUS:
        logger.warning(
            "%s has ambiguous orientation, assuming it to be double-paged", page_name
        )
    else:
        logger.info("%s in landscape mode, assuming it to be double-paged", page_name)
    return SplitLayout.TWO_PAGES
