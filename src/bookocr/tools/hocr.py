"""Minimal hOCR reader.

Only word boxes are needed to place an invisible text layer, so lines,
paragraphs and confidences beyond ``x_wconf`` are ignored.
"""

import re
from typing import Optional
from xml.etree import ElementTree

from bookocr.models import BaseIRModel

_BBOX_RE = re.compile(r"bbox\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")
_WCONF_RE = re.compile(r"x_wconf\s+(\d+)")


class HocrWord(BaseIRModel):
    """One recognized word in image pixel coordinates."""

    text: str
    x0: int
    y0: int
    x1: int
    y1: int
    confidence: Optional[int] = None

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0


def parse_hocr_words(markup: str) -> list[HocrWord]:
    """Extract word boxes from hOCR markup.

    Args:
        markup: hOCR document as produced by Tesseract.

    Returns:
        Words in document order. Empty words and degenerate boxes are dropped.

    Raises:
        ElementTree.ParseError: If the markup is not well-formed XML.
    """
    root = ElementTree.fromstring(markup)

    words = []
    for element in root.iter():
        if "ocrx_word" not in (element.get("class") or "").split():
            continue

        text = "".join(element.itertext()).strip()
        bbox = _BBOX_RE.search(element.get("title") or "")
        if not text or bbox is None:
            continue

        x0, y0, x1, y1 = (int(v) for v in bbox.groups())
        if x1 <= x0 or y1 <= y0:
            continue

        wconf = _WCONF_RE.search(element.get("title") or "")
        words.append(
            HocrWord(
                text=text,
                x0=x0,
                y0=y0,
                x1=x1,
                y1=y1,
                confidence=int(wconf.group(1)) if wconf else None,
            )
        )

    return words
