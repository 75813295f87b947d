"""Text layer embedding service.

Builds a one-page PDF whose visible content is the page image and whose
text is invisible (render mode 3), positioned over the words found by OCR,
so the page can be searched and selected.
"""

import logging
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree

import fitz  # PyMuPDF
from PIL import Image

from bookocr.models import PdfPage
from bookocr.tools.hocr import HocrWord, parse_hocr_words

logger = logging.getLogger(__name__)

INVISIBLE = 3  # PDF text render mode: neither fill nor stroke
FONT_NAME = "helv"


class TextLayerEmbedder:
    """Combines a page image and an hOCR layer into a PDF page."""

    def __init__(self, dpi: int = 300):
        """Initialize embedder.

        Args:
            dpi: Fallback resolution when the image does not record one.
        """
        self.dpi = dpi

    def _page_geometry(self, image_path: Path) -> tuple[int, int, float]:
        with Image.open(image_path) as image:
            width, height = image.size
            dpi = image.info.get("dpi", (self.dpi, self.dpi))[0] or self.dpi
        return width, height, float(dpi)

    def _place_word(self, page: fitz.Page, word: HocrWord, scale: float) -> bool:
        """Write one invisible word stretched over its bounding box."""
        x0 = word.x0 * scale
        x1 = word.x1 * scale
        y1 = word.y1 * scale
        box_height = word.height * scale
        box_width = word.width * scale

        fontsize = max(box_height * 0.85, 1.0)
        text_width = fitz.get_text_length(word.text, fontname=FONT_NAME, fontsize=fontsize)
        if text_width <= 0:
            return False

        baseline = fitz.Point(x0, y1 - box_height * 0.15)
        stretch = fitz.Matrix(box_width / text_width, 1)
        page.insert_text(
            baseline,
            word.text,
            fontname=FONT_NAME,
            fontsize=fontsize,
            render_mode=INVISIBLE,
            morph=(baseline, stretch),
        )
        return True

    def embed(
        self,
        image_path: Path,
        text_layer_path: Optional[Path],
        output_path: Path,
    ) -> PdfPage:
        """Write a one-page searchable PDF.

        Args:
            image_path: Page image (JPEG) shown on the page.
            text_layer_path: hOCR file, or None for an image-only page.
            output_path: Destination PDF.

        Returns:
            PdfPage with the number of words placed on the page.
        """
        width, height, dpi = self._page_geometry(image_path)
        scale = 72.0 / dpi

        words: list[HocrWord] = []
        if text_layer_path is not None and text_layer_path.exists():
            try:
                words = parse_hocr_words(text_layer_path.read_text(encoding="utf-8"))
            except ElementTree.ParseError as exc:
                logger.warning("Ignoring unreadable text layer %s: %s", text_layer_path.name, exc)

        pdf_doc = fitz.open()
        try:
            page = pdf_doc.new_page(width=width * scale, height=height * scale)
            page.insert_image(page.rect, filename=str(image_path))

            placed = sum(1 for word in words if self._place_word(page, word, scale))

            pdf_doc.save(str(output_path), garbage=3, deflate=True)
        finally:
            pdf_doc.close()

        return PdfPage(path=str(output_path), words_placed=placed)
