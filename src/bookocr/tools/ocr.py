"""OCR service - Tesseract hOCR output via pytesseract.

Produces a positioned text layer keyed to the image's pixel geometry.
"""

import logging
from pathlib import Path
from xml.etree import ElementTree

import pytesseract

from bookocr.errors import OcrDegraded, ToolNotFoundError
from bookocr.models import TextLayer
from bookocr.tools.hocr import parse_hocr_words

logger = logging.getLogger(__name__)

TEXT_LAYER_SUFFIX = ".pdf.html"


def text_layer_path(output_base: Path) -> Path:
    """hOCR file written for an output base, e.g. ``scan-A.pdf.html``."""
    return output_base.with_name(output_base.name + TEXT_LAYER_SUFFIX)


class HocrRecognizer:
    """Runs Tesseract over a page image and writes hOCR markup."""

    def __init__(
        self,
        language: str = "eng",
        psm: int = 1,
        timeout: int = 0,
    ):
        """Initialize recognizer.

        Args:
            language: Tesseract language code(s), e.g. 'eng', 'eng+deu'.
            psm: Page segmentation mode (1 = automatic with OSD).
            timeout: Seconds before Tesseract is killed, 0 disables.
        """
        self.language = language
        self.psm = psm
        self.timeout = timeout

    def _build_config(self) -> str:
        return f"--psm {self.psm}"

    def recognize(self, image_path: Path, output_base: Path) -> TextLayer:
        """Recognize text and write ``{output_base}.pdf.html``.

        Args:
            image_path: Grayscale page image.
            output_base: Path prefix for the text layer file.

        Returns:
            TextLayer with the number of words found. A zero count means
            Tesseract ran but recognized nothing.

        Raises:
            OcrDegraded: If Tesseract failed or its output is unusable.
            ToolNotFoundError: If Tesseract is not installed.
        """
        output_path = text_layer_path(output_base)

        try:
            hocr = pytesseract.image_to_pdf_or_hocr(
                str(image_path),
                lang=self.language,
                config=self._build_config(),
                extension="hocr",
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise ToolNotFoundError("tesseract") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            # pytesseract reports timeouts as RuntimeError
            raise OcrDegraded(output_base.name, str(exc).strip()) from exc

        if not hocr:
            raise OcrDegraded(output_base.name, "Tesseract produced no output")

        markup = hocr.decode("utf-8", errors="replace")
        try:
            words = parse_hocr_words(markup)
        except ElementTree.ParseError as exc:
            raise OcrDegraded(output_base.name, f"unreadable hOCR: {exc}") from exc

        output_path.write_text(markup, encoding="utf-8")
        logger.debug("%s: %d words recognized", output_base.name, len(words))

        return TextLayer(path=str(output_path), word_count=len(words))
