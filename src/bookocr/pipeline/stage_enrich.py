"""Enrichment Stage - Turn each sub-page into a searchable one-page PDF.

Strictly sequential per sub-page:

1. normalize levels, 8-bit grayscale PNG   ``normal-{base}.png``
2. OCR into an hOCR text layer             ``{base}.pdf.html``
3. re-encode as high-quality JPEG          ``normal-{base}.jpg``
4. embed image and text layer into         ``{base}.pdf``

Each intermediate is deleted as soon as the next step has consumed it, and
all of them are gone when ``enrich`` returns or raises. OCR problems never
fail the run: the page is embedded with whatever text layer exists.
"""

import logging
from pathlib import Path
from typing import Optional

from bookocr.errors import EnrichError, OcrDegraded
from bookocr.models import EnrichmentArtifact, OcrStatus, SubPage
from bookocr.tools import HocrRecognizer, ImageConverter, TextLayerEmbedder, text_layer_path

logger = logging.getLogger(__name__)


class Enricher:
    """Runs the conversion, OCR and embedding steps for one sub-page."""

    def __init__(
        self,
        dpi: int = 300,
        converter: ImageConverter = None,
        recognizer: HocrRecognizer = None,
        embedder: TextLayerEmbedder = None,
    ):
        """Initialize enricher.

        Args:
            dpi: Run resolution.
            converter: Image conversion service.
            recognizer: OCR service.
            embedder: Text layer embedding service.
        """
        self.dpi = dpi
        self.converter = converter or ImageConverter(dpi=dpi)
        self.recognizer = recognizer or HocrRecognizer()
        self.embedder = embedder or TextLayerEmbedder(dpi=dpi)

    def enrich(self, sub_page: SubPage) -> EnrichmentArtifact:
        """Produce the searchable PDF for one sub-page.

        The sub-page bitmap is consumed and deleted.

        Args:
            sub_page: Output of the split stage.

        Returns:
            EnrichmentArtifact, degraded if OCR yielded no usable text.

        Raises:
            EnrichError: If an image cannot be read, converted or embedded.
        """
        source = sub_page.image_path_obj
        base = sub_page.base_name
        workdir = source.parent

        normalized = workdir / f"normal-{base}.png"
        compressed = workdir / f"normal-{base}.jpg"
        hocr_path = text_layer_path(workdir / base)
        output = workdir / f"{base}.pdf"

        try:
            logger.info("%s: convert to normalized 'png' for OCR", source.name)
            self.converter.to_normalized_gray(source, normalized)
            source.unlink()

            logger.info("%s: running OCR", normalized.name)
            ocr_status, word_count, reason = self._recognize(normalized, workdir / base)

            logger.info("%s: 'png' -> 'jpg' for embedding", normalized.name)
            self.converter.to_jpeg(normalized, compressed)
            normalized.unlink()

            logger.info("%s: combining image and OCR text layer", compressed.name)
            self.embedder.embed(
                compressed,
                hocr_path if hocr_path.exists() else None,
                output,
            )
        except (OSError, ValueError, RuntimeError) as exc:
            # fitz reports unreadable images and write failures as RuntimeError
            output.unlink(missing_ok=True)
            raise EnrichError(base, f"{source.name}: {exc}") from exc
        finally:
            for intermediate in (source, normalized, compressed, hocr_path):
                intermediate.unlink(missing_ok=True)

        return EnrichmentArtifact(
            pdf_path=str(output),
            base_name=base,
            ocr_status=ocr_status,
            word_count=word_count,
            degraded_reason=reason,
        )

    def _recognize(
        self,
        image: Path,
        output_base: Path,
    ) -> tuple[OcrStatus, int, Optional[str]]:
        try:
            layer = self.recognizer.recognize(image, output_base)
        except OcrDegraded as exc:
            logger.warning("%s", exc.message)
            return OcrStatus.DEGRADED, 0, exc.reason

        if layer.word_count == 0:
            logger.warning("OCR degraded for %s: no text recognized", output_base.name)
            return OcrStatus.DEGRADED, 0, "no text recognized"

        return OcrStatus.COMPLETE, layer.word_count, None
