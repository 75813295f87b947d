"""PDF join service.

Pages are copied as they are. Nothing here rotates oversized or landscape
pages; each page keeps the orientation it was produced with.
"""

import logging
from pathlib import Path
from typing import Sequence

import fitz  # PyMuPDF

from bookocr.models import JoinedDocument

logger = logging.getLogger(__name__)


class PdfJoiner:
    """Concatenates PDFs in the given order."""

    def join(self, pdf_paths: Sequence[Path], output_path: Path) -> JoinedDocument:
        """Join PDFs into one document.

        Args:
            pdf_paths: Inputs, in output order.
            output_path: Destination PDF.

        Returns:
            JoinedDocument with the page count of the written file.
        """
        joined = fitz.open()
        try:
            for pdf_path in pdf_paths:
                with fitz.open(str(pdf_path)) as source:
                    joined.insert_pdf(source)
                logger.debug("Appended %s", pdf_path.name)

            page_count = len(joined)
            if page_count:
                joined.save(str(output_path), garbage=3, deflate=True)
        finally:
            joined.close()

        return JoinedDocument(path=str(output_path), page_count=page_count)
