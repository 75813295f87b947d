"""Image conversion service.

Rasterizes PDFs with PyMuPDF (fitz) and handles every other raster
conversion with Pillow: TIFF page counting and splitting, header-only size
probing, and the bitmap, grayscale and JPEG re-encodings used by the
later stages.
"""

import logging
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image, ImageOps, TiffImagePlugin, UnidentifiedImageError

from bookocr.models import RasterContainer

logger = logging.getLogger(__name__)


class ImageConverter:
    """Raster conversions at a fixed DPI."""

    def __init__(self, dpi: int = 300, jpeg_quality: int = 95):
        """Initialize converter.

        Args:
            dpi: Resolution written into every produced raster.
            jpeg_quality: Quality for the lossy embedding image (1-95).
        """
        self.dpi = dpi
        self.jpeg_quality = jpeg_quality

    def rasterize_pdf(self, pdf_path: Path, output_path: Path) -> RasterContainer:
        """Render every page of a PDF into one multi-page TIFF.

        Pages are rendered and appended one at a time, so memory stays
        bounded by a single page regardless of the document length.

        Args:
            pdf_path: Source PDF.
            output_path: Destination .tif path.

        Returns:
            RasterContainer with the page count of the written TIFF.
        """
        zoom = self.dpi / 72.0
        matrix = fitz.Matrix(zoom, zoom)

        pdf_doc = fitz.open(str(pdf_path))
        try:
            with TiffImagePlugin.AppendingTiffWriter(str(output_path), True) as tiff:
                for page_num in range(len(pdf_doc)):
                    pixmap = pdf_doc[page_num].get_pixmap(matrix=matrix, alpha=False)
                    image = Image.frombytes(
                        "RGB", (pixmap.width, pixmap.height), pixmap.samples
                    )
                    image.save(tiff, format="TIFF", dpi=(self.dpi, self.dpi))
                    tiff.newFrame()
                    logger.debug(
                        "Rendered page %d of %s (%dx%d)",
                        page_num + 1,
                        pdf_path.name,
                        pixmap.width,
                        pixmap.height,
                    )
        finally:
            pdf_doc.close()

        return RasterContainer(path=str(output_path), page_count=self.page_count(output_path))

    def page_count(self, path: Path) -> int:
        """Count the pages of a TIFF container.

        Returns:
            Number of frames, or 0 if the file is not a readable TIFF.
        """
        try:
            with Image.open(path) as image:
                if image.format != "TIFF":
                    return 0
                return getattr(image, "n_frames", 1)
        except (UnidentifiedImageError, OSError) as exc:
            logger.debug("Cannot read %s as TIFF: %s", path, exc)
            return 0

    def inspect(self, path: Path) -> RasterContainer:
        """Wrap a TIFF in a handle carrying its page count."""
        return RasterContainer(path=str(path), page_count=self.page_count(path))

    def split_container(self, container: RasterContainer, base_name: str) -> list[Path]:
        """Split a multi-page TIFF into numbered single-page files.

        Outputs are written next to the container as ``{base_name}1.tif``,
        ``{base_name}2.tif``, ... The container itself is left in place.

        Args:
            container: Multi-page TIFF to split.
            base_name: Prefix for the output files.

        Returns:
            Output paths in page order.
        """
        source = container.path_obj
        outputs = []
        with Image.open(source) as image:
            dpi = image.info.get("dpi", (self.dpi, self.dpi))
            for index in range(container.page_count):
                image.seek(index)
                output_path = source.parent / f"{base_name}{index + 1}.tif"
                image.save(output_path, format="TIFF", dpi=dpi)
                outputs.append(output_path)
        return outputs

    def probe_size(self, path: Path) -> tuple[int, int]:
        """Read (width, height) in pixels from the image header.

        Pillow opens images lazily, so no pixel data is decoded here.
        """
        with Image.open(path) as image:
            return image.size

    def to_bitmap(self, source: Path, output_path: Path) -> Path:
        """Convert a raster into a 1-bit PBM for the page splitter."""
        with Image.open(source) as image:
            bitmap = image.convert("L").convert("1", dither=Image.Dither.NONE)
            bitmap.save(output_path, format="PPM")
        return output_path

    def to_normalized_gray(self, source: Path, output_path: Path) -> Path:
        """Stretch levels and write an 8-bit grayscale PNG at the configured DPI."""
        with Image.open(source) as image:
            gray = ImageOps.autocontrast(image.convert("L"), cutoff=(2, 1))
            gray.save(output_path, format="PNG", dpi=(self.dpi, self.dpi))
        return output_path

    def to_jpeg(self, source: Path, output_path: Path) -> Path:
        """Re-encode a raster as a high-quality JPEG for embedding."""
        with Image.open(source) as image:
            image.convert("L").save(
                output_path,
                format="JPEG",
                quality=self.jpeg_quality,
                dpi=(self.dpi, self.dpi),
            )
        return output_path
