"""Adapters for the external services the pipeline drives.

Each adapter is a thin pass-through that returns a typed handle from
``bookocr.models`` describing what it wrote:

- image_convert - PDF rasterization and raster re-encoding (PyMuPDF, Pillow)
- page_splitter - deskew/crop/split of a sheet (unpaper)
- ocr - hOCR text layer (Tesseract via pytesseract)
- text_layer - image + hOCR into a searchable PDF page (PyMuPDF)
- pdf_join - concatenation without auto-rotation (PyMuPDF)
"""

from .base import require_tool, run_tool
from .image_convert import ImageConverter
from .ocr import HocrRecognizer, text_layer_path
from .page_splitter import SplitterFailed, UnpaperSplitter
from .pdf_join import PdfJoiner
from .text_layer import TextLayerEmbedder

__all__ = [
    "require_tool",
    "run_tool",
    "ImageConverter",
    "HocrRecognizer",
    "text_layer_path",
    "SplitterFailed",
    "UnpaperSplitter",
    "PdfJoiner",
    "TextLayerEmbedder",
]
