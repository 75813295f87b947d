"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Sequence

import fitz  # PyMuPDF
import pytest
from PIL import Image

from bookocr.config import RunConfig, Settings
from bookocr.errors import OcrDegraded
from bookocr.models import SplitLayout, SplitOutput, TextLayer
from bookocr.tools import HocrRecognizer, SplitterFailed, UnpaperSplitter, text_layer_path

HOCR_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN"
    "http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="en" lang="en">
 <head><title></title></head>
 <body>
  <div class='ocr_page' id='page_1' title='image "page.png"; bbox 0 0 {width} {height}; ppageno 0'>
   <span class='ocr_line' id='line_1_1' title="bbox 5 5 60 25">
{words}
   </span>
  </div>
 </body>
</html>
"""


def make_hocr(words: Sequence[tuple[str, int, int, int, int]], width=200, height=300) -> str:
    """Build Tesseract-style hOCR markup for the given (text, x0, y0, x1, y1) words."""
    spans = "\n".join(
        f"    <span class='ocrx_word' id='word_1_{i}' "
        f"title='bbox {x0} {y0} {x1} {y1}; x_wconf 95'>{text}</span>"
        for i, (text, x0, y0, x1, y1) in enumerate(words, start=1)
    )
    return HOCR_TEMPLATE.format(words=spans, width=width, height=height)


def make_tiff(path: Path, width: int, height: int, pages: int = 1, dpi: int = 50) -> Path:
    """Write a (multi-page) grayscale TIFF."""
    frames = [Image.new("L", (width, height), color=255 - 20 * i) for i in range(pages)]
    frames[0].save(path, format="TIFF", save_all=pages > 1, append_images=frames[1:], dpi=(dpi, dpi))
    return path


def make_truncated_tiff(path: Path, width: int = 200, height: int = 300) -> Path:
    """Write a TIFF whose header is intact but whose pixel data is cut short."""
    make_tiff(path, width, height)
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])
    return path


def make_pdf(path: Path, pages: int, width: float = 200, height: float = 300) -> Path:
    """Write a PDF with labelled pages."""
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 40), f"page {i + 1}", fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


class FakeSplitter(UnpaperSplitter):
    """Stands in for unpaper: crops the bitmap into halves with Pillow."""

    def __init__(self, fail_with: int = None):
        super().__init__(dpi=50)
        self.calls: list[tuple[str, SplitLayout]] = []
        self.fail_with = fail_with

    def split(self, source: Path, outputs: Sequence[Path], layout: SplitLayout) -> SplitOutput:
        self.calls.append((source.name, layout))
        if self.fail_with is not None:
            # leave a partial output behind like a crashing tool would
            Path(outputs[0]).write_bytes(b"partial")
            raise SplitterFailed("unpaper exited with status %d" % self.fail_with, self.fail_with)

        with Image.open(source) as image:
            width, height = image.size
            if layout == SplitLayout.ONE_PAGE:
                image.save(outputs[0], format="PPM")
            else:
                image.crop((0, 0, width // 2, height)).save(outputs[0], format="PPM")
                image.crop((width // 2, 0, width, height)).save(outputs[1], format="PPM")

        return SplitOutput(layout=layout, output_paths=[str(p) for p in outputs])


class FakeRecognizer(HocrRecognizer):
    """Stands in for Tesseract: 'recognizes' the sub-page's own name."""

    def __init__(self, degrade: Sequence[str] = ()):
        super().__init__()
        self.degrade = set(degrade)
        self.calls: list[str] = []

    def recognize(self, image_path: Path, output_base: Path) -> TextLayer:
        self.calls.append(output_base.name)
        if output_base.name in self.degrade:
            raise OcrDegraded(output_base.name, "Tesseract exited with status 1")

        # one word spanning most of the image, so it stays on the page
        with Image.open(image_path) as image:
            width, height = image.size
        box = (output_base.name, 1, 1, width - 1, max(height // 3, 3))

        path = text_layer_path(output_base)
        path.write_text(make_hocr([box], width, height), encoding="utf-8")
        return TextLayer(path=str(path), word_count=1)


@pytest.fixture
def input_dir(tmp_path):
    """Create a temporary directory for scanned inputs."""
    scans = tmp_path / "scans"
    scans.mkdir()
    return scans


@pytest.fixture
def caller_dir(tmp_path):
    """Create a temporary directory receiving the output."""
    out_dir = tmp_path / "output"
    out_dir.mkdir()
    return out_dir


@pytest.fixture
def run_config():
    """Low-DPI run configuration to keep rasters small."""
    return RunConfig(dpi=50)


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(_env_file=None)
