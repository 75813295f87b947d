"""Typed handles returned by the external tool adapters.

Each adapter call returns a record naming exactly what it produced, so the
next stage reads paths from the handle instead of rebuilding them from
naming conventions.
"""

from pathlib import Path

from pydantic import Field

from .base import BaseIRModel, SplitLayout


class RasterContainer(BaseIRModel):
    """A TIFF file in the staging area with its inspected page count."""

    path: str
    page_count: int = Field(..., ge=0)

    @property
    def path_obj(self) -> Path:
        return Path(self.path)

    @property
    def is_valid(self) -> bool:
        """A container reporting zero pages is not a usable TIFF."""
        return self.page_count > 0


class SplitOutput(BaseIRModel):
    """Files written by the page splitter for one input bitmap."""

    layout: SplitLayout
    output_paths: list[str]

    @property
    def output_path_objs(self) -> list[Path]:
        return [Path(p) for p in self.output_paths]


class TextLayer(BaseIRModel):
    """hOCR markup written by the OCR service."""

    path: str
    word_count: int = Field(default=0, ge=0)

    @property
    def path_obj(self) -> Path:
        return Path(self.path)


class PdfPage(BaseIRModel):
    """A one-page PDF combining an image with an invisible text layer."""

    path: str
    words_placed: int = Field(default=0, ge=0)

    @property
    def path_obj(self) -> Path:
        return Path(self.path)


class JoinedDocument(BaseIRModel):
    """Concatenated PDF produced by the join service."""

    path: str
    page_count: int = Field(..., ge=0)

    @property
    def path_obj(self) -> Path:
        return Path(self.path)
