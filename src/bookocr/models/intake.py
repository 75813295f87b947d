"""Intake-level IR models."""

from pathlib import Path
from typing import Optional

from pydantic import Field

from .base import BaseIRModel, IntakeFormat, SourceKind


class IntakeFile(BaseIRModel):
    """A raw input file discovered in the input directory."""

    path: str
    base_name: str = Field(..., min_length=1, description="Filename without extension")
    extension: str = Field(..., description="Lower-cased extension without the dot")

    @classmethod
    def from_path(cls, path: Path) -> "IntakeFile":
        """Build an intake record from a file path."""
        return cls(
            path=str(path),
            base_name=path.stem,
            extension=path.suffix.lstrip(".").lower(),
        )

    @property
    def path_obj(self) -> Path:
        """Return path as Path object."""
        return Path(self.path)

    @property
    def format(self) -> Optional[IntakeFormat]:
        """Resolved input format, or None if the extension is unsupported."""
        try:
            return IntakeFormat(self.extension)
        except ValueError:
            return None


class CanonicalPage(BaseIRModel):
    """A single-page TIFF in the staging area."""

    image_path: str
    base_name: str = Field(..., min_length=1)
    source_kind: SourceKind
    page_index: Optional[int] = Field(
        None, ge=1, description="1-indexed position inside a multi-page container"
    )

    @property
    def image_path_obj(self) -> Path:
        """Return image path as Path object."""
        return Path(self.image_path)


class CanonicalPageGroup(BaseIRModel):
    """All single-page rasters derived from one intake file."""

    intake: IntakeFile
    source_kind: SourceKind
    pages: list[CanonicalPage] = Field(..., min_length=1)

    @property
    def page_count(self) -> int:
        """Number of member pages."""
        return len(self.pages)
