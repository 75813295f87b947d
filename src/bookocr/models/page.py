"""Page-level IR models."""

from pathlib import Path
from typing import Optional

from pydantic import Field

from .base import BaseIRModel, OcrStatus


class SubPage(BaseIRModel):
    """
    One logical page cut out of a canonical page by the page splitter.

    Named ``{page_base}-A`` or ``{page_base}-B``; left page first.
    """

    image_path: str
    base_name: str = Field(..., description="e.g. 'scan-A'")
    parent_base_name: str = Field(..., description="Base name of the canonical page")
    side: str = Field(..., pattern="^[AB]$")

    @property
    def image_path_obj(self) -> Path:
        """Return image path as Path object."""
        return Path(self.image_path)


class EnrichmentArtifact(BaseIRModel):
    """Single-page searchable PDF produced for one sub-page."""

    pdf_path: str
    base_name: str
    ocr_status: OcrStatus = Field(default=OcrStatus.COMPLETE)
    word_count: int = Field(default=0, ge=0)
    degraded_reason: Optional[str] = None

    @property
    def pdf_path_obj(self) -> Path:
        """Return PDF path as Path object."""
        return Path(self.pdf_path)

    @property
    def is_degraded(self) -> bool:
        """Check if the text layer is empty or best-effort."""
        return self.ocr_status == OcrStatus.DEGRADED
