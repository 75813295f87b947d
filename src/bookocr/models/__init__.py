"""IR (Intermediate Representation) models for the book OCR pipeline.

Every record here describes a file in the run's staging area. Stages pass
these records along instead of re-deriving file types and names from
filename suffixes.

Model Hierarchy:
- IntakeFile → CanonicalPageGroup → CanonicalPage
- CanonicalPage → SubPage (one or two) → EnrichmentArtifact
- EnrichmentArtifact* → JoinedDocument
"""

from .base import (
    BaseIRModel,
    IntakeFormat,
    OcrStatus,
    Orientation,
    SourceKind,
    SplitLayout,
)
from .handles import (
    JoinedDocument,
    PdfPage,
    RasterContainer,
    SplitOutput,
    TextLayer,
)
from .intake import (
    CanonicalPage,
    CanonicalPageGroup,
    IntakeFile,
)
from .page import (
    EnrichmentArtifact,
    SubPage,
)
from .report import RunReport

__all__ = [
    # Base types
    "BaseIRModel",
    "IntakeFormat",
    "OcrStatus",
    "Orientation",
    "SourceKind",
    "SplitLayout",
    # Intake
    "IntakeFile",
    "CanonicalPage",
    "CanonicalPageGroup",
    # Page
    "SubPage",
    "EnrichmentArtifact",
    # Tool handles
    "RasterContainer",
    "SplitOutput",
    "TextLayer",
    "PdfPage",
    "JoinedDocument",
    # Report
    "RunReport",
]
