"""Base models and common types for the book OCR pipeline."""

from enum import Enum

from pydantic import BaseModel


class IntakeFormat(str, Enum):
    """Input file formats accepted by intake, keyed by lower-cased extension."""

    TIF = "tif"
    TIFF = "tiff"
    PDF = "pdf"


class SourceKind(str, Enum):
    """How an intake file was resolved once it reached the staging area."""

    SINGLE_PAGE_TIFF = "single_page_tiff"
    MULTI_PAGE_CONTAINER = "multi_page_container"


class Orientation(str, Enum):
    """Page pairing decided from a raster's height/width ratio."""

    SINGLE = "single"  # portrait, one logical page
    DOUBLE = "double"  # landscape, two logical pages side by side
    AMBIGUOUS = "ambiguous"  # near-square, treated as double by callers


class SplitLayout(int, Enum):
    """Number of output pages requested from the page splitter."""

    ONE_PAGE = 1
    TWO_PAGES = 2


class OcrStatus(str, Enum):
    """Outcome of the OCR step for one sub-page."""

    COMPLETE = "complete"
    DEGRADED = "degraded"  # empty or best-effort text layer


class BaseIRModel(BaseModel):
    """Base class for the records handed between pipeline stages.

    Records are frozen: a stage produces a new record rather than mutating
    the one it was given.
    """

    class Config:
        frozen = True
