"""Pipeline stages for turning scanned pages into a searchable PDF.

Stages, in run order:
1. staging - private working directory for the run
2. stage_intake - TIFF/PDF inputs to single-page TIFFs
3. stage_orient - single/double/ambiguous decision per page
4. stage_split - deskew, crop and split into sub-pages
5. stage_enrich - OCR and text layer embedding per sub-page
6. stage_assemble - join into the final document

The orchestrator runs them in order; each stage can also be used on its own.
"""

from .orchestrator import Pipeline, check_external_tools, run_pipeline
from .stage_assemble import Assembler, natural_sort_key
from .stage_enrich import Enricher
from .stage_intake import IntakeNormalizer, discover_intake_files
from .stage_orient import classify, resolve_layout
from .stage_split import PageSplitter, sub_page_names
from .staging import ScopedStagingArea, open_staging_area

__all__ = [
    # Orchestration
    "Pipeline",
    "check_external_tools",
    "run_pipeline",
    # Staging
    "ScopedStagingArea",
    "open_staging_area",
    # Intake
    "IntakeNormalizer",
    "discover_intake_files",
    # Orientation
    "classify",
    "resolve_layout",
    # Split
    "PageSplitter",
    "sub_page_names",
    # Enrichment
    "Enricher",
    # Assembly
    "Assembler",
    "natural_sort_key",
]
