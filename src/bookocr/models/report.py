"""Run-level summary model."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .page import EnrichmentArtifact


class RunReport(BaseModel):
    """
    Summary of one pipeline run.

    Mutable on purpose: the orchestrator fills it in as stages complete.
    Degraded artifacts are counted here so a run with poor OCR still
    succeeds but says so.
    """

    intake_files: int = Field(default=0, ge=0)
    canonical_pages: int = Field(default=0, ge=0)
    sub_pages: int = Field(default=0, ge=0)
    skipped_files: list[str] = Field(default_factory=list)
    ambiguous_pages: list[str] = Field(default_factory=list)
    artifacts: list[EnrichmentArtifact] = Field(default_factory=list)

    output_path: Optional[str] = None
    output_page_count: int = Field(default=0, ge=0)

    def record_artifact(self, artifact: EnrichmentArtifact) -> None:
        """Add an enrichment artifact to the report."""
        self.artifacts.append(artifact)

    @property
    def degraded_artifacts(self) -> list[str]:
        """Base names of artifacts whose OCR failed or came back empty."""
        return [a.base_name for a in self.artifacts if a.is_degraded]

    @property
    def degraded_count(self) -> int:
        return len(self.degraded_artifacts)

    @property
    def output_path_obj(self) -> Optional[Path]:
        return Path(self.output_path) if self.output_path else None
