"""Pipeline orchestrator - one run from input directory to final PDF.

    staging -> intake -> {orient -> split -> enrich*} per page -> assemble

Every fatal error propagates out of the staging context, which deletes the
staging area on the way. Degraded OCR is only counted in the report.
"""

import logging
from pathlib import Path

from bookocr.config import RunConfig, Settings, settings as default_settings
from bookocr.models import Orientation, RunReport
from bookocr.pipeline.stage_assemble import Assembler
from bookocr.pipeline.stage_enrich import Enricher
from bookocr.pipeline.stage_intake import IntakeNormalizer
from bookocr.pipeline.stage_orient import classify
from bookocr.pipeline.stage_split import PageSplitter
from bookocr.pipeline.staging import open_staging_area
from bookocr.tools import (
    HocrRecognizer,
    ImageConverter,
    PdfJoiner,
    TextLayerEmbedder,
    UnpaperSplitter,
    require_tool,
)

logger = logging.getLogger(__name__)


def check_external_tools(settings: Settings = default_settings) -> None:
    """Fail early if a required program is missing.

    Raises:
        ToolNotFoundError: If unpaper or tesseract is not on PATH.
    """
    require_tool(settings.unpaper_binary)
    require_tool("tesseract")


class Pipeline:
    """Wires the stages together for one run configuration."""

    def __init__(
        self,
        config: RunConfig,
        settings: Settings = default_settings,
        converter: ImageConverter = None,
        splitter: UnpaperSplitter = None,
        recognizer: HocrRecognizer = None,
        embedder: TextLayerEmbedder = None,
        joiner: PdfJoiner = None,
    ):
        """Initialize pipeline.

        Tool adapters default to instances built from ``config`` and
        ``settings``; pass them explicitly to substitute another backend.
        """
        self.config = config
        self.settings = settings

        converter = converter or ImageConverter(
            dpi=config.dpi, jpeg_quality=settings.jpeg_quality
        )
        splitter = splitter or UnpaperSplitter(
            dpi=config.dpi,
            binary=settings.unpaper_binary,
            timeout=settings.unpaper_timeout,
        )
        recognizer = recognizer or HocrRecognizer(
            language=settings.ocr_language,
            psm=settings.ocr_psm,
            timeout=settings.ocr_timeout,
        )
        embedder = embedder or TextLayerEmbedder(dpi=config.dpi)

        self.converter = converter
        self.intake = IntakeNormalizer(
            config, converter=converter, skip_unsupported=settings.skip_unsupported
        )
        self.page_splitter = PageSplitter(config.dpi, converter=converter, splitter=splitter)
        self.enricher = Enricher(
            config.dpi, converter=converter, recognizer=recognizer, embedder=embedder
        )
        self.assembler = Assembler(joiner=joiner or PdfJoiner())

    def run(self, input_dir: Path, caller_dir: Path) -> RunReport:
        """Execute the full pipeline.

        Args:
            input_dir: Directory holding the scanned pages.
            caller_dir: Directory receiving the final document; also hosts
                the staging area.

        Returns:
            RunReport describing the run.
        """
        input_dir = Path(input_dir).resolve()
        caller_dir = Path(caller_dir).resolve()
        report = RunReport()

        staging_path = caller_dir / self.settings.staging_dir_name
        with open_staging_area(
            staging_path, keep_on_failure=self.settings.keep_staging_on_failure
        ) as staging:
            logger.info("Converting files to single-page TIFFs")
            groups = self.intake.normalize(
                input_dir, staging, exclude=[caller_dir / self.config.output_name]
            )
            report.intake_files = len(groups)
            report.skipped_files = list(self.intake.skipped)

            logger.info("Starting page processing")
            for group in groups:
                for page in group.pages:
                    report.canonical_pages += 1
                    width, height = self.converter.probe_size(page.image_path_obj)
                    orientation = classify(width, height)
                    if orientation == Orientation.AMBIGUOUS:
                        report.ambiguous_pages.append(page.base_name)

                    for sub_page in self.page_splitter.split(page, orientation):
                        report.sub_pages += 1
                        report.record_artifact(self.enricher.enrich(sub_page))

            joined = self.assembler.assemble(staging, self.config.output_name, caller_dir)
            report.output_path = joined.path
            report.output_page_count = joined.page_count

        if report.degraded_count:
            logger.warning(
                "%d of %d pages have a degraded text layer: %s",
                report.degraded_count,
                len(report.artifacts),
                ", ".join(report.degraded_artifacts),
            )
        return report


def run_pipeline(
    config: RunConfig,
    input_dir: Path,
    caller_dir: Path,
    settings: Settings = default_settings,
) -> RunReport:
    """Run the pipeline with the default tool adapters."""
    return Pipeline(config, settings=settings).run(input_dir, caller_dir)
