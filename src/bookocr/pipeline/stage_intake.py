"""Intake Stage - Normalize input files into single-page TIFFs.

This is the first stage of the pipeline. Every matching file in the input
directory becomes one CanonicalPageGroup in the staging area:

- .tif   copied verbatim
- .tiff  copied and renamed to .tif
- .pdf   rasterized at the run DPI into a .tif

Multi-page TIFFs are then split into ``{base}1.tif``, ``{base}2.tif``, ...
A file that reports zero pages aborts the entire run.
"""

import logging
import shutil
from pathlib import Path
from typing import Generator, Iterable, Optional

from bookocr.config import RunConfig
from bookocr.errors import (
    ConversionError,
    IntakeCollisionError,
    InvalidContainerError,
    UnsupportedInputError,
)
from bookocr.models import (
    CanonicalPage,
    CanonicalPageGroup,
    IntakeFile,
    IntakeFormat,
    RasterContainer,
    SourceKind,
)
from bookocr.pipeline.staging import ScopedStagingArea
from bookocr.tools import ImageConverter

logger = logging.getLogger(__name__)


def discover_intake_files(
    input_dir: Path,
    config: RunConfig,
    exclude: Iterable[Path] = (),
) -> list[IntakeFile]:
    """List files in ``input_dir`` whose names fully match the input pattern.

    Sorted by filename so runs over the same directory are reproducible.
    Subdirectories are not searched. Paths in ``exclude`` (typically the
    output of a previous run) are left out.
    """
    excluded = {Path(p).resolve() for p in exclude}
    return [
        IntakeFile.from_path(path)
        for path in sorted(Path(input_dir).iterdir())
        if path.is_file()
        and config.matches(path.name)
        and path.resolve() not in excluded
    ]


class IntakeNormalizer:
    """Turns intake files into canonical single-page TIFF groups."""

    def __init__(
        self,
        config: RunConfig,
        converter: ImageConverter = None,
        skip_unsupported: bool = True,
    ):
        """Initialize normalizer.

        Args:
            config: Run configuration (DPI and input pattern).
            converter: Image conversion service.
            skip_unsupported: Skip files with unknown extensions instead of failing.
        """
        self.config = config
        self.converter = converter or ImageConverter(dpi=config.dpi)
        self.skip_unsupported = skip_unsupported
        self.skipped: list[str] = []

    def normalize(
        self,
        input_dir: Path,
        staging: ScopedStagingArea,
        exclude: Iterable[Path] = (),
    ) -> list[CanonicalPageGroup]:
        """Normalize every matching file of ``input_dir`` into the staging area.

        Returns:
            One group per accepted intake file, in filename order.

        Raises:
            InvalidContainerError: If any file reports zero pages.
        """
        return list(self.iter_groups(input_dir, staging, exclude))

    def iter_groups(
        self,
        input_dir: Path,
        staging: ScopedStagingArea,
        exclude: Iterable[Path] = (),
    ) -> Generator[CanonicalPageGroup, None, None]:
        """Yield groups one intake file at a time."""
        for intake in discover_intake_files(input_dir, self.config, exclude):
            group = self.normalize_file(intake, staging)
            if group is not None:
                yield group

    def normalize_file(
        self,
        intake: IntakeFile,
        staging: ScopedStagingArea,
    ) -> Optional[CanonicalPageGroup]:
        """Normalize one intake file.

        Returns:
            The canonical group, or None if the file was skipped.
        """
        intake_format = intake.format
        if intake_format is None:
            if not self.skip_unsupported:
                raise UnsupportedInputError(intake.path_obj.name)
            logger.warning("%s: unsupported file type, skipping", intake.path_obj.name)
            self.skipped.append(intake.path_obj.name)
            return None

        target = staging.file(f"{intake.base_name}.tif")
        if target.exists():
            raise IntakeCollisionError(intake.path_obj.name, target.name)

        container = self._stage(intake, intake_format, target)

        if not container.is_valid:
            raise InvalidContainerError(intake.path_obj.name)

        if container.page_count == 1:
            page = CanonicalPage(
                image_path=container.path,
                base_name=intake.base_name,
                source_kind=SourceKind.SINGLE_PAGE_TIFF,
            )
            return CanonicalPageGroup(
                intake=intake,
                source_kind=SourceKind.SINGLE_PAGE_TIFF,
                pages=[page],
            )

        return self._split_container(intake, container, staging)

    def _stage(
        self,
        intake: IntakeFile,
        intake_format: IntakeFormat,
        target: Path,
    ) -> RasterContainer:
        """Bring one intake file into the staging area as a .tif."""
        name = intake.path_obj.name

        if intake_format == IntakeFormat.TIF:
            logger.info("%s: TIFF, copying", name)
            shutil.copyfile(intake.path_obj, target)
        elif intake_format == IntakeFormat.TIFF:
            logger.info("%s: TIFF, copying as %s", name, target.name)
            shutil.copyfile(intake.path_obj, target)
        else:
            logger.info("%s: PDF, rasterizing at %d DPI", name, self.config.dpi)
            try:
                return self.converter.rasterize_pdf(intake.path_obj, target)
            except (RuntimeError, OSError, ValueError) as exc:
                # Partial output must not be mistaken for a page later on
                target.unlink(missing_ok=True)
                raise ConversionError(name, str(exc)) from exc

        return self.converter.inspect(target)

    def _split_container(
        self,
        intake: IntakeFile,
        container: RasterContainer,
        staging: ScopedStagingArea,
    ) -> CanonicalPageGroup:
        logger.info(
            "%s: %d pages, splitting into single-page TIFFs",
            container.path_obj.name,
            container.page_count,
        )

        for index in range(1, container.page_count + 1):
            target = staging.file(f"{intake.base_name}{index}.tif")
            if target.exists():
                raise IntakeCollisionError(intake.path_obj.name, target.name)

        outputs = self.converter.split_container(container, intake.base_name)
        container.path_obj.unlink()

        pages = [
            CanonicalPage(
                image_path=str(path),
                base_name=path.stem,
                source_kind=SourceKind.MULTI_PAGE_CONTAINER,
                page_index=index,
            )
            for index, path in enumerate(outputs, start=1)
        ]
        return CanonicalPageGroup(
            intake=intake,
            source_kind=SourceKind.MULTI_PAGE_CONTAINER,
            pages=pages,
        )
