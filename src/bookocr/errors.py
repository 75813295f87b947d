"""
Custom exceptions for the book OCR pipeline.

Every fatal error carries the exit status the CLI terminates with.
``OcrDegraded`` is the one non-fatal error: the enrichment stage absorbs it.
"""

from pathlib import Path
from typing import Optional, Union


class BookOcrError(Exception):
    """Base exception for all pipeline errors."""

    exit_code: int = 1

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown book OCR error occurred."


class StagingCreateError(BookOcrError):
    """Raised when the staging directory cannot be created."""

    def __init__(self, path: Union[str, Path], reason: str = "") -> None:
        self.path = Path(path)
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot create staging area '{self.path}'{detail}")


class ToolNotFoundError(BookOcrError):
    """Raised when a required external program is not installed."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Required tool '{tool}' was not found on PATH")


class IntakeError(BookOcrError):
    """Base class for failures while normalizing one input file."""

    def __init__(self, file_name: str, message: str) -> None:
        self.file_name = file_name
        super().__init__(message)


class InvalidContainerError(IntakeError):
    """Raised when an intake file reports zero pages. Aborts the whole run."""

    def __init__(self, file_name: str) -> None:
        super().__init__(
            file_name,
            f"Expected a TIFF container, but {file_name} has no readable pages",
        )


class ConversionError(IntakeError):
    """Raised when a PDF cannot be rasterized."""

    def __init__(self, file_name: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(file_name, f"Failed to rasterize {file_name}{detail}")


class UnsupportedInputError(IntakeError):
    """Raised for unsupported extensions when skipping is disabled."""

    def __init__(self, file_name: str) -> None:
        super().__init__(file_name, f"Unsupported input file type: {file_name}")


class IntakeCollisionError(IntakeError):
    """Raised when two inputs would produce the same staging file."""

    def __init__(self, file_name: str, target: str) -> None:
        self.target = target
        super().__init__(
            file_name, f"{file_name} would overwrite '{target}' in the staging area"
        )


class SplitError(BookOcrError):
    """Raised when the page splitter fails or omits expected outputs."""

    def __init__(
        self,
        base_name: str,
        reason: str = "",
        returncode: Optional[int] = None,
    ) -> None:
        self.base_name = base_name
        self.returncode = returncode
        if returncode:
            self.exit_code = returncode
        else:
            self.exit_code = 2
        detail = f": {reason}" if reason else ""
        super().__init__(f"Page splitting failed for {base_name}{detail}")


class OcrDegraded(BookOcrError):
    """Raised by the OCR adapter when no usable text layer was produced."""

    def __init__(self, base_name: str, reason: str = "") -> None:
        self.base_name = base_name
        self.reason = reason or "no text recognized"
        super().__init__(f"OCR degraded for {base_name}: {self.reason}")


class EnrichError(BookOcrError):
    """Raised when a sub-page image cannot be converted or embedded."""

    exit_code = 2

    def __init__(self, base_name: str, reason: str = "") -> None:
        self.base_name = base_name
        detail = f": {reason}" if reason else ""
        super().__init__(f"Building the searchable page failed for {base_name}{detail}")


class AssembleError(BookOcrError):
    """Raised when the final document cannot be joined."""

    exit_code = 2

    @property
    def default_message(self) -> str:
        return "Failed to assemble the final document."
