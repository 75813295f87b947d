"""Page splitter service backed by unpaper.

unpaper deskews and crops a scanned sheet and, for double layouts, cuts it
into a left and a right page.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from bookocr.models import SplitLayout, SplitOutput
from bookocr.tools.base import run_tool

logger = logging.getLogger(__name__)


class SplitterFailed(Exception):
    """unpaper exited non-zero, timed out, or left outputs missing."""

    def __init__(self, reason: str, returncode: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.returncode = returncode


class UnpaperSplitter:
    """Drives unpaper for single and double page layouts."""

    def __init__(
        self,
        dpi: int = 300,
        binary: str = "unpaper",
        timeout: Optional[int] = None,
    ):
        """Initialize splitter.

        Args:
            dpi: Resolution of the input bitmaps.
            binary: unpaper executable name or path.
            timeout: Optional per-call timeout in seconds.
        """
        self.dpi = dpi
        self.binary = binary
        self.timeout = timeout

    def build_command(
        self,
        source: Path,
        outputs: Sequence[Path],
        layout: SplitLayout,
    ) -> list[str]:
        """Build the unpaper command line for a layout."""
        layout_name = "single" if layout == SplitLayout.ONE_PAGE else "double"
        return [
            self.binary,
            "--dpi", str(self.dpi),
            "--type", "pbm",
            "--input-pages", "1",
            "--layout", layout_name,
            "--output-pages", str(layout.value),
            str(source),
            *(str(p) for p in outputs),
        ]

    def split(
        self,
        source: Path,
        outputs: Sequence[Path],
        layout: SplitLayout,
    ) -> SplitOutput:
        """Split one bitmap into the given output files.

        Args:
            source: Input PBM.
            outputs: Expected output paths, left page first.
            layout: One or two output pages.

        Returns:
            SplitOutput listing the written files.

        Raises:
            SplitterFailed: On a non-zero exit, timeout or missing output.
        """
        if len(outputs) != layout.value:
            raise ValueError(
                f"Layout {layout.name} needs {layout.value} outputs, got {len(outputs)}"
            )

        cmd = self.build_command(source, outputs, layout)
        try:
            result = run_tool(cmd, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            raise SplitterFailed(f"unpaper timed out after {exc.timeout}s") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise SplitterFailed(
                f"unpaper exited with status {result.returncode}"
                + (f": {stderr}" if stderr else ""),
                returncode=result.returncode,
            )

        missing = [p.name for p in outputs if not p.exists()]
        if missing:
            raise SplitterFailed(f"unpaper did not write {', '.join(missing)}")

        return SplitOutput(layout=layout, output_paths=[str(p) for p in outputs])
