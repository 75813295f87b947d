"""Helpers shared by the subprocess-backed tool adapters."""

import logging
import shutil
import subprocess
from typing import Optional, Sequence

from bookocr.errors import ToolNotFoundError

logger = logging.getLogger(__name__)


def require_tool(binary: str) -> str:
    """Resolve a program on PATH.

    Raises:
        ToolNotFoundError: If the program is not installed.
    """
    resolved = shutil.which(binary)
    if resolved is None:
        raise ToolNotFoundError(binary)
    return resolved


def run_tool(
    cmd: Sequence[str],
    timeout: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """Run an external program and wait for it.

    The exit status is returned to the caller, not checked here.

    Raises:
        ToolNotFoundError: If the program does not exist.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        return subprocess.run(
            list(cmd),
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise ToolNotFoundError(cmd[0]) from exc
