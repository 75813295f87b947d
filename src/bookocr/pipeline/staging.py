"""Staging Area - the run's private working directory.

Every stage reads and writes files inside one directory owned exclusively
by the run. The handle returned by ``open_staging_area`` is passed to each
stage explicitly; nothing relies on the process working directory.
"""

import logging
import shutil
from pathlib import Path
from types import TracebackType
from typing import Optional, Union

from bookocr.errors import StagingCreateError

logger = logging.getLogger(__name__)


class ScopedStagingArea:
    """Handle to a staging directory that is deleted on release.

    Used as a context manager: leaving the block releases the directory,
    whether the block completed or raised. With ``keep_on_failure`` the tree
    is left on disk after an exception for manual inspection.
    """

    def __init__(self, path: Path, keep_on_failure: bool = False):
        self.path = path
        self.keep_on_failure = keep_on_failure
        self._released = False

    def __enter__(self) -> "ScopedStagingArea":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None and self.keep_on_failure:
            logger.warning("Keeping staging area '%s' for inspection", self.path)
            return
        self.release()

    @property
    def released(self) -> bool:
        return self._released

    def file(self, name: str) -> Path:
        """Path of a file inside the staging area."""
        return self.path / name

    def files(self, pattern: str = "*") -> list[Path]:
        """Files in the staging area matching a glob pattern, sorted by name."""
        return sorted(p for p in self.path.glob(pattern) if p.is_file())

    def release(self) -> None:
        """Delete the staging directory and everything in it.

        A failed delete is logged and leaves the area unreleased, so a later
        call can retry.
        """
        if self._released:
            return
        logger.debug("Removing staging area '%s'", self.path)
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove staging area '%s': %s", self.path, exc)
            return
        self._released = True


def open_staging_area(
    path: Union[str, Path],
    keep_on_failure: bool = False,
) -> ScopedStagingArea:
    """Create a fresh staging directory.

    Args:
        path: Directory to create. It must not exist yet.
        keep_on_failure: Leave the directory behind if the run fails.

    Returns:
        ScopedStagingArea owning the new directory.

    Raises:
        StagingCreateError: If the directory exists or cannot be created.
    """
    path = Path(path)
    try:
        path.mkdir(parents=False, exist_ok=False)
    except FileExistsError as exc:
        raise StagingCreateError(path, "already exists") from exc
    except OSError as exc:
        raise StagingCreateError(path, exc.strerror or str(exc)) from exc

    logger.info("Created staging area '%s'", path)
    return ScopedStagingArea(path, keep_on_failure=keep_on_failure)
