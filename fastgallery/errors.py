"""Exceptions raised by the gallery engine.

Fatal errors abort a run; the CLI turns them into a diagnostic and a non-zero
exit code. ``TransformError`` is recovered per job by the worker pool.
"""
from __future__ import annotations

from pathlib import Path


class GalleryError(Exception):
    """Base class for all fastgallery errors."""


class FatalScanError(GalleryError):
    """A directory could not be listed or an entry could not be stat'ed."""


class ValidationError(GalleryError):
    """Invalid source/gallery arguments or a reserved-name collision."""


class MissingToolError(GalleryError):
    """A required external program is not available."""


class TransformError(GalleryError):
    """Producing the derived artifacts for one source file failed."""

    def __init__(self, source: Path | str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = Path(source)
