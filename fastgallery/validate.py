"""Startup checks run before any scanning."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.errors import FatalScanError, ValidationError
from fastgallery.utils.files import is_directory

logger = logging.getLogger(__name__)


def validate_source_and_gallery(source: Path, gallery: Path) -> tuple[Path, Path]:
    """Check the source and gallery arguments and return them as absolute paths.

    The source must be a directory (or a symlink to one). The gallery may not
    exist yet, but then its parent directory must.

    Raises:
        ValidationError: If either path is unusable.
    """
    source = Path(os.path.abspath(source))
    gallery = Path(os.path.abspath(gallery))

    if not is_directory(source):
        raise ValidationError(f"Source directory doesn't exist: {source}")

    if not is_directory(gallery) and not is_directory(gallery.parent):
        raise ValidationError(f"Neither gallery directory or its parent directory exist: {gallery}")

    if gallery == source or source in gallery.parents:
        raise ValidationError(f"Gallery directory can't be inside the source directory: {gallery}")

    return source, gallery


def check_reserved_names(source: Path, config: GalleryConfig) -> None:
    """Refuse a source tree whose top level uses one of the reserved gallery names.

    Raises:
        ValidationError: On a collision.
        FatalScanError: If the source directory can't be listed.
    """
    try:
        with os.scandir(source) as it:
            names = {entry.name for entry in it}
    except OSError as exc:
        raise FatalScanError(f"Couldn't read directory contents: {source}: {exc}") from exc

    collisions = sorted(names & config.reserved_directories)
    if collisions:
        raise ValidationError(
            f"Source directory {source} contains reserved name(s): {', '.join(collisions)}"
        )
