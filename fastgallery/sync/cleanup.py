"""Garbage collection of gallery entries without a source counterpart."""
from __future__ import annotations

import logging
from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.tree.models import DirectoryNode
from fastgallery.utils.files import remove_tree

logger = logging.getLogger(__name__)


def _remove_stale(path: Path, kind: str, dry_run: bool) -> bool:
    if dry_run:
        logger.info("Would clean up %s: %s", kind, path)
        return True
    try:
        remove_tree(path)
    except OSError as exc:
        logger.error("Couldn't delete stale gallery %s %s: %s", kind, path, exc)
        return False
    logger.info("Cleaned up %s: %s", kind, path)
    return True


def clean_directory(gallery: DirectoryNode, dry_run: bool, config: GalleryConfig) -> int:
    """Delete stale files and subdirectories directly inside *gallery*."""
    removed = 0
    for media in gallery.files:
        if not media.up_to_date and not config.reserved_file(media.name):
            removed += _remove_stale(gallery.absolute_path / media.name, "file", dry_run)

    for subdir in gallery.subdirectories:
        if not config.reserved_directory(subdir.name) and not subdir.up_to_date:
            removed += _remove_stale(gallery.absolute_path / subdir.name, "directory", dry_run)
    return removed


def clean_up(gallery: DirectoryNode, dry_run: bool, config: GalleryConfig) -> int:
    """Recursively remove stale entries from a reconciled gallery tree.

    Returns the number of files and directories removed (or that would be, in a dry run).
    """
    removed = clean_directory(gallery, dry_run, config)
    for subdir in gallery.subdirectories:
        if config.reserved_directory(subdir.name) or subdir.up_to_date:
            removed += clean_up(subdir, dry_run, config)
    return removed
