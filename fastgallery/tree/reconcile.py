"""Three-way comparison of a source tree against its gallery tree.

The gallery keeps three artifacts per source file, one in each reserved
subdirectory. Matching is done on the filename without its extension, since
the thumbnail and full-size renditions change format.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.tree.models import DirectoryNode, MediaFile
from fastgallery.utils.media import strip_extension

logger = logging.getLogger(__name__)

__all__ = ["count_changes", "find_missing_html_files", "has_directory_changed", "reconcile"]


def _index_by_basename(directory: DirectoryNode | None) -> dict[str, list[MediaFile]]:
    index: dict[str, list[MediaFile]] = defaultdict(list)
    if directory is not None:
        for media in directory.files:
            index[strip_extension(media.name)].append(media)
    return index


def reconcile(source: DirectoryNode, gallery: DirectoryNode, config: GalleryConfig) -> None:
    """Mark every source and gallery entry that has a counterpart on the other side.

    A source file is up to date when its thumbnail, full-size and original all
    exist and the thumbnail is not older than the source. Gallery files are
    marked whenever a source file maps to them, fresh or not, so that cleanup
    never removes artifacts that are merely old.
    """
    source.up_to_date = True
    gallery.up_to_date = True

    thumbnails = _index_by_basename(gallery.subdirectory(config.thumbnail_dir))
    fullsizes = _index_by_basename(gallery.subdirectory(config.fullsize_dir))
    originals = _index_by_basename(gallery.subdirectory(config.original_dir))

    seen: set[str] = set()
    for source_file in source.files:
        basename = strip_extension(source_file.name)
        if basename in seen:
            # Two source files differing only by extension share one set of artifacts
            logger.warning("Basename collision in %s: %s", source.absolute_path, source_file.name)
        seen.add(basename)

        thumbnail_matches = thumbnails.get(basename, [])
        fullsize_matches = fullsizes.get(basename, [])
        original_matches = originals.get(basename, [])
        for match in (*thumbnail_matches, *fullsize_matches, *original_matches):
            match.up_to_date = True

        if thumbnail_matches and fullsize_matches and original_matches:
            newest_thumbnail = max(match.mtime_ns for match in thumbnail_matches)
            if newest_thumbnail >= source_file.mtime_ns:
                source_file.up_to_date = True

    for source_dir in source.subdirectories:
        if config.reserved_directory(source_dir.name):
            continue
        gallery_dir = gallery.subdirectory(source_dir.name)
        if gallery_dir is not None and not config.reserved_directory(gallery_dir.name):
            reconcile(source_dir, gallery_dir, config)


def count_changes(tree: DirectoryNode, config: GalleryConfig) -> int:
    """Count files below *tree* that are not up to date.

    On a source tree this is the pending work; on a gallery tree it is the
    number of stale artifacts.
    """
    changes = sum(1 for media in tree.files if not media.up_to_date and not config.reserved_file(media.name))
    for subdir in tree.subdirectories:
        changes += count_changes(subdir, config)
    return changes


def _has_stale_entries(gallery: DirectoryNode, config: GalleryConfig) -> bool:
    for media in gallery.files:
        if not media.up_to_date and not config.reserved_file(media.name):
            return True
    for subdir in gallery.subdirectories:
        if config.reserved_directory(subdir.name):
            if any(not media.up_to_date for media in subdir.files):
                return True
        elif not subdir.up_to_date:
            return True
    return False


def has_directory_changed(
        source: DirectoryNode,
        gallery: DirectoryNode | None,
        gallery_directory: Path,
        clean_up: bool,
        config: GalleryConfig,
) -> bool:
    """Return True if the gallery page for *source* must be regenerated.

    Args:
        source: Reconciled source directory.
        gallery: Gallery counterpart of *source*, or None if it doesn't exist yet.
        gallery_directory: Where the gallery counterpart lives on disk.
        clean_up: Whether stale gallery entries are going to be removed.
        config: Gallery configuration.
    """
    if any(not media.up_to_date for media in source.files):
        return True
    if any(not subdir.up_to_date for subdir in source.subdirectories):
        return True
    if gallery is None:
        return True
    if clean_up and _has_stale_entries(gallery, config):
        return True
    return not (gallery_directory / config.html_file).exists()


def find_missing_html_files(gallery: DirectoryNode, config: GalleryConfig) -> bool:
    """Return True if any non-reserved gallery directory lacks its index page."""
    if not (gallery.absolute_path / config.html_file).exists():
        return True
    for subdir in gallery.subdirectories:
        if not config.reserved_directory(subdir.name) and find_missing_html_files(subdir, config):
            return True
    return False
