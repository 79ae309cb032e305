"""Recursive scanning of source and gallery directories."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from fastgallery.errors import FatalScanError
from fastgallery.tree.models import DirectoryNode, MediaFile
from fastgallery.utils.media import is_media_file

logger = logging.getLogger(__name__)

__all__ = ["dir_has_media_files", "scan"]


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        entries = list(it)
    entries.sort(key=lambda e: e.name)
    return entries


def _entry_is_dir(entry: os.DirEntry) -> bool:
    # Follows symlinks, so a link to a directory counts as a directory
    try:
        return entry.is_dir()
    except OSError:
        return False


def _file_stat(entry: os.DirEntry) -> os.stat_result:
    try:
        return entry.stat()
    except FileNotFoundError:
        # Dangling symlink, e.g. a gallery original whose source is gone
        return entry.stat(follow_symlinks=False)


def _real_path(path: Path) -> str:
    return os.path.realpath(path)


def dir_has_media_files(directory: Path, ignore_videos: bool = False, _ancestors: frozenset[str] = frozenset()) -> bool:
    """Return True if *directory* or any directory below it holds a media file.

    Unreadable directories are treated as holding no media.
    """
    real = _real_path(directory)
    if real in _ancestors:
        logger.warning("Skipping symlink loop at %s", directory)
        return False
    try:
        entries = _sorted_entries(directory)
    except OSError as exc:
        logger.debug("Couldn't read %s while looking for media: %s", directory, exc)
        return False

    ancestors = _ancestors | {real}
    for entry in entries:
        entry_path = Path(entry.path)
        if _entry_is_dir(entry):
            if dir_has_media_files(entry_path, ignore_videos, ancestors):
                return True
        elif is_media_file(entry.name, ignore_videos):
            return True
    return False


def scan(root: Path, ignore_videos: bool = False) -> DirectoryNode:
    """Build the directory tree of all media files below *root*.

    Subdirectories without any media anywhere below them are left out. A root
    that does not exist yet (a gallery on its first run) yields an empty
    placeholder node.

    Raises:
        FatalScanError: If a directory can't be listed or a media file can't be stat'ed.
    """
    root = Path(os.path.abspath(root))
    if not os.path.lexists(root):
        logger.debug("Scan root %s does not exist yet, using an empty tree", root)
        return DirectoryNode(name=root.name, relative_path=Path(""), absolute_path=root)
    return _scan_directory(root, Path(""), ignore_videos, frozenset())


def _scan_directory(absolute: Path, relative: Path, ignore_videos: bool, ancestors: frozenset[str]) -> DirectoryNode:
    try:
        mtime_ns = absolute.stat().st_mtime_ns
        entries = _sorted_entries(absolute)
    except OSError as exc:
        raise FatalScanError(f"Couldn't read directory contents: {absolute}: {exc}") from exc

    tree = DirectoryNode(name=absolute.name, relative_path=relative, absolute_path=absolute, mtime_ns=mtime_ns)
    ancestors = ancestors | {_real_path(absolute)}

    for entry in entries:
        entry_absolute = absolute / entry.name
        entry_relative = relative / entry.name
        if _entry_is_dir(entry):
            if _real_path(entry_absolute) in ancestors:
                logger.warning("Skipping symlink loop at %s", entry_absolute)
                continue
            if dir_has_media_files(entry_absolute, ignore_videos, ancestors):
                tree.subdirectories.append(_scan_directory(entry_absolute, entry_relative, ignore_videos, ancestors))
        elif is_media_file(entry.name, ignore_videos):
            try:
                stat = _file_stat(entry)
            except OSError as exc:
                raise FatalScanError(f"Couldn't stat file information for media file: {entry_absolute}: {exc}") from exc
            tree.files.append(
                MediaFile(
                    name=entry.name,
                    relative_path=entry_relative,
                    absolute_path=entry_absolute,
                    mtime_ns=stat.st_mtime_ns,
                )
            )

    logger.debug("Scanned %s: %d files, %d subdirectories", absolute, len(tree.files), len(tree.subdirectories))
    return tree
