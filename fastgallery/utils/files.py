from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from fastgallery.errors import GalleryError

logger = logging.getLogger(__name__)

__all__ = ["create_directory", "is_directory", "remove_tree", "safe_remove"]


def safe_remove(path: Path) -> None:
    """Safely remove a file or symlink from disk.

    Directories are not removed; missing files are silently ignored after a debug log.
    """

    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        message = f"safe_remove refuses to delete directories: {target}"
        logger.error(message)
        raise IsADirectoryError(message)

    try:
        target.unlink()
    except FileNotFoundError:
        logger.debug("safe_remove skipped missing file: %s", target)
    except OSError as exc:  # pragma: no cover - exercised in failure cases
        message = f"Unable to remove {target}: {exc}"
        logger.error(message)
        raise OSError(message) from exc
    else:
        logger.debug("Removed file: %s", target)


def remove_tree(path: Path) -> None:
    """Remove *path* whatever it is: file, symlink or directory subtree."""

    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
        logger.debug("Removed directory tree: %s", target)
    else:
        safe_remove(target)


def is_directory(path: Path) -> bool:
    """Return True if *path* is a directory or a symlink resolving to one."""

    target = Path(path)
    try:
        return target.is_dir()
    except OSError as exc:
        logger.debug("Could not resolve %s: %s", target, exc)
        return False


def create_directory(destination: Path, dry_run: bool, mode: int) -> None:
    """Create *destination* if it does not exist yet."""

    target = Path(destination)
    if os.path.lexists(target):
        return
    if dry_run:
        logger.info("Would create directory: %s", target)
        return
    try:
        target.mkdir(mode=mode)
    except OSError as exc:
        raise GalleryError(f"Couldn't create directory {target}: {exc}") from exc
    logger.info("Created directory: %s", target)
