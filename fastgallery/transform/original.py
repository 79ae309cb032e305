from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.utils.files import safe_remove

logger = logging.getLogger(__name__)


def symlink_file(source: Path, destination: Path) -> None:
    """Point *destination* at *source*, replacing whatever is there."""
    if os.path.lexists(destination):
        safe_remove(destination)
    os.symlink(source, destination)


def copy_file(source: Path, destination: Path, mode: int) -> None:
    if os.path.lexists(destination):
        safe_remove(destination)
    shutil.copyfile(source, destination)
    os.chmod(destination, mode)


def create_original(source: Path, destination: Path, config: GalleryConfig) -> None:
    """Make the original artifact: a symlink by default, a copy if configured."""
    try:
        if config.copy_originals:
            copy_file(source, destination, config.file_mode)
        else:
            symlink_file(source, destination)
    except OSError:
        logger.error("Couldn't create original %s -> %s", source, destination)
        raise
