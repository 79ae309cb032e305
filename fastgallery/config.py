from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from fastgallery import constants
from fastgallery.utils.media import is_image_file, is_video_file, strip_extension


def _default_concurrency() -> int:
    return min(os.cpu_count() or 1, constants.MAX_DEFAULT_CONCURRENCY)


@dataclass
class GalleryConfig:
    """Settings shared by every stage of a gallery run.

    Defaults come from :mod:`fastgallery.constants`; the CLI overrides the
    runtime switches (concurrency, videos, originals).
    """

    original_dir: str = constants.ORIGINAL_DIR
    fullsize_dir: str = constants.FULLSIZE_DIR
    thumbnail_dir: str = constants.THUMBNAIL_DIR
    directory_mode: int = constants.DIRECTORY_MODE
    file_mode: int = constants.FILE_MODE
    image_extension: str = constants.IMAGE_EXTENSION
    video_extension: str = constants.VIDEO_EXTENSION
    jpeg_quality: int = constants.JPEG_QUALITY

    html_file: str = constants.HTML_FILE
    manifest_file: str = constants.MANIFEST_FILE
    back_icon: str = constants.BACK_ICON
    folder_icon: str = constants.FOLDER_ICON

    thumbnail_width: int = constants.THUMBNAIL_WIDTH
    thumbnail_height: int = constants.THUMBNAIL_HEIGHT
    fullsize_max_width: int = constants.FULLSIZE_MAX_WIDTH
    fullsize_max_height: int = constants.FULLSIZE_MAX_HEIGHT
    video_max_size: int = constants.VIDEO_MAX_SIZE

    concurrency: int = field(default_factory=_default_concurrency)
    queue_size: int = constants.QUEUE_SIZE
    ignore_videos: bool = False
    copy_originals: bool = False

    def __post_init__(self) -> None:
        if self.concurrency <= 0:
            self.concurrency = _default_concurrency()

    @property
    def reserved_directories(self) -> frozenset[str]:
        return frozenset({self.thumbnail_dir, self.fullsize_dir, self.original_dir})

    def reserved_directory(self, name: str) -> bool:
        """Return True if *name* is one of the engine-owned gallery subdirectories."""
        return name in self.reserved_directories

    def reserved_file(self, name: str) -> bool:
        """Return True if *name* is an asset file written by the engine."""
        return name in (self.back_icon, self.folder_icon, self.manifest_file)

    def gallery_directory_names(self, gallery_directory: Path) -> tuple[Path, Path, Path]:
        """Return the (thumbnail, full-size, original) directories under *gallery_directory*."""
        return (
            gallery_directory / self.thumbnail_dir,
            gallery_directory / self.fullsize_dir,
            gallery_directory / self.original_dir,
        )

    def gallery_filenames(self, source_filename: str) -> tuple[str, str]:
        """Return the (thumbnail, full-size) filenames derived from a source filename.

        Raises:
            ValueError: If the file is neither an image nor a video.
        """
        basename = strip_extension(source_filename)
        thumbnail = basename + self.image_extension
        if is_image_file(source_filename):
            fullsize = basename + self.image_extension
        elif is_video_file(source_filename):
            fullsize = basename + self.video_extension
        else:
            raise ValueError(f"Could not infer whether file is image or video: {source_filename}")
        return thumbnail, fullsize
