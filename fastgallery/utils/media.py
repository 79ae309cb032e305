"""Media file classification by extension."""
from __future__ import annotations

import os

from fastgallery.constants import IMAGE_EXTS, VIDEO_EXTS

__all__ = ["is_image_file", "is_media_file", "is_video_file", "strip_extension"]


def _extension(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return ext.lower()


def is_image_file(filename: str) -> bool:
    return _extension(filename) in IMAGE_EXTS


def is_video_file(filename: str) -> bool:
    return _extension(filename) in VIDEO_EXTS


def is_media_file(filename: str, ignore_videos: bool = False) -> bool:
    """Return True for images, and for videos unless *ignore_videos* is set."""
    if is_image_file(filename):
        return True
    return not ignore_videos and is_video_file(filename)


def strip_extension(filename: str) -> str:
    """Return *filename* without its last extension."""
    stem, _ = os.path.splitext(filename)
    return stem
