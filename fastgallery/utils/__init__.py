"""Shared utility helpers for the fastgallery project."""

from .files import create_directory, is_directory, remove_tree, safe_remove
from .media import is_image_file, is_media_file, is_video_file, strip_extension

__all__ = [
    "create_directory",
    "is_directory",
    "is_image_file",
    "is_media_file",
    "is_video_file",
    "remove_tree",
    "safe_remove",
    "strip_extension",
]
