"""Media collaborators that write the derived artifacts."""

from .image import composite_play_button, transform_image
from .original import create_original
from .video import check_ffmpeg, transform_video

__all__ = [
    "check_ffmpeg",
    "composite_play_button",
    "create_original",
    "transform_image",
    "transform_video",
]
