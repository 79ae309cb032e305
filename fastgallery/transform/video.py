"""Video renditions with ffmpeg."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ffmpeg import FFmpeg

from fastgallery.config import GalleryConfig
from fastgallery.errors import MissingToolError, TransformError
from fastgallery.transform.image import composite_play_button

logger = logging.getLogger(__name__)


def check_ffmpeg() -> None:
    """Fail fast if ffmpeg isn't installed.

    Raises:
        MissingToolError: If ``ffmpeg`` is not on PATH.
    """
    if shutil.which("ffmpeg") is None:
        raise MissingToolError("ffmpeg is required to convert videos but was not found on PATH")


def _run(ffmpeg: FFmpeg, source: Path, operation: str) -> None:
    try:
        ffmpeg.execute()
    except Exception as exc:
        logger.error("ffmpeg %s failed for %s: %s", operation, source, exc)
        raise TransformError(source, f"ffmpeg {operation} failed: {exc}") from exc


def transcode_fullsize(source: Path, destination: Path, config: GalleryConfig) -> None:
    size = config.video_max_size
    ffmpeg = (
        FFmpeg()
        .option("y")
        .option("loglevel", "error")
        .input(str(source))
        .output(
            str(destination),
            {"c:v": "libx264", "c:a": "aac"},
            pix_fmt="yuv420p",
            movflags="faststart",
            r="24",
            vf=f"scale='min({size},iw)':'min({size},ih)':force_original_aspect_ratio=decrease:force_divisible_by=2",
            crf="28",
        )
    )
    _run(ffmpeg, source, "full-size transcode")


def extract_thumbnail(source: Path, destination: Path, config: GalleryConfig) -> None:
    width, height = config.thumbnail_width, config.thumbnail_height
    ffmpeg = (
        FFmpeg()
        .option("y")
        .option("loglevel", "error")
        .input(str(source))
        .output(
            str(destination),
            ss="00:00:00",
            vframes="1",
            vf=f"scale={width}:{height}:force_original_aspect_ratio=increase:force_divisible_by=2,crop={width}:{height}",
        )
    )
    _run(ffmpeg, source, "thumbnail")


def transform_video(source: Path, fullsize_destination: Path, thumbnail_destination: Path, config: GalleryConfig) -> None:
    """Transcode the full-size video, then grab and decorate its thumbnail frame.

    Raises:
        TransformError: If ffmpeg fails or the overlay can't be applied.
    """
    transcode_fullsize(source, fullsize_destination, config)
    extract_thumbnail(source, thumbnail_destination, config)
    composite_play_button(thumbnail_destination, config)
    logger.debug("Wrote %s and %s", fullsize_destination, thumbnail_destination)
