"""Image renditions with Pillow."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import pillow_heif
from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

from fastgallery.config import GalleryConfig
from fastgallery.errors import TransformError
from fastgallery.transform.geometry import cover_and_crop, fit_within

logger = logging.getLogger(__name__)

pillow_heif.register_heif_opener()

# Play button diameter relative to the shorter thumbnail side
PLAY_BUTTON_RATIO = 0.4


def _to_rgb(img: Image.Image) -> Image.Image:
    has_alpha = img.mode in ("LA", "RGBA") or (img.mode == "P" and "transparency" in img.info)
    if has_alpha:
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def _save_jpeg(img: Image.Image, destination: Path, config: GalleryConfig) -> None:
    img.save(destination, "JPEG", quality=config.jpeg_quality, optimize=True, progressive=True)
    os.chmod(destination, config.file_mode)


def render_fullsize(img: Image.Image, config: GalleryConfig) -> Image.Image:
    size = fit_within(img.width, img.height, config.fullsize_max_width, config.fullsize_max_height)
    if size == img.size:
        return img
    return img.resize(size, Image.Resampling.LANCZOS)


def render_thumbnail(img: Image.Image, config: GalleryConfig) -> Image.Image:
    size, box = cover_and_crop(img.width, img.height, config.thumbnail_width, config.thumbnail_height)
    scaled = img.resize(size, Image.Resampling.LANCZOS)
    if box == (0, 0) + size:
        return scaled
    return scaled.crop(box)


def transform_image(source: Path, fullsize_destination: Path, thumbnail_destination: Path, config: GalleryConfig) -> None:
    """Write the full-size rendition and the thumbnail of an image.

    The source is decoded and rotated once; the thumbnail is written last.

    Raises:
        TransformError: If the image can't be decoded or an output can't be written.
    """
    if config.image_extension != ".jpg":
        raise TransformError(source, f"Invalid target format for full-size image: {config.image_extension}")
    try:
        with Image.open(source) as opened:
            img = _to_rgb(ImageOps.exif_transpose(opened))
            _save_jpeg(render_fullsize(img, config), fullsize_destination, config)
            _save_jpeg(render_thumbnail(img, config), thumbnail_destination, config)
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
        raise TransformError(source, f"couldn't transform image: {exc}") from exc
    logger.debug("Wrote %s and %s", fullsize_destination, thumbnail_destination)


def play_button(diameter: int) -> Image.Image:
    """Draw a translucent round play button on a transparent canvas."""
    overlay = Image.new("RGBA", (diameter, diameter), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    draw.ellipse((0, 0, diameter - 1, diameter - 1), fill=(0, 0, 0, 140), outline=(255, 255, 255, 220), width=max(1, diameter // 20))
    inset = diameter // 3
    draw.polygon(
        [(inset + diameter // 12, inset), (inset + diameter // 12, diameter - inset), (diameter - inset + diameter // 12, diameter // 2)],
        fill=(255, 255, 255, 230),
    )
    return overlay


def composite_play_button(thumbnail: Path, config: GalleryConfig) -> None:
    """Overlay a play button in the middle of a video thumbnail, in place.

    Raises:
        TransformError: If the thumbnail can't be read or rewritten.
    """
    try:
        with Image.open(thumbnail) as opened:
            img = opened.convert("RGBA")
        diameter = max(2, int(min(img.size) * PLAY_BUTTON_RATIO))
        button = play_button(diameter)
        position = ((img.width - diameter) // 2, (img.height - diameter) // 2)
        img.alpha_composite(button, dest=position)
        _save_jpeg(img.convert("RGB"), thumbnail, config)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise TransformError(thumbnail, f"couldn't composite play button overlay: {exc}") from exc
