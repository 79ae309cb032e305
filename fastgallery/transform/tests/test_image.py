from __future__ import annotations

import stat
from pathlib import Path

import pytest
from PIL import Image

from fastgallery.config import GalleryConfig
from fastgallery.errors import TransformError
from fastgallery.transform.image import composite_play_button, play_button, transform_image


@pytest.fixture()
def config() -> GalleryConfig:
	return GalleryConfig(concurrency=1)


def _write_image(path: Path, size: tuple[int, int], mode: str = "RGB", color=(200, 30, 30), fmt: str | None = None, exif=None) -> Path:
	img = Image.new(mode, size, color)
	kwargs = {"exif": exif} if exif is not None else {}
	img.save(path, fmt, **kwargs)
	return path


def test_transform_image_sizes(tmp_path: Path, config: GalleryConfig) -> None:
	source = _write_image(tmp_path / "big.jpg", (4000, 3000))

	transform_image(source, tmp_path / "full.jpg", tmp_path / "thumb.jpg", config)

	with Image.open(tmp_path / "full.jpg") as full:
		assert full.size == (1440, 1080)
		assert full.format == "JPEG"
	with Image.open(tmp_path / "thumb.jpg") as thumb:
		assert thumb.size == (280, 210)
	assert stat.S_IMODE((tmp_path / "full.jpg").stat().st_mode) == 0o644


def test_transform_image_does_not_upscale(tmp_path: Path, config: GalleryConfig) -> None:
	source = _write_image(tmp_path / "small.png", (100, 50), fmt="PNG")

	transform_image(source, tmp_path / "full.jpg", tmp_path / "thumb.jpg", config)

	with Image.open(tmp_path / "full.jpg") as full:
		assert full.size == (100, 50)
	with Image.open(tmp_path / "thumb.jpg") as thumb:
		assert thumb.size == (280, 210)


def test_transform_image_applies_exif_orientation(tmp_path: Path, config: GalleryConfig) -> None:
	exif = Image.Exif()
	exif[0x0112] = 6  # rotated 90 degrees clockwise
	source = _write_image(tmp_path / "rotated.jpg", (400, 200), exif=exif)

	transform_image(source, tmp_path / "full.jpg", tmp_path / "thumb.jpg", config)

	with Image.open(tmp_path / "full.jpg") as full:
		assert full.size == (200, 400)


def test_transform_image_flattens_alpha(tmp_path: Path, config: GalleryConfig) -> None:
	source = _write_image(tmp_path / "alpha.png", (300, 300), mode="RGBA", color=(0, 0, 0, 0), fmt="PNG")

	transform_image(source, tmp_path / "full.jpg", tmp_path / "thumb.jpg", config)

	with Image.open(tmp_path / "full.jpg") as full:
		assert full.mode == "RGB"
		red, green, blue = full.getpixel((150, 150))
		assert min(red, green, blue) > 240


def test_transform_image_rejects_corrupt_file(tmp_path: Path, config: GalleryConfig) -> None:
	source = tmp_path / "broken.jpg"
	source.write_bytes(b"definitely not a jpeg")

	with pytest.raises(TransformError) as exc_info:
		transform_image(source, tmp_path / "full.jpg", tmp_path / "thumb.jpg", config)

	assert exc_info.value.source == source
	assert not (tmp_path / "thumb.jpg").exists()


def test_transform_image_requires_jpeg_target(tmp_path: Path) -> None:
	source = _write_image(tmp_path / "a.jpg", (10, 10))
	config = GalleryConfig(concurrency=1, image_extension=".png")

	with pytest.raises(TransformError):
		transform_image(source, tmp_path / "full.png", tmp_path / "thumb.png", config)


def test_play_button_is_translucent_in_corners() -> None:
	button = play_button(100)

	assert button.size == (100, 100)
	assert button.getpixel((0, 0))[3] == 0
	assert button.getpixel((70, 50))[3] > 0


def test_composite_play_button_keeps_size(tmp_path: Path, config: GalleryConfig) -> None:
	thumbnail = _write_image(tmp_path / "thumb.jpg", (280, 210), color=(20, 120, 20))

	composite_play_button(thumbnail, config)

	with Image.open(thumbnail) as img:
		assert img.size == (280, 210)
		assert img.getpixel((140, 105)) != (20, 120, 20)


def test_composite_play_button_missing_thumbnail(tmp_path: Path, config: GalleryConfig) -> None:
	with pytest.raises(TransformError):
		composite_play_button(tmp_path / "missing.jpg", config)
