from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from fastgallery.config import GalleryConfig
from fastgallery.errors import MissingToolError, TransformError
from fastgallery.transform import video


class StubFFmpeg:
	"""Records the command line pieces and fakes ffmpeg's output file."""

	instances: list[StubFFmpeg] = []

	def __init__(self, execute_behaviour=None):
		self._execute_behaviour = execute_behaviour
		self.options: list[tuple] = []
		self.inputs: list[str] = []
		self.outputs: list[tuple[str, dict]] = []
		StubFFmpeg.instances.append(self)

	def option(self, *args, **_kwargs):
		self.options.append(args)
		return self

	def input(self, url, *_args, **_kwargs):
		self.inputs.append(url)
		return self

	def output(self, url, options=None, **kwargs):
		self.outputs.append((url, {**(options or {}), **kwargs}))
		return self

	def execute(self):
		if self._execute_behaviour is not None:
			self._execute_behaviour()
		for url, _options in self.outputs:
			destination = Path(url)
			if destination.suffix == ".jpg":
				Image.new("RGB", (280, 210), (10, 10, 10)).save(destination)
			else:
				destination.write_bytes(b"video")


@pytest.fixture(autouse=True)
def reset_instances():
	StubFFmpeg.instances = []


@pytest.fixture()
def config() -> GalleryConfig:
	return GalleryConfig(concurrency=1)


def test_check_ffmpeg_missing(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setattr(video.shutil, "which", lambda _name: None)

	with pytest.raises(MissingToolError):
		video.check_ffmpeg()


def test_check_ffmpeg_present(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.setattr(video.shutil, "which", lambda _name: "/usr/bin/ffmpeg")

	video.check_ffmpeg()


def test_transform_video_builds_both_commands(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, config: GalleryConfig) -> None:
	monkeypatch.setattr(video, "FFmpeg", lambda *args, **kwargs: StubFFmpeg())
	source = tmp_path / "clip.mov"
	source.write_bytes(b"raw")

	video.transform_video(source, tmp_path / "clip.mp4", tmp_path / "clip.jpg", config)

	transcode, thumbnail = StubFFmpeg.instances
	assert transcode.inputs == [str(source)]
	url, options = transcode.outputs[0]
	assert url == str(tmp_path / "clip.mp4")
	assert options["c:v"] == "libx264"
	assert options["pix_fmt"] == "yuv420p"
	assert "min(640,iw)" in options["vf"]
	assert ("y",) in transcode.options

	url, options = thumbnail.outputs[0]
	assert url == str(tmp_path / "clip.jpg")
	assert options["vframes"] == "1"
	assert "crop=280:210" in options["vf"]

	with Image.open(tmp_path / "clip.jpg") as thumb:
		assert thumb.size == (280, 210)
		# Play button overlay brightened the centre
		assert sum(thumb.getpixel((140, 105))) > 30


def test_transform_video_wraps_ffmpeg_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, config: GalleryConfig, caplog) -> None:
	def failing_execute() -> None:
		raise RuntimeError("ffmpeg crashed")

	monkeypatch.setattr(video, "FFmpeg", lambda *args, **kwargs: StubFFmpeg(failing_execute))
	source = tmp_path / "clip.mp4"

	with pytest.raises(TransformError) as exc_info:
		video.transform_video(source, tmp_path / "full.mp4", tmp_path / "thumb.jpg", config)

	assert exc_info.value.source == source
	assert "ffmpeg crashed" in caplog.text
	# The thumbnail is never attempted after a failed transcode
	assert len(StubFFmpeg.instances) == 1
