from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from fastgallery.config import GalleryConfig
from fastgallery.errors import GalleryError
from fastgallery.transform.original import create_original
from fastgallery.utils.files import create_directory, is_directory, remove_tree, safe_remove


def test_safe_remove_file(tmp_path: Path) -> None:
	target = tmp_path / "file.jpg"
	target.write_bytes(b"x")

	safe_remove(target)

	assert not target.exists()


def test_safe_remove_missing_file_is_ignored(tmp_path: Path, caplog) -> None:
	caplog.set_level("DEBUG", logger="fastgallery.utils.files")

	safe_remove(tmp_path / "missing.jpg")

	assert "skipped missing file" in caplog.text


def test_safe_remove_refuses_directories(tmp_path: Path) -> None:
	with pytest.raises(IsADirectoryError):
		safe_remove(tmp_path)


def test_safe_remove_symlink_to_directory_removes_link_only(tmp_path: Path) -> None:
	(tmp_path / "real").mkdir()
	link = tmp_path / "link"
	os.symlink(tmp_path / "real", link)

	safe_remove(link)

	assert not link.is_symlink()
	assert (tmp_path / "real").is_dir()


def test_remove_tree(tmp_path: Path) -> None:
	(tmp_path / "stale" / "_thumbnail").mkdir(parents=True)
	(tmp_path / "stale" / "_thumbnail" / "a.jpg").write_bytes(b"x")
	(tmp_path / "file.jpg").write_bytes(b"x")

	remove_tree(tmp_path / "stale")
	remove_tree(tmp_path / "file.jpg")

	assert list(tmp_path.iterdir()) == []


def test_is_directory(tmp_path: Path) -> None:
	(tmp_path / "file").write_text("")
	assert is_directory(tmp_path)
	assert not is_directory(tmp_path / "file")
	assert not is_directory(tmp_path / "missing")


def test_create_directory(tmp_path: Path) -> None:
	target = tmp_path / "gallery"

	create_directory(target, False, 0o755)
	create_directory(target, False, 0o755)

	assert target.is_dir()


def test_create_directory_dry_run(tmp_path: Path, caplog) -> None:
	with caplog.at_level("INFO"):
		create_directory(tmp_path / "gallery", True, 0o755)

	assert not (tmp_path / "gallery").exists()
	assert "Would create directory" in caplog.text


def test_create_directory_failure_is_fatal(tmp_path: Path) -> None:
	with pytest.raises(GalleryError):
		create_directory(tmp_path / "missing" / "gallery", False, 0o755)


def test_create_original_symlinks_and_replaces(tmp_path: Path) -> None:
	source = tmp_path / "a.jpg"
	source.write_bytes(b"image")
	destination = tmp_path / "original.jpg"
	destination.write_bytes(b"old copy")

	create_original(source, destination, GalleryConfig(concurrency=1))

	assert destination.is_symlink()
	assert os.readlink(destination) == str(source)


def test_create_original_copies_when_configured(tmp_path: Path) -> None:
	source = tmp_path / "a.jpg"
	source.write_bytes(b"image")
	destination = tmp_path / "original.jpg"
	os.symlink(tmp_path / "gone.jpg", destination)

	create_original(source, destination, GalleryConfig(concurrency=1, copy_originals=True))

	assert not destination.is_symlink()
	assert destination.read_bytes() == b"image"
	assert stat.S_IMODE(destination.stat().st_mode) == 0o644


def test_create_original_missing_parent_raises(tmp_path: Path) -> None:
	source = tmp_path / "a.jpg"
	source.write_bytes(b"image")

	with pytest.raises(OSError):
		create_original(source, tmp_path / "missing" / "a.jpg", GalleryConfig(concurrency=1))
