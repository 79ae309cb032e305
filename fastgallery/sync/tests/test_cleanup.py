from __future__ import annotations

from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.sync.cleanup import clean_up
from fastgallery.tree import count_changes, reconcile, scan


def _touch(path: Path) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_bytes(b"00")
	return path


def _make_triple(gallery_dir: Path, basename: str, fullsize_ext: str = ".jpg", original_ext: str = ".jpg") -> None:
	_touch(gallery_dir / "_thumbnail" / f"{basename}.jpg")
	_touch(gallery_dir / "_fullsize" / f"{basename}{fullsize_ext}")
	_touch(gallery_dir / "_original" / f"{basename}{original_ext}")


def _reconciled(tmp_path: Path, config: GalleryConfig):
	source = scan(tmp_path / "source")
	gallery = scan(tmp_path / "gallery")
	reconcile(source, gallery, config)
	return source, gallery


def test_clean_up_removes_orphaned_artifacts(tmp_path: Path) -> None:
	config = GalleryConfig(concurrency=1)
	_touch(tmp_path / "source" / "a.jpg")
	_make_triple(tmp_path / "gallery", "a")
	_make_triple(tmp_path / "gallery", "b", fullsize_ext=".mp4", original_ext=".mp4")
	_, gallery = _reconciled(tmp_path, config)

	assert clean_up(gallery, False, config) == 3

	remaining = sorted(str(p.relative_to(tmp_path / "gallery")) for p in (tmp_path / "gallery").rglob("*") if p.is_file())
	assert remaining == ["_fullsize/a.jpg", "_original/a.jpg", "_thumbnail/a.jpg"]
	_, gallery = _reconciled(tmp_path, config)
	assert count_changes(gallery, config) == 0


def test_clean_up_removes_whole_stale_directories(tmp_path: Path) -> None:
	config = GalleryConfig(concurrency=1)
	_touch(tmp_path / "source" / "keep" / "a.jpg")
	_make_triple(tmp_path / "gallery" / "keep", "a")
	_make_triple(tmp_path / "gallery" / "gone", "b")
	_make_triple(tmp_path / "gallery" / "keep" / "nested", "c")
	_, gallery = _reconciled(tmp_path, config)

	assert clean_up(gallery, False, config) == 2

	assert not (tmp_path / "gallery" / "gone").exists()
	assert not (tmp_path / "gallery" / "keep" / "nested").exists()
	assert (tmp_path / "gallery" / "keep" / "_thumbnail" / "a.jpg").exists()


def test_clean_up_keeps_reserved_assets(tmp_path: Path) -> None:
	config = GalleryConfig(concurrency=1)
	_touch(tmp_path / "source" / "a.jpg")
	_make_triple(tmp_path / "gallery", "a")
	(tmp_path / "gallery" / "back.svg").write_text("<svg/>")
	(tmp_path / "gallery" / "index.html").write_text("<html/>")
	_, gallery = _reconciled(tmp_path, config)

	assert clean_up(gallery, False, config) == 0

	assert (tmp_path / "gallery" / "back.svg").exists()
	assert (tmp_path / "gallery" / "index.html").exists()


def test_clean_up_dry_run_only_logs(tmp_path: Path, caplog) -> None:
	config = GalleryConfig(concurrency=1)
	_touch(tmp_path / "source" / "a.jpg")
	_make_triple(tmp_path / "gallery", "b")
	_, gallery = _reconciled(tmp_path, config)

	with caplog.at_level("INFO"):
		assert clean_up(gallery, True, config) == 3

	assert (tmp_path / "gallery" / "_thumbnail" / "b.jpg").exists()
	assert "Would clean up file" in caplog.text
