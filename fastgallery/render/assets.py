"""Static web assets and the web app manifest written to the gallery root."""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path

from fastgallery.config import GalleryConfig
from fastgallery.errors import GalleryError
from fastgallery.tree.models import DirectoryNode

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

COPIED_EXTS = frozenset({'.js', '.css', '.svg'})
ICON_TYPES = {
    '.png': 'image/png',
    '.svg': 'image/svg+xml',
}
ICON_SIZE_PATTERN = re.compile(r'[0-9]+x[0-9]+')


def asset_files(extension: str | None = None) -> list[str]:
    """Return bundled asset filenames, optionally filtered by extension."""
    names = sorted(p.name for p in ASSETS_DIR.iterdir() if p.is_file())
    if extension is None:
        return names
    return [name for name in names if name.lower().endswith(extension)]


def icon_size(filename: str) -> str:
    """Return the "WxH" size embedded in an icon filename.

    Raises:
        GalleryError: If the filename carries no size.
    """
    match = ICON_SIZE_PATTERN.search(Path(filename).name)
    if not match:
        raise GalleryError(f"Size not found in icon filename: {filename}")
    return match.group(0)


def icon_type(filename: str) -> str:
    """Return the MIME type of an icon from its extension."""
    suffix = Path(filename).suffix.lower()
    try:
        return ICON_TYPES[suffix]
    except KeyError:
        raise GalleryError(f"Could not decide icon filetype: {filename}") from None


def copy_root_assets(gallery: DirectoryNode, dry_run: bool, config: GalleryConfig) -> int:
    """Copy the bundled CSS, JS and icons into the gallery root."""
    copied = 0
    for name in asset_files():
        if Path(name).suffix.lower() not in COPIED_EXTS:
            continue
        target = gallery.absolute_path / name
        if dry_run:
            logger.info("Would copy asset %s to %s", name, gallery.absolute_path)
            copied += 1
            continue
        try:
            target.write_bytes((ASSETS_DIR / name).read_bytes())
            os.chmod(target, config.file_mode)
        except OSError as exc:
            raise GalleryError(f"Couldn't write asset {target}: {exc}") from exc
        logger.debug("Copied asset %s", target)
        copied += 1
    return copied


def manifest_data(source: DirectoryNode, config: GalleryConfig) -> dict[str, object]:
    icons = [
        {"src": name, "sizes": icon_size(name), "type": icon_type(name)}
        for name in asset_files()
        if name.startswith("icon")
    ]
    return {
        "name": source.name,
        "short_name": source.name,
        "start_url": config.html_file,
        "display": "standalone",
        "background_color": "#111111",
        "theme_color": "#111111",
        "icons": icons,
    }


def create_manifest(gallery: DirectoryNode, source: DirectoryNode, dry_run: bool, config: GalleryConfig) -> None:
    """Write the PWA manifest naming the gallery after the source directory."""
    manifest_path = gallery.absolute_path / config.manifest_file
    if dry_run:
        logger.info("Would create web app manifest file: %s", manifest_path)
        return
    try:
        manifest_path.write_text(json.dumps(manifest_data(source, config), indent=2), encoding="utf-8")
        os.chmod(manifest_path, config.file_mode)
    except OSError as exc:
        raise GalleryError(f"Couldn't create manifest file {manifest_path}: {exc}") from exc
    logger.info("Created manifest file: %s", manifest_path)
