"""Index pages for every mirrored gallery directory.

Pages are rendered with the Django template engine used standalone; only
strings and lists of string dicts are handed to templates, so no Django
settings are needed.
"""
from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from urllib.parse import quote

from django.template import Context, Engine

from fastgallery.config import GalleryConfig
from fastgallery.errors import GalleryError
from fastgallery.render.assets import asset_files
from fastgallery.tree.models import DirectoryNode
from fastgallery.tree.reconcile import has_directory_changed
from fastgallery.utils.media import is_video_file

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
HTML_TEMPLATE = "gallery.html"


def _url(*parts: str) -> str:
    return quote(posixpath.join(*parts))


def render_template(name: str, values: dict[str, object]) -> str:
    """Render a bundled template with *values*."""
    engine = Engine(autoescape=True)
    tpl = engine.from_string((TEMPLATES_DIR / name).read_text(encoding="utf-8"))
    return tpl.render(Context(values))


def html_context(depth: int, source: DirectoryNode, config: GalleryConfig) -> dict[str, object]:
    """Collect everything the gallery page of *source* links to.

    Args:
        depth: How many directories below the gallery root the page lives.
        source: Reconciled source directory the page describes.
        config: Gallery configuration.
    """
    root_escape = "../" * depth

    files = []
    for media in source.files:
        thumbnail_name, fullsize_name = config.gallery_filenames(media.name)
        files.append({
            "filename": media.name,
            "thumbnail": _url(config.thumbnail_dir, thumbnail_name),
            "fullsize": _url(config.fullsize_dir, fullsize_name),
            "original": _url(config.original_dir, media.name),
            "video": "true" if is_video_file(media.name) else "false",
        })

    subdirectories = [
        {"name": subdir.name, "url": _url(subdir.name, config.html_file)}
        for subdir in source.subdirectories
    ]

    stylesheets = [root_escape + quote(name) for name in asset_files(".css")]
    scripts = [root_escape + quote(name) for name in asset_files(".js")]

    return {
        "title": source.name,
        "files": files,
        "subdirectories": subdirectories,
        "stylesheets": stylesheets,
        "scripts": scripts,
        "manifest": root_escape + quote(config.manifest_file),
        "html_file": config.html_file,
        "back_icon": root_escape + quote(config.back_icon) if depth > 0 else "",
        "folder_icon": root_escape + quote(config.folder_icon),
    }


def create_html(depth: int, source: DirectoryNode, gallery_directory: Path, dry_run: bool, config: GalleryConfig) -> None:
    """Write the index page of one gallery directory."""
    html_path = gallery_directory / config.html_file
    if dry_run:
        logger.info("Would create HTML file: %s", html_path)
        return

    content = render_template(HTML_TEMPLATE, html_context(depth, source, config))
    try:
        html_path.write_text(content, encoding="utf-8")
        os.chmod(html_path, config.file_mode)
    except OSError as exc:
        raise GalleryError(f"Couldn't create HTML file {html_path}: {exc}") from exc
    logger.info("Created HTML file: %s", html_path)


def update_html_files(
        source: DirectoryNode,
        gallery: DirectoryNode,
        dry_run: bool,
        clean_up: bool,
        config: GalleryConfig,
        depth: int = 0,
) -> int:
    """Regenerate the index page of every directory whose content changed.

    Returns the number of pages written (or that would be, in a dry run).
    """
    gallery_directory = gallery.absolute_path / source.relative_path
    counterpart = gallery.find(source.relative_path)
    written = 0
    if has_directory_changed(source, counterpart, gallery_directory, clean_up, config):
        create_html(depth, source, gallery_directory, dry_run, config)
        written += 1

    for subdir in source.subdirectories:
        written += update_html_files(subdir, gallery, dry_run, clean_up, config, depth + 1)
    return written
