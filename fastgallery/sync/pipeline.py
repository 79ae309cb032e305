"""End-to-end gallery run: scan, reconcile, convert, render and clean up."""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from rich.progress import MofNCompleteColumn, Progress, TimeElapsedColumn

from fastgallery.config import GalleryConfig
from fastgallery.render import copy_root_assets, create_manifest, update_html_files
from fastgallery.sync.cleanup import clean_up as clean_up_gallery
from fastgallery.sync.jobs import WipRegistry
from fastgallery.sync.scheduler import MediaScheduler
from fastgallery.sync.signals import handle_interrupts
from fastgallery.transform import check_ffmpeg
from fastgallery.tree import DirectoryNode, count_changes, find_missing_html_files, reconcile, scan
from fastgallery.utils.files import create_directory
from fastgallery.utils.media import is_video_file
from fastgallery.validate import check_reserved_names

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GalleryStatus:
    """Reconciled trees and the work they imply."""

    source: DirectoryNode
    gallery: DirectoryNode
    pending: int
    stale: int
    missing_html: bool


@dataclass(slots=True)
class BuildResult:
    pending: int
    stale: int
    converted: int = 0
    failed: int = 0
    html_written: int = 0
    cleaned: int = 0


def gallery_status(source_root: Path, gallery_root: Path, config: GalleryConfig) -> GalleryStatus:
    """Scan both trees, reconcile them and count pending and stale entries.

    Raises:
        ValidationError: If the source uses a reserved top-level name.
        FatalScanError: If a directory can't be read.
    """
    check_reserved_names(source_root, config)

    logger.info("Finding all media files...")
    source = scan(source_root, config.ignore_videos)
    gallery = scan(gallery_root, config.ignore_videos)
    reconcile(source, gallery, config)

    return GalleryStatus(
        source=source,
        gallery=gallery,
        pending=count_changes(source, config),
        stale=count_changes(gallery, config),
        missing_html=find_missing_html_files(gallery, config),
    )


def _has_pending_videos(source: DirectoryNode) -> bool:
    return any(
        is_video_file(media.name) and not media.up_to_date
        for node in source.walk()
        for media in node.files
    )


@contextmanager
def progress_bar(total: int) -> Iterator[Callable[[], None]]:
    """Show a rich progress bar and yield a thread-safe advance callback."""
    with Progress(*Progress.get_default_columns(), TimeElapsedColumn(), MofNCompleteColumn(),
                  transient=True) as progress:
        task = progress.add_task("Converting media files", total=total)
        yield lambda: progress.advance(task)


def build_gallery(
        source_root: Path,
        gallery_root: Path,
        config: GalleryConfig,
        *,
        dry_run: bool = False,
        clean_up: bool = False,
        show_progress: bool = True,
        exit_func: Callable[[int], None] = os._exit,
        scheduler_factory: Callable[..., MediaScheduler] = MediaScheduler,
) -> BuildResult:
    """Bring the gallery in sync with the source tree.

    Args:
        source_root: Absolute path of the source directory.
        gallery_root: Absolute path of the gallery directory; created if missing.
        config: Gallery configuration.
        dry_run: Only log what would be done.
        clean_up: Remove gallery entries without a source counterpart.
        show_progress: Display a progress bar while converting.
        exit_func: Called with the exit status after an interrupt has been cleaned up.
        scheduler_factory: Builds the media scheduler; replaced in tests.

    Raises:
        GalleryError: On any fatal validation, scan or environment error.
    """
    logger.info('Creating gallery, source: "%s" gallery: "%s"', source_root, gallery_root)
    registry = WipRegistry()
    # Installed for the whole run; only media jobs ever register outputs
    with handle_interrupts(registry, exit_func):
        return _sync(
            source_root,
            gallery_root,
            config,
            registry,
            dry_run=dry_run,
            clean_up=clean_up,
            show_progress=show_progress,
            scheduler_factory=scheduler_factory,
        )


def _sync(
        source_root: Path,
        gallery_root: Path,
        config: GalleryConfig,
        registry: WipRegistry,
        *,
        dry_run: bool,
        clean_up: bool,
        show_progress: bool,
        scheduler_factory: Callable[..., MediaScheduler],
) -> BuildResult:
    status = gallery_status(source_root, gallery_root, config)
    result = BuildResult(pending=status.pending, stale=status.stale)

    if status.pending > 0:
        logger.info("Updating %d media files.", status.pending)
        if not dry_run and _has_pending_videos(status.source):
            check_ffmpeg()

        create_directory(gallery_root, dry_run, config.directory_mode)
        copy_root_assets(status.gallery, dry_run, config)
        create_manifest(status.gallery, status.source, dry_run, config)

        use_progress = show_progress and not dry_run
        with (progress_bar(status.pending) if use_progress else nullcontext(None)) as advance:
            scheduler = scheduler_factory(config, registry, on_progress=advance)
            scheduler.update_media_files(status.source, gallery_root, dry_run)
        result.converted = scheduler.converted
        result.failed = scheduler.failed
        if result.failed:
            logger.warning("%d media files could not be converted, see the log for details.", result.failed)
        logger.info("All media files updated!")
    else:
        logger.info("All media files already up to date!")

    if status.pending > 0 or status.stale > 0 or status.missing_html:
        logger.info("Updating HTML files...")
        create_directory(gallery_root, dry_run, config.directory_mode)
        result.html_written = update_html_files(status.source, status.gallery, dry_run, clean_up, config)
        logger.info("All HTML files updated!")
    else:
        logger.info("All HTML files already up to date!")

    if clean_up:
        logger.info("Cleaning up gallery...")
        result.cleaned = clean_up_gallery(status.gallery, dry_run, config)
        logger.info("Gallery clean!")

    return result
