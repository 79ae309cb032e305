"""
main.py

Package fastgallery
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler
from typer import Typer, Option, Argument

from fastgallery.config import GalleryConfig
from fastgallery.errors import GalleryError

logger = logging.getLogger(__name__)

app = Typer()


@app.callback()
def callback(
        verbose: bool = Option(False, "-v", "--verbose", help='Show verbose output.'),
        log: Annotated[Path, Option("-l", "--log", help='Log file to save errors and failed filenames to.', dir_okay=False)] = None,
):
    handlers: list[logging.Handler] = [RichHandler()]
    if log:
        file_handler = logging.FileHandler(log, mode='a', encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        handlers.append(file_handler)
    logging.basicConfig(
        level="DEBUG" if verbose else "INFO", format="%(message)s", datefmt="[%X]", handlers=handlers, force=True
    )
    logging.getLogger("PIL").setLevel(logging.WARNING)


@app.command()
def build(
        source: Path = Argument(..., help='Source directory for images/videos.'),
        gallery: Path = Argument(..., help='Destination directory to create gallery in.'),
        dry_run: Annotated[bool, Option("--dry-run", help="Don't change anything, just log what would be done.")] = False,
        cleanup: Annotated[bool, Option("-c", "--cleanup", help="Delete files and directories in gallery which don't exist in source.")] = False,
        no_videos: Annotated[bool, Option("--no-videos", help='Ignore videos, only include images.')] = False,
        concurrency: Annotated[int, Option("-j", "--concurrency", help='Number of parallel conversions (default: CPU count, at most 4).')] = 0,
        copy_originals: Annotated[bool, Option("--copy-originals", help='Copy original files into the gallery instead of symlinking them.')] = False,
):
    """Create or update a gallery from a source directory."""
    from fastgallery.sync import build_gallery
    from fastgallery.validate import validate_source_and_gallery

    config = GalleryConfig(concurrency=concurrency, ignore_videos=no_videos, copy_originals=copy_originals)
    try:
        source, gallery = validate_source_and_gallery(source, gallery)
        result = build_gallery(source, gallery, config, dry_run=dry_run, clean_up=cleanup)
    except GalleryError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1)

    typer.echo(
        f"Converted {result.converted} of {result.pending} pending media files"
        f" ({result.failed} failed), {result.html_written} HTML files, {result.cleaned} stale entries cleaned."
    )


@app.command()
def status(
        source: Path = Argument(..., help='Source directory for images/videos.'),
        gallery: Path = Argument(..., help='Gallery directory to compare against.'),
        no_videos: Annotated[bool, Option("--no-videos", help='Ignore videos, only include images.')] = False,
):
    """Report pending and stale media without touching the gallery."""
    from fastgallery.sync import gallery_status
    from fastgallery.validate import validate_source_and_gallery

    config = GalleryConfig(ignore_videos=no_videos)
    try:
        source, gallery = validate_source_and_gallery(source, gallery)
        report = gallery_status(source, gallery, config)
    except GalleryError as exc:
        logger.error(str(exc))
        raise typer.Exit(code=1)

    typer.echo(f"Pending media files: {report.pending}")
    typer.echo(f"Stale gallery files: {report.stale}")
    typer.echo(f"Missing HTML files: {'yes' if report.missing_html else 'no'}")


if __name__ == '__main__':
    app()
