"""Media synchronisation: job scheduling, crash cleanup and garbage collection."""

from .cleanup import clean_up
from .jobs import TransformationJob, WipRegistry
from .pipeline import BuildResult, GalleryStatus, build_gallery, gallery_status
from .scheduler import MediaScheduler
from .signals import handle_interrupts, make_signal_handler

__all__ = [
    "BuildResult",
    "GalleryStatus",
    "MediaScheduler",
    "TransformationJob",
    "WipRegistry",
    "build_gallery",
    "clean_up",
    "gallery_status",
    "handle_interrupts",
    "make_signal_handler",
]
