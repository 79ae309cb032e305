"""Directory trees: scanning, reconciliation and change counting."""

from .models import DirectoryNode, MediaFile
from .reconcile import count_changes, find_missing_html_files, has_directory_changed, reconcile
from .scanner import dir_has_media_files, scan

__all__ = [
    "DirectoryNode",
    "MediaFile",
    "count_changes",
    "dir_has_media_files",
    "find_missing_html_files",
    "has_directory_changed",
    "reconcile",
    "scan",
]
