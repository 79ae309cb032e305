"""Gallery web pages, manifest and static assets."""

from .assets import copy_root_assets, create_manifest
from .html import create_html, update_html_files

__all__ = ["copy_root_assets", "create_html", "create_manifest", "update_html_files"]
