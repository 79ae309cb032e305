"""In-memory directory trees built by the scanner."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class MediaFile:
    """One recognised image or video.

    ``up_to_date`` depends on the owning tree: for a source file it means a
    current derived triple exists; for a gallery file it means a live source
    file still produces it.
    """

    name: str
    relative_path: Path
    absolute_path: Path
    mtime_ns: int
    up_to_date: bool = False


@dataclass(slots=True)
class DirectoryNode:
    """A directory holding media files somewhere below it.

    For source directories ``up_to_date`` records that the directory exists in
    the gallery; for gallery directories it records that a source counterpart
    exists.
    """

    name: str
    relative_path: Path
    absolute_path: Path
    mtime_ns: int = 0
    files: list[MediaFile] = field(default_factory=list)
    subdirectories: list[DirectoryNode] = field(default_factory=list)
    up_to_date: bool = False

    def subdirectory(self, name: str) -> DirectoryNode | None:
        for subdir in self.subdirectories:
            if subdir.name == name:
                return subdir
        return None

    def find(self, relative_path: Path) -> DirectoryNode | None:
        """Return the descendant at *relative_path*, or None if it isn't in the tree."""
        node: DirectoryNode | None = self
        for part in Path(relative_path).parts:
            if node is None:
                return None
            node = node.subdirectory(part)
        return node

    def walk(self):
        """Yield this node and every descendant, parents first."""
        yield self
        for subdir in self.subdirectories:
            yield from subdir.walk()
