from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from fastgallery.utils.files import safe_remove

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TransformationJob:
    """All output paths for one source file."""

    filename: str
    source_filepath: Path
    thumbnail_filepath: Path
    fullsize_filepath: Path
    original_filepath: Path

    @property
    def outputs(self) -> tuple[Path, Path, Path]:
        return self.thumbnail_filepath, self.fullsize_filepath, self.original_filepath


def remove_outputs(job: TransformationJob) -> None:
    """Best-effort removal of every artifact a job may have written."""
    for output in job.outputs:
        try:
            safe_remove(output)
        except OSError:
            logger.warning("Couldn't remove partial output %s of %s", output, job.source_filepath)


class WipRegistry:
    """Jobs currently in flight, keyed by source path.

    Workers register a job right before transforming it and unregister it once
    it has succeeded or been cleaned up. On interruption :meth:`scrub` deletes
    the outputs of everything still registered and closes the registry: no new
    job can be registered afterwards, and a job still running at that point
    removes its own outputs when it unregisters. The lock is only held for map
    updates and for the scrub itself.
    """

    def __init__(self) -> None:
        self._jobs: dict[Path, TransformationJob] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def register(self, job: TransformationJob) -> bool:
        """Track *job*. Returns False, tracking nothing, once the registry is closed."""
        with self._lock:
            if self._closed:
                return False
            self._jobs[job.source_filepath] = job
            return True

    def unregister(self, job: TransformationJob) -> bool:
        """Forget a finished job.

        Returns False if the registry was closed while the job ran; its outputs
        are removed in that case.
        """
        with self._lock:
            self._jobs.pop(job.source_filepath, None)
            closed = self._closed
        if closed:
            logger.info("Removing outputs of %s finished after interrupt", job.source_filepath)
            remove_outputs(job)
        return not closed

    def discard(self, job: TransformationJob) -> None:
        """Remove a failed job's partial outputs and forget it."""
        remove_outputs(job)
        with self._lock:
            self._jobs.pop(job.source_filepath, None)

    def scrub(self) -> list[TransformationJob]:
        """Close the registry, delete the outputs of every registered job and return those jobs."""
        with self._lock:
            self._closed = True
            jobs = list(self._jobs.values())
            for job in jobs:
                logger.info("Removing unfinished outputs of %s", job.source_filepath)
                remove_outputs(job)
            self._jobs.clear()
        return jobs

    def __contains__(self, source_filepath: object) -> bool:
        with self._lock:
            return source_filepath in self._jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
