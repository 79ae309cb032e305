from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Callable

from fastgallery.config import GalleryConfig
from fastgallery.sync.jobs import TransformationJob, WipRegistry
from fastgallery.transform import create_original, transform_image, transform_video
from fastgallery.tree.models import DirectoryNode
from fastgallery.utils.files import create_directory
from fastgallery.utils.media import is_image_file, is_video_file


logger = logging.getLogger(__name__)

Transformer = Callable[[Path, Path, Path, GalleryConfig], None]
OriginalCreator = Callable[[Path, Path, GalleryConfig], None]

# Sentinel telling a worker the queue is closed
_STOP = object()


class MediaScheduler:
	"""Turn pending source files into jobs and run them on a worker pool.

	Each call to :meth:`create_media` handles one directory: it starts
	``config.concurrency`` threads, feeds them through a bounded queue, closes
	the queue and waits for the pool to drain. Failures of single jobs are
	logged and cleaned up; the run goes on.
	"""

	def __init__(
		self,
		config: GalleryConfig,
		registry: WipRegistry,
		*,
		image_transformer: Transformer = transform_image,
		video_transformer: Transformer = transform_video,
		original_creator: OriginalCreator = create_original,
		on_progress: Callable[[], None] | None = None,
		thread_factory: Callable[[Callable[[queue.Queue], None], tuple[queue.Queue]], threading.Thread] | None = None,
	) -> None:
		self.config = config
		self.registry = registry
		self.image_transformer = image_transformer
		self.video_transformer = video_transformer
		self.original_creator = original_creator
		self.on_progress = on_progress
		self._thread_factory = thread_factory or self._default_thread_factory
		self._counter_lock = threading.Lock()
		self.converted = 0
		self.failed = 0

	@staticmethod
	def _default_thread_factory(target: Callable[[queue.Queue], None], args: tuple[queue.Queue]) -> threading.Thread:
		return threading.Thread(target=target, args=args, daemon=True)

	def make_job(self, source: DirectoryNode, filename: str, gallery_directory: Path) -> TransformationJob:
		thumbnail_dir, fullsize_dir, original_dir = self.config.gallery_directory_names(gallery_directory)
		thumbnail_name, fullsize_name = self.config.gallery_filenames(filename)
		return TransformationJob(
			filename=filename,
			source_filepath=source.absolute_path / filename,
			thumbnail_filepath=thumbnail_dir / thumbnail_name,
			fullsize_filepath=fullsize_dir / fullsize_name,
			original_filepath=original_dir / filename,
		)

	def create_media(self, source: DirectoryNode, gallery_directory: Path, dry_run: bool = False) -> None:
		"""Create thumbnail, full-size and original for each pending file of *source*.

		Only this directory is handled; the caller walks the tree.
		"""
		for reserved in self.config.gallery_directory_names(gallery_directory):
			create_directory(reserved, dry_run, self.config.directory_mode)

		pending = [media for media in source.files if not media.up_to_date]
		if not pending:
			return

		if dry_run:
			for media in pending:
				job = self.make_job(source, media.name, gallery_directory)
				logger.info(
					"Would convert: %s -> %s, %s, %s",
					job.source_filepath,
					job.thumbnail_filepath,
					job.fullsize_filepath,
					job.original_filepath,
				)
			return

		jobs: queue.Queue = queue.Queue(maxsize=self.config.queue_size)
		workers = [self._thread_factory(self._worker, (jobs,)) for _ in range(self.config.concurrency)]
		for worker in workers:
			worker.start()

		for media in pending:
			jobs.put(self.make_job(source, media.name, gallery_directory))
		for _ in workers:
			jobs.put(_STOP)

		for worker in workers:
			worker.join()

	def update_media_files(self, source: DirectoryNode, gallery_root: Path, dry_run: bool = False) -> None:
		"""Walk the reconciled source tree and convert every pending file."""
		gallery_directory = gallery_root / source.relative_path
		if any(not media.up_to_date for media in source.files):
			self.create_media(source, gallery_directory, dry_run)

		for subdir in source.subdirectories:
			create_directory(gallery_root / subdir.relative_path, dry_run, self.config.directory_mode)
			self.update_media_files(subdir, gallery_root, dry_run)

	def _worker(self, jobs: queue.Queue) -> None:
		while True:
			job = jobs.get()
			if job is _STOP:
				return
			try:
				self.transform_file(job)
			except Exception:
				# Keep draining, or the producer blocks on the full queue
				logger.exception("Worker error while handling %s", job.source_filepath)

	def transform_file(self, job: TransformationJob) -> bool:
		"""Run one job. Returns True if all three artifacts were written."""
		if not self.registry.register(job):
			logger.debug("Interrupted, skipping %s", job.source_filepath)
			return False
		try:
			if is_image_file(job.filename):
				self.image_transformer(job.source_filepath, job.fullsize_filepath, job.thumbnail_filepath, self.config)
			elif is_video_file(job.filename):
				self.video_transformer(job.source_filepath, job.fullsize_filepath, job.thumbnail_filepath, self.config)
			else:
				raise ValueError(f"Could not infer whether file is image or video: {job.source_filepath}")
			self.original_creator(job.source_filepath, job.original_filepath, self.config)
		except Exception:
			logger.exception("Failed to convert media file: %s", job.source_filepath)
			self.registry.discard(job)
			self._finished(success=False)
			return False

		if not self.registry.unregister(job):
			return False
		self._finished(success=True)
		logger.info("Converted media file: %s", job.source_filepath)
		return True

	def _finished(self, success: bool) -> None:
		with self._counter_lock:
			if success:
				self.converted += 1
			else:
				self.failed += 1
		if self.on_progress:
			self.on_progress()
