from __future__ import annotations

import logging
import os
import signal
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from fastgallery.sync.jobs import WipRegistry

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def make_signal_handler(registry: WipRegistry, exit_func: Callable[[int], None] = os._exit):
    """Return a handler that scrubs in-flight outputs and terminates the process.

    The handler doesn't wait for workers: a worker blocked in ffmpeg or Pillow
    can't be interrupted, so the process is ended hard once the registered
    jobs' outputs are gone. The scrub closes the registry, so no worker starts
    a new job before the exit.
    """

    def handler(signum: int, _frame) -> None:
        logger.warning("%s received, cleaning up and aborting...", signal.Signals(signum).name)
        jobs = registry.scrub()
        logger.warning("Removed outputs of %d unfinished jobs", len(jobs))
        for log_handler in logging.getLogger().handlers:
            log_handler.flush()
        exit_func(128 + signum)

    return handler


@contextmanager
def handle_interrupts(registry: WipRegistry, exit_func: Callable[[int], None] = os._exit) -> Iterator[None]:
    """Install the cleanup handler for SIGINT/SIGTERM for the duration of the block.

    Signal handlers can only be set from the main thread; elsewhere this is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        logger.debug("Not in the main thread, interrupt cleanup not installed")
        yield
        return

    handler = make_signal_handler(registry, exit_func)
    previous = {signum: signal.signal(signum, handler) for signum in HANDLED_SIGNALS}
    try:
        yield
    finally:
        for signum, old in previous.items():
            signal.signal(signum, old if old is not None else signal.SIG_DFL)
