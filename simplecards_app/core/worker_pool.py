"""
Bounded background worker pool.

A fixed number of daemon threads consume a single shared bounded queue. Each
queued item only has to provide ``do(stop_event)``; the pool hands every item
the same ``threading.Event`` so long-running work can notice shutdown.

Lifecycle:
    Created  -> ``process_queue()`` -> Running
    Running  -> ``close()``         -> Closing (new work is rejected)
    Closing  -> ``wait()``          -> Drained (every worker thread returned)

Example:
    >>> pool = WorkerPool[CSVImportWork](4, name="CSVImportPool")
    >>> pool.process_queue()
    >>> pool.queue_work(work)
    >>> pool.close()
    >>> pool.wait()
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Generic, Optional, Protocol, TypeVar

DEFAULT_QUEUE_SIZE = 64


class WorkerPoolClosedError(RuntimeError):
    """Raised by ``queue_work`` once the pool has been closed."""

    def __init__(self, message: str = "worker pool has been already closed"):
        super().__init__(message)


class Work(Protocol):
    """A unit of work runnable by :class:`WorkerPool`."""

    def do(self, stop_event: threading.Event) -> None:
        ...


W = TypeVar("W", bound=Work)


class WorkerPool(Generic[W]):
    """
    Fixed-size pool of worker threads draining one bounded queue.

    Attributes:
        name: Prefix used for thread names and log lines
        workers_amount: Number of worker threads started by ``process_queue``
        closed: True once ``close`` has been called
        pending: Number of items waiting in the queue
    """

    def __init__(
        self,
        workers_amount: int,
        *,
        name: str = "WorkerPool",
        queue_size: int = DEFAULT_QUEUE_SIZE,
        logger: Optional[logging.Logger] = None,
        poll_interval: float = 0.1,
    ):
        if workers_amount < 1:
            raise ValueError("workers_amount must be at least 1")

        self.name = name
        self._workers_amount = workers_amount
        self._queue: "queue.Queue[W]" = queue.Queue(maxsize=queue_size)
        self._poll_interval = poll_interval
        self._log = logger or logging.getLogger(__name__)

        # Shared stop signal: worker loops + the item each one is running
        self._stop_event = threading.Event()
        self._state_lock = threading.Lock()
        self._closed = False
        self._started = False
        self._threads: list[threading.Thread] = []

    @property
    def workers_amount(self) -> int:
        return self._workers_amount

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def queue_work(self, work: W) -> None:
        """
        Enqueue ``work`` for execution by one of the workers.

        A full queue blocks the caller until a worker frees a slot. Closing
        the pool releases blocked callers with ``WorkerPoolClosedError``.

        Raises:
            WorkerPoolClosedError: the pool has been closed
        """
        while True:
            with self._state_lock:
                if self._closed:
                    raise WorkerPoolClosedError()
                try:
                    self._queue.put_nowait(work)
                    return
                except queue.Full:
                    pass

            self._stop_event.wait(self._poll_interval)

    def process_queue(self) -> None:
        """Start the worker threads. Calling it again, or after close, does nothing."""
        with self._state_lock:
            if self._closed or self._started:
                return
            self._started = True
            self._threads = [
                threading.Thread(
                    target=self._worker,
                    args=(worker_id,),
                    daemon=True,
                    name=f"{self.name}-{worker_id}",
                )
                for worker_id in range(self._workers_amount)
            ]

        for thread in self._threads:
            thread.start()

        self._log.info("%s started with %d workers", self.name, self._workers_amount)

    def close(self) -> None:
        """
        Reject further work and tell workers to stop after their current item.

        Only the first call has an effect.
        """
        with self._state_lock:
            if self._closed:
                return
            self._closed = True

        self._stop_event.set()
        self._log.info("%s closing...", self.name)

    def wait(self, timeout: Optional[float] = None) -> None:
        """
        Block until every worker thread has returned.

        Must follow ``close()``: without it the workers never stop and this
        call blocks forever (unless ``timeout`` is given).
        """
        for thread in self._threads:
            thread.join(timeout)
            if thread.is_alive():
                self._log.warning("%s: thread %s still running after timeout", self.name, thread.name)

        discarded = self._queue.qsize()
        if self._closed and discarded:
            self._log.warning("%s drained, %d queued item(s) discarded", self.name, discarded)

    def _worker(self, worker_id: int) -> None:
        self._log.debug("[%s-%d] started", self.name, worker_id)

        while not self._stop_event.is_set():
            try:
                work = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue

            try:
                work.do(self._stop_event)
            except Exception:
                self._log.exception("[%s-%d] unhandled error in %r", self.name, worker_id, work)
            finally:
                self._queue.task_done()

        self._log.debug("[%s-%d] stopped", self.name, worker_id)

    def __repr__(self) -> str:
        return (
            f"WorkerPool(name={self.name!r}, workers={self._workers_amount}, "
            f"pending={self.pending}, closed={self._closed})"
        )
