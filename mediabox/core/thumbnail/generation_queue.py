"""Module: generation_queue.py

Author: Michael Economou
Date: 2026-10-19

Single-flight, bounded-concurrency runner for thumbnail generation jobs.

Per-key lifecycle:
    absent -> submit() -> pending{waiters=[cb]}
           -> submit() for the same key -> pending{waiters=[cb, cb2, ...]}
           -> task finishes -> every waiter gets the same (error, result),
              in arrival order -> absent

Admission:
- queued (default): new keys wait in a FIFO and are admitted while fewer
  than max_workers queued jobs are running
- instant: a new key skips the FIFO and starts at once on its own pool of
  instant_workers threads; when every instant thread is busy the job gets a
  dedicated thread, so it never waits on queued work

Both modes go through submit(), the only place a job is created, so a key
already pending is always joined and never started twice. A failed job is
not remembered; the next submit() for that key starts a fresh job. There
is no cancellation and no timeout: an admitted job runs to completion.

Thread Safety:
- The key -> job registry, the FIFO and the counters are owned by one
  GenerationQueue instance and guarded by its lock
- A finished job leaves the registry and has its waiters scheduled in one
  critical section
- Tasks run on ThreadPoolExecutors; callbacks are delivered by a
  CallbackDispatcher, never on the thread that called submit()
"""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import psutil

from mediabox.config import THUMBNAIL_INSTANT_WORKERS, THUMBNAIL_QUEUE_WORKERS_CAP
from mediabox.core.errors import GenerationFailure
from mediabox.utils.events import Observable, Signal
from mediabox.utils.logging.logger_factory import get_cached_logger
from mediabox.utils.threading.callback_dispatcher import CallbackDispatcher, ResultCallback

logger = get_cached_logger(__name__)


def default_worker_count() -> int:
    """Physical core count, clamped to 1..THUMBNAIL_QUEUE_WORKERS_CAP."""
    cores = psutil.cpu_count(logical=False) or psutil.cpu_count() or 1
    return max(1, min(cores, THUMBNAIL_QUEUE_WORKERS_CAP))


@dataclass
class GenerationJob:
    """One in-flight unit of work shared by every waiter of its key."""

    key: str
    task: Callable[[], Any]
    instant: bool = False
    waiters: list[ResultCallback] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    started_at: float | None = None

    @property
    def is_running(self) -> bool:
        return self.started_at is not None


@dataclass
class GenerationQueueStats:
    """Generation queue statistics."""

    max_workers: int
    instant_workers: int
    pending_jobs: int
    waiting_jobs: int
    running_queued: int
    running_instant: int
    dedicated_instant: int
    started_jobs: int
    completed_jobs: int
    failed_jobs: int
    joined_requests: int


class GenerationQueue(Observable):
    """Runs at most one job per key, up to max_workers queued jobs at once.

    Signals:
        job_started: Emitted on the worker thread when a job starts (key)
        job_finished: Emitted after waiters are scheduled (key, succeeded)

    """

    job_started = Signal(str)
    job_finished = Signal(str, bool)

    def __init__(
        self,
        max_workers: int | None = None,
        instant_workers: int = THUMBNAIL_INSTANT_WORKERS,
        dispatcher: CallbackDispatcher | None = None,
    ):
        """Initialize the queue.

        Args:
            max_workers: Concurrent queued jobs (None = physical core count)
            instant_workers: Threads kept for instant admissions
            dispatcher: Callback delivery (a private one is created if None)

        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self._max_workers = max_workers or default_worker_count()
        self._instant_workers = max(0, instant_workers)
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="mediabox-thumbnail",
        )
        self._instant_executor = ThreadPoolExecutor(
            max_workers=max(1, self._instant_workers),
            thread_name_prefix="mediabox-thumbnail-instant",
        )
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or CallbackDispatcher()

        self._jobs: dict[str, GenerationJob] = {}
        self._waiting: deque[str] = deque()
        self._running_queued = 0
        self._running_instant = 0
        self._instant_pool_busy = 0
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._closed = False
        self._release_dispatcher_when_idle = False

        self._started = 0
        self._completed = 0
        self._failed = 0
        self._joined = 0
        self._dedicated = 0

        logger.info(
            "[GenerationQueue] Initialized with %d queued + %d instant workers",
            self._max_workers,
            self._instant_workers,
        )

    @property
    def dispatcher(self) -> CallbackDispatcher:
        return self._dispatcher

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit(
        self,
        key: str,
        task: Callable[[], Any],
        callback: ResultCallback,
        instant: bool = False,
    ) -> bool:
        """Admit a request for key.

        Args:
            key: Job identity; concurrent requests for one key share a job
            task: Zero-argument callable producing the result; only used
                when this call creates the job
            callback: Receives (error, result) once the job finishes
            instant: Start immediately instead of waiting in the FIFO

        Returns:
            True if a new job was created, False if an existing one was joined

        Raises:
            RuntimeError: If the queue has been shut down.

        """
        pooled = False
        to_start: list[GenerationJob] = []
        with self._lock:
            if self._closed:
                raise RuntimeError("GenerationQueue is shut down")

            job = self._jobs.get(key)
            if job is not None:
                job.waiters.append(callback)
                self._joined += 1
                logger.debug(
                    "[GenerationQueue] Joined pending job %s (%d waiters)",
                    key[:16],
                    len(job.waiters),
                )
                return False

            job = GenerationJob(key=key, task=task, instant=instant, waiters=[callback])
            self._jobs[key] = job
            if instant:
                self._running_instant += 1
                pooled = self._instant_pool_busy < self._instant_workers
                if pooled:
                    self._instant_pool_busy += 1
                else:
                    self._dedicated += 1
            else:
                self._waiting.append(key)
                to_start = self._admit_locked()

        if instant:
            self._start_instant(job, pooled)
        else:
            for admitted in to_start:
                self._start(admitted)
        return True

    def _admit_locked(self) -> list[GenerationJob]:
        admitted = []
        while self._waiting and self._running_queued < self._max_workers:
            job = self._jobs[self._waiting.popleft()]
            self._running_queued += 1
            admitted.append(job)
        return admitted

    def _start(self, job: GenerationJob) -> None:
        job.started_at = time.time()
        self._executor.submit(self._run, job)

    def _start_instant(self, job: GenerationJob, pooled: bool) -> None:
        job.started_at = time.time()
        if pooled:
            self._instant_executor.submit(self._run_pooled_instant, job)
            return

        logger.debug("[GenerationQueue] Instant pool busy, dedicated thread for %s", job.key[:16])
        thread = threading.Thread(
            target=self._run,
            args=(job,),
            name=f"mediabox-thumbnail-instant-{job.key[:8]}",
            daemon=True,
        )
        thread.start()

    def _run_pooled_instant(self, job: GenerationJob) -> None:
        try:
            self._run(job)
        finally:
            with self._lock:
                self._instant_pool_busy -= 1

    def _run(self, job: GenerationJob) -> None:
        with self._lock:
            self._started += 1
        self.job_started.emit(job.key)

        error: BaseException | None = None
        result: Any = None
        try:
            result = job.task()
        except Exception as e:
            error = e
            logger.debug("[GenerationQueue] Job %s failed: %s", job.key[:16], e)

        with self._lock:
            self._jobs.pop(job.key, None)
            if job.instant:
                self._running_instant -= 1
            else:
                self._running_queued -= 1
            if error is None:
                self._completed += 1
            else:
                self._failed += 1
            self._dispatcher.dispatch_all(job.waiters, error, result)
            to_start = self._admit_locked()
            release = self._release_dispatcher_when_idle and not self._jobs
            if release:
                self._release_dispatcher_when_idle = False
            self._idle.notify_all()

        for admitted in to_start:
            self._start(admitted)
        if release:
            self._dispatcher.shutdown(wait=False)

        self.job_finished.emit(job.key, error is None)

    def is_pending(self, key: str) -> bool:
        with self._lock:
            return key in self._jobs

    def pending_count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def drain(self, timeout: float | None = None) -> bool:
        """Block until no job is pending.

        Returns:
            True if the queue became idle, False on timeout

        """
        with self._lock:
            return self._idle.wait_for(lambda: not self._jobs, timeout=timeout)

    def get_stats(self) -> GenerationQueueStats:
        with self._lock:
            return GenerationQueueStats(
                max_workers=self._max_workers,
                instant_workers=self._instant_workers,
                pending_jobs=len(self._jobs),
                waiting_jobs=len(self._waiting),
                running_queued=self._running_queued,
                running_instant=self._running_instant,
                dedicated_instant=self._dedicated,
                started_jobs=self._started,
                completed_jobs=self._completed,
                failed_jobs=self._failed,
                joined_requests=self._joined,
            )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work.

        With wait=True every pending job (running or still in the FIFO) runs
        to completion first. With wait=False jobs still in the FIFO are
        failed with GenerationFailure; running jobs finish in the background
        and still notify their waiters. An owned dispatcher is closed once
        the last of them has been scheduled.
        """
        release_now = False
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if not wait:
                while self._waiting:
                    job = self._jobs.pop(self._waiting.popleft())
                    self._dispatcher.dispatch_all(
                        job.waiters, GenerationFailure("Generation queue shut down"), None
                    )
                if self._owns_dispatcher:
                    if self._jobs:
                        self._release_dispatcher_when_idle = True
                    else:
                        release_now = True
                self._idle.notify_all()

        if wait:
            self.drain()
        self._executor.shutdown(wait=wait)
        self._instant_executor.shutdown(wait=wait)
        if wait and self._owns_dispatcher:
            self._dispatcher.shutdown(wait=True)
        elif release_now:
            self._dispatcher.shutdown(wait=False)

        logger.info("[GenerationQueue] Shut down")
