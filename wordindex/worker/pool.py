"""
Bounded worker pool with a blocking drain.

Wraps a ThreadPoolExecutor: at most num_workers units run at once, and drain()
is the phase barrier. The first failing unit, an interrupt, or an expired
deadline ends the drain with an exception and cancels whatever has not
started yet. Units already running are left to finish on their own.
"""

import time
import logging
import threading
from concurrent import futures
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Any, Callable, List, Optional

from wordindex.common.config import validate_worker_count
from wordindex.common.errors import PipelineInterrupted

logger = logging.getLogger(__name__)

# How often a drain wakes up to check for interrupts
POLL_INTERVAL = 0.05


class WorkerPool:
    """Runs independent units of work on a fixed number of threads"""

    def __init__(self, num_workers: int, name: str = 'pool',
                 drain_timeout: Optional[float] = None):
        """
        Initialize the pool

        Args:
            num_workers: Maximum number of units running at once, must be >= 1
            name: Label used in thread names and log messages
            drain_timeout: Seconds drain() may wait, None to wait indefinitely

        Raises:
            ConfigurationError: If num_workers is not a positive integer
        """
        self.num_workers = validate_worker_count(num_workers, f'{name} workers')
        self.name = name
        self.drain_timeout = drain_timeout

        self._executor = ThreadPoolExecutor(max_workers=self.num_workers,
                                            thread_name_prefix=f'wordindex-{name}')
        self._futures: List[Future] = []
        self._failures: List[BaseException] = []
        self._lock = threading.Lock()
        self._interrupted = threading.Event()
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # No-op if drain() already shut the executor down
        self._executor.shutdown(wait=exc_type is None, cancel_futures=exc_type is not None)
        return False

    @property
    def submitted(self) -> int:
        """Number of units accepted so far"""
        with self._lock:
            return len(self._futures)

    def submit(self, fn: Callable, *args, sink: Optional[Callable[[Any], None]] = None) -> Future:
        """
        Schedule fn(*args)

        Args:
            fn: Unit of work
            *args: Positional arguments for fn
            sink: Optional callable that receives fn's return value on the
                worker thread. An exception raised by sink fails the unit.

        Returns:
            Future for the unit

        Raises:
            RuntimeError: If the pool is already draining
        """
        with self._lock:
            if self._closed:
                raise RuntimeError(f"{self.name} pool is draining and accepts no new work")
            future = self._executor.submit(self._run, fn, args, sink)
            self._futures.append(future)
        future.add_done_callback(self._record_failure)
        return future

    @staticmethod
    def _run(fn: Callable, args: tuple, sink: Optional[Callable[[Any], None]]):
        result = fn(*args)
        if sink is not None:
            sink(result)
        return result

    def _record_failure(self, future: Future):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            with self._lock:
                self._failures.append(error)

    def _first_failure(self) -> Optional[BaseException]:
        with self._lock:
            if self._failures:
                return self._failures[0]
            candidates = list(self._futures)
        # A future can be done before its callback has recorded the failure
        for future in candidates:
            if future.done() and not future.cancelled() and future.exception() is not None:
                return future.exception()
        return None

    def interrupt(self):
        """Cancel a drain in progress, from any thread"""
        self._interrupted.set()

    @property
    def interrupted(self) -> bool:
        """True once interrupt() has been called"""
        return self._interrupted.is_set()

    def drain(self):
        """
        Stop accepting work and block until every submitted unit has finished

        Raises:
            PipelineInterrupted: If interrupt() was called, a KeyboardInterrupt
                arrived, or drain_timeout expired
            Exception: The first exception raised by a unit, re-raised as is
        """
        with self._lock:
            self._closed = True
            pending = set(self._futures)

        logger.debug(f"Draining {self.name} pool: {len(pending)} units, {self.num_workers} workers")
        deadline = None if self.drain_timeout is None else time.monotonic() + self.drain_timeout

        try:
            while pending:
                if self._interrupted.is_set():
                    raise PipelineInterrupted(f"Drain of {self.name} pool was interrupted")

                timeout = POLL_INTERVAL
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise PipelineInterrupted(
                            f"{self.name} pool did not drain within {self.drain_timeout}s")
                    timeout = min(timeout, remaining)

                done, pending = futures.wait(pending, timeout=timeout,
                                             return_when=futures.FIRST_EXCEPTION)
                if any(not f.cancelled() and f.exception() is not None for f in done):
                    break

        except KeyboardInterrupt as e:
            self._executor.shutdown(wait=False, cancel_futures=True)
            raise PipelineInterrupted(f"Drain of {self.name} pool was interrupted") from e
        except PipelineInterrupted:
            self._executor.shutdown(wait=False, cancel_futures=True)
            raise

        error = self._first_failure()
        if error is not None:
            logger.error(f"{self.name} pool aborting after task failure: {error}")
            self._executor.shutdown(wait=False, cancel_futures=True)
            raise error

        self._executor.shutdown(wait=True)
        logger.debug(f"{self.name} pool drained")
