"""
Job Manager for the word index pipeline
Runs the map, group and reduce phases of a job and tracks job state
"""

import time
import uuid
import logging
import threading
from enum import Enum
from types import MappingProxyType
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from wordindex.common.config import PipelineConfig
from wordindex.common.errors import (
    MapTaskError,
    ReduceTaskError,
    PipelineError,
    PipelineInterrupted,
)
from wordindex.coordinator.collectors import IntermediateCollection, ResultCollection
from wordindex.worker.map_executor import MapExecutor, MappedItem
from wordindex.worker.pool import WorkerPool
from wordindex.worker.reduce_executor import ReduceExecutor

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Status of a pipeline job"""
    PENDING = "pending"
    MAP_PHASE = "map_phase"
    GROUP_PHASE = "group_phase"
    REDUCE_PHASE = "reduce_phase"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Job:
    """Represents a single pipeline run"""
    job_id: str
    map_workers: int
    reduce_workers: int
    num_documents: int
    status: JobStatus = JobStatus.PENDING
    num_mapped_items: int = 0
    num_words: int = 0
    start_time: float = 0.0
    end_time: float = 0.0
    error_message: str = ''


class PipelineObserver:
    """
    Receives phase-boundary notifications from JobManager.

    All hooks are called on the thread that runs the job, never from a
    worker thread. Subclasses override what they need.
    """

    def job_started(self, job: Job):
        pass

    def phase_started(self, job: Job, phase: JobStatus):
        pass

    def phase_completed(self, job: Job, phase: JobStatus, output):
        """
        Args:
            job: The running job
            phase: MAP_PHASE, GROUP_PHASE or REDUCE_PHASE
            output: Closed IntermediateCollection, read-only grouped mapping,
                or the final result dict, respectively
        """
        pass

    def job_completed(self, job: Job, result: Dict[str, Dict[str, int]]):
        pass

    def job_failed(self, job: Job, error: BaseException):
        pass


def group_items(items: Iterable[MappedItem]) -> Dict[str, List[str]]:
    """
    Group phase: collect the document ids of every occurrence of each word

    Args:
        items: Map output, in any order

    Returns:
        word -> document ids, one entry per occurrence
    """
    grouped = defaultdict(list)
    for item in items:
        grouped[item.word].append(item.document_id)
    return dict(grouped)


class JobManager:
    """Runs pipeline jobs and keeps a record of each one"""

    def __init__(self):
        self.jobs: Dict[str, Job] = {}
        self.lock = threading.Lock()
        self._active_pools: Dict[str, WorkerPool] = {}

    def create_job(self, config: PipelineConfig, num_documents: int,
                   job_id: Optional[str] = None) -> Job:
        """Register a new job in PENDING state"""
        with self.lock:
            job = Job(
                job_id=job_id or uuid.uuid4().hex[:12],
                map_workers=config.map_workers,
                reduce_workers=config.reduce_workers,
                num_documents=num_documents,
                start_time=time.time()
            )
            self.jobs[job.job_id] = job
            return job

    def run_job(self, documents: Mapping[str, str], config: PipelineConfig,
                observers: Sequence[PipelineObserver] = (),
                job_id: Optional[str] = None) -> Dict[str, Dict[str, int]]:
        """
        Build the word index of documents

        Args:
            documents: document_id -> text
            config: Pool sizes and drain deadline
            observers: Notified at every phase boundary
            job_id: Optional identifier, generated when omitted

        Returns:
            word -> {document_id: count}, words and document ids sorted

        Raises:
            ConfigurationError: If config is invalid; no job is created
            PipelineError: If any task fails or a drain is interrupted
        """
        config.validate()
        job = self.create_job(config, len(documents), job_id)
        self._notify(observers, 'job_started', job)
        logger.info(f"Job {job.job_id} started: {job.num_documents} documents, "
                    f"{job.map_workers} map workers, {job.reduce_workers} reduce workers")

        try:
            intermediate = self._run_map_phase(job, documents, config, observers)
            grouped = self._run_group_phase(job, intermediate, observers)
            result = self._run_reduce_phase(job, grouped, config, observers)
            with self.lock:
                job.end_time = time.time()
            self._notify(observers, 'job_completed', job, result)
        except (MapTaskError, ReduceTaskError, PipelineInterrupted) as e:
            phase = job.status
            self._mark_failed(job, str(e))
            self._notify(observers, 'job_failed', job, e)
            raise PipelineError(f"Job {job.job_id} failed during {phase.value}: {e}", cause=e) from e
        except Exception as e:
            self._mark_failed(job, str(e))
            self._notify(observers, 'job_failed', job, e)
            raise

        with self.lock:
            job.status = JobStatus.COMPLETED
        logger.info(f"Job {job.job_id} completed: {job.num_words} words "
                    f"in {job.end_time - job.start_time:.3f}s")
        return result

    def _run_map_phase(self, job: Job, documents: Mapping[str, str], config: PipelineConfig,
                       observers: Sequence[PipelineObserver]) -> IntermediateCollection:
        self._transition(job, JobStatus.MAP_PHASE, observers)
        intermediate = IntermediateCollection()

        with WorkerPool(config.map_workers, 'map', config.drain_timeout) as pool:
            self._track_pool(job, pool)
            try:
                for document_id, text in documents.items():
                    pool.submit(MapExecutor(document_id, text).execute, sink=intermediate.extend)
                pool.drain()
            finally:
                self._untrack_pool(job)
        self._check_interrupted(pool)

        intermediate.close()
        job.num_mapped_items = len(intermediate)
        logger.info(f"Job {job.job_id} map phase done: {job.num_mapped_items} items")
        self._notify(observers, 'phase_completed', job, JobStatus.MAP_PHASE, intermediate)
        return intermediate

    def _run_group_phase(self, job: Job, intermediate: IntermediateCollection,
                         observers: Sequence[PipelineObserver]) -> Mapping[str, List[str]]:
        self._transition(job, JobStatus.GROUP_PHASE, observers)
        grouped = MappingProxyType(group_items(intermediate))
        job.num_words = len(grouped)
        logger.info(f"Job {job.job_id} group phase done: {job.num_words} distinct words")
        self._notify(observers, 'phase_completed', job, JobStatus.GROUP_PHASE, grouped)
        return grouped

    def _run_reduce_phase(self, job: Job, grouped: Mapping[str, List[str]], config: PipelineConfig,
                          observers: Sequence[PipelineObserver]) -> Dict[str, Dict[str, int]]:
        self._transition(job, JobStatus.REDUCE_PHASE, observers)
        results = ResultCollection()

        with WorkerPool(config.reduce_workers, 'reduce', config.drain_timeout) as pool:
            self._track_pool(job, pool)
            try:
                for word, document_ids in grouped.items():
                    pool.submit(ReduceExecutor(word, tuple(document_ids)).execute, sink=results.put)
                pool.drain()
            finally:
                self._untrack_pool(job)
        self._check_interrupted(pool)

        result = results.snapshot()
        logger.info(f"Job {job.job_id} reduce phase done: {len(result)} entries")
        self._notify(observers, 'phase_completed', job, JobStatus.REDUCE_PHASE, result)
        return result

    def interrupt(self, job_id: str) -> bool:
        """
        Interrupt the phase the job is currently running

        The job fails with PipelineInterrupted, even if the phase's drain
        has already returned.

        Returns:
            True if the job had an active pool to interrupt
        """
        with self.lock:
            pool = self._active_pools.get(job_id)
            if pool is None:
                return False
            # Set under the lock so a phase that has just drained still sees it
            pool.interrupt()
        logger.warning(f"Interrupting job {job_id}")
        return True

    def _track_pool(self, job: Job, pool: WorkerPool):
        with self.lock:
            self._active_pools[job.job_id] = pool

    def _untrack_pool(self, job: Job):
        with self.lock:
            self._active_pools.pop(job.job_id, None)

    @staticmethod
    def _check_interrupted(pool: WorkerPool):
        if pool.interrupted:
            raise PipelineInterrupted(f"{pool.name} phase was interrupted")

    def _transition(self, job: Job, status: JobStatus, observers: Sequence[PipelineObserver]):
        with self.lock:
            job.status = status
        logger.info(f"Job {job.job_id} started {status.value}")
        self._notify(observers, 'phase_started', job, status)

    def _mark_failed(self, job: Job, error_msg: str):
        with self.lock:
            job.status = JobStatus.FAILED
            job.error_message = error_msg
            job.end_time = time.time()
        logger.error(f"Job {job.job_id} failed: {error_msg}")

    @staticmethod
    def _notify(observers: Sequence[PipelineObserver], hook: str, *args):
        for observer in observers:
            getattr(observer, hook)(*args)

    def get_job_status(self, job_id: str) -> Optional[Dict]:
        """Get current job status"""
        with self.lock:
            job = self.jobs.get(job_id)
            if not job:
                return None

            end_time = job.end_time or time.time()
            return {
                'job_id': job.job_id,
                'status': job.status.value,
                'num_documents': job.num_documents,
                'map_workers': job.map_workers,
                'reduce_workers': job.reduce_workers,
                'num_mapped_items': job.num_mapped_items,
                'num_words': job.num_words,
                'elapsed_seconds': end_time - job.start_time,
                'error_message': job.error_message
            }


def run_pipeline(documents: Mapping[str, str], map_workers: int, reduce_workers: int,
                 observers: Sequence[PipelineObserver] = (),
                 drain_timeout: Optional[float] = None,
                 job_id: Optional[str] = None) -> Dict[str, Dict[str, int]]:
    """
    Build the inverted word-frequency index of documents in parallel

    Args:
        documents: document_id -> text
        map_workers: Size of the map worker pool
        reduce_workers: Size of the reduce worker pool
        observers: Notified at every phase boundary
        drain_timeout: Optional per-drain deadline in seconds
        job_id: Optional identifier for logs and observers

    Returns:
        word -> {document_id: count}

    Raises:
        ConfigurationError: If a worker count is not a positive integer
        PipelineError: If any task fails or a drain is interrupted
    """
    config = PipelineConfig(map_workers, reduce_workers, drain_timeout).validate()
    return JobManager().run_job(documents, config, observers, job_id)
