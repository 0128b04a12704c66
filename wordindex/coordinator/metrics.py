"""
Performance metrics collection for pipeline jobs.
"""

import time
import json
from dataclasses import dataclass, asdict

import psutil

from wordindex.coordinator.job_manager import JobStatus, PipelineObserver


@dataclass
class JobMetrics:
    """Metrics for a single pipeline run."""

    job_id: str
    start_time: float
    end_time: float
    map_phase_start: float
    map_phase_end: float
    group_phase_start: float
    group_phase_end: float
    reduce_phase_start: float
    reduce_phase_end: float
    num_documents: int
    num_map_workers: int
    num_reduce_workers: int
    num_mapped_items: int = 0
    num_words: int = 0
    peak_rss_bytes: int = 0
    succeeded: bool = False

    @property
    def total_time_seconds(self) -> float:
        """Total job execution time in seconds."""
        return self.end_time - self.start_time

    @property
    def map_phase_time_seconds(self) -> float:
        """Map phase execution time in seconds."""
        return self.map_phase_end - self.map_phase_start

    @property
    def group_phase_time_seconds(self) -> float:
        """Group phase execution time in seconds."""
        return self.group_phase_end - self.group_phase_start

    @property
    def reduce_phase_time_seconds(self) -> float:
        """Reduce phase execution time in seconds."""
        return self.reduce_phase_end - self.reduce_phase_start

    def to_dict(self) -> dict:
        """Convert metrics to dictionary, including derived timings."""
        data = asdict(self)
        data.update({
            'total_time_seconds': self.total_time_seconds,
            'map_phase_time_seconds': self.map_phase_time_seconds,
            'group_phase_time_seconds': self.group_phase_time_seconds,
            'reduce_phase_time_seconds': self.reduce_phase_time_seconds,
        })
        return data

    def save_to_file(self, filepath: str):
        """Save metrics to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


class MetricsCollector(PipelineObserver):
    """Records phase timings and memory usage of the jobs it observes."""

    def __init__(self):
        self.job_metrics = {}
        self.process = psutil.Process()

    def _sample_memory(self, job_id: str):
        rss = self.process.memory_info().rss
        metrics = self.job_metrics[job_id]
        metrics.peak_rss_bytes = max(metrics.peak_rss_bytes, rss)

    def job_started(self, job):
        self.job_metrics[job.job_id] = JobMetrics(
            job_id=job.job_id,
            start_time=time.time(),
            end_time=0,
            map_phase_start=0,
            map_phase_end=0,
            group_phase_start=0,
            group_phase_end=0,
            reduce_phase_start=0,
            reduce_phase_end=0,
            num_documents=job.num_documents,
            num_map_workers=job.map_workers,
            num_reduce_workers=job.reduce_workers
        )
        self._sample_memory(job.job_id)

    def phase_started(self, job, phase):
        metrics = self.job_metrics[job.job_id]
        now = time.time()
        if phase == JobStatus.MAP_PHASE:
            metrics.map_phase_start = now
        elif phase == JobStatus.GROUP_PHASE:
            metrics.group_phase_start = now
        elif phase == JobStatus.REDUCE_PHASE:
            metrics.reduce_phase_start = now

    def phase_completed(self, job, phase, output):
        metrics = self.job_metrics[job.job_id]
        now = time.time()
        if phase == JobStatus.MAP_PHASE:
            metrics.map_phase_end = now
            metrics.num_mapped_items = len(output)
        elif phase == JobStatus.GROUP_PHASE:
            metrics.group_phase_end = now
            metrics.num_words = len(output)
        elif phase == JobStatus.REDUCE_PHASE:
            metrics.reduce_phase_end = now
        self._sample_memory(job.job_id)

    def job_completed(self, job, result):
        metrics = self.job_metrics[job.job_id]
        metrics.end_time = time.time()
        metrics.succeeded = True

    def job_failed(self, job, error):
        self.job_metrics[job.job_id].end_time = time.time()

    def get_metrics(self, job_id: str) -> JobMetrics:
        """Retrieve metrics for a specific job."""
        return self.job_metrics.get(job_id)
