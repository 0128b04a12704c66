"""Console reporting of pipeline progress."""

import sys
import time
from typing import Dict, TextIO

from wordindex.coordinator.job_manager import JobStatus, PipelineObserver

PHASE_LABELS = {
    JobStatus.MAP_PHASE: "Map",
    JobStatus.GROUP_PHASE: "Group",
    JobStatus.REDUCE_PHASE: "Reduce",
}


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds / 60)
    seconds = seconds % 60
    if minutes < 60:
        return f"{minutes}m {seconds:.1f}s"
    hours = int(minutes / 60)
    minutes = minutes % 60
    return f"{hours}h {minutes}m {seconds:.1f}s"


def format_mapped_items(items) -> str:
    """Render map output as ["word","document"] pairs."""
    return "[" + ", ".join(f'["{item.word}","{item.document_id}"]' for item in items) + "]"


class ConsoleReporter(PipelineObserver):
    """Prints phase boundaries, and optionally the intermediate data, to a stream."""

    def __init__(self, stream: TextIO = None, show_intermediate: bool = False):
        self.stream = stream or sys.stdout
        self.show_intermediate = show_intermediate
        self._phase_started: Dict[JobStatus, float] = {}

    def _print(self, message: str):
        print(message, file=self.stream)

    def job_started(self, job):
        self._print(f"Job {job.job_id}: {job.num_documents} documents, "
                    f"{job.map_workers} map workers, {job.reduce_workers} reduce workers")

    def phase_started(self, job, phase):
        self._phase_started[phase] = time.time()
        self._print(f"{PHASE_LABELS[phase]} phase started")

    def phase_completed(self, job, phase, output):
        elapsed = format_duration(time.time() - self._phase_started.get(phase, time.time()))
        if phase == JobStatus.MAP_PHASE:
            self._print(f"Map phase: {len(output)} items in {elapsed}")
            if self.show_intermediate:
                self._print(format_mapped_items(output))
        elif phase == JobStatus.GROUP_PHASE:
            self._print(f"Group phase: {len(output)} distinct words in {elapsed}")
            if self.show_intermediate:
                self._print(str(dict(output)))
        elif phase == JobStatus.REDUCE_PHASE:
            self._print(f"Reduce phase: {len(output)} entries in {elapsed}")

    def job_completed(self, job, result):
        self._print(f"Job {job.job_id} completed in {format_duration(job.end_time - job.start_time)}")

    def job_failed(self, job, error):
        self._print(f"Job {job.job_id} failed: {error}")
