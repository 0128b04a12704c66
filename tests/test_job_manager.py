"""
Unit tests for JobManager
Tests job creation, grouping, status tracking and interruption
"""

import threading
import unittest
from unittest.mock import patch

from wordindex.common.config import PipelineConfig
from wordindex.common.errors import ConfigurationError, PipelineError, PipelineInterrupted
from wordindex.coordinator.job_manager import Job, JobManager, JobStatus, PipelineObserver, group_items
from wordindex.worker.map_executor import MappedItem
from wordindex.worker.pool import WorkerPool


class TestGroupItems(unittest.TestCase):
    """Unit tests for the group phase"""

    def test_groups_document_ids_by_word(self):
        items = [
            MappedItem("the", "f1"),
            MappedItem("cat", "f1"),
            MappedItem("the", "f2"),
            MappedItem("the", "f1"),
        ]
        self.assertEqual(group_items(items), {
            "the": ["f1", "f2", "f1"],
            "cat": ["f1"],
        })

    def test_keeps_multiplicity(self):
        grouped = group_items([MappedItem("a", "doc")] * 3)
        self.assertEqual(grouped, {"a": ["doc", "doc", "doc"]})

    def test_empty_input(self):
        self.assertEqual(group_items([]), {})

    def test_returns_plain_dict(self):
        grouped = group_items([MappedItem("x", "f")])
        self.assertIs(type(grouped), dict)
        self.assertEqual(grouped.get("missing"), None)


class TestJobManager(unittest.TestCase):
    """Unit tests for JobManager class"""

    def setUp(self):
        self.job_manager = JobManager()
        self.config = PipelineConfig(map_workers=2, reduce_workers=3)

    def test_create_job(self):
        """Test job creation with correct attributes"""
        job = self.job_manager.create_job(self.config, 5, job_id="test-job-1")

        self.assertIsInstance(job, Job)
        self.assertEqual(job.job_id, "test-job-1")
        self.assertEqual(job.map_workers, 2)
        self.assertEqual(job.reduce_workers, 3)
        self.assertEqual(job.num_documents, 5)
        self.assertEqual(job.status, JobStatus.PENDING)
        self.assertGreater(job.start_time, 0)
        self.assertIn("test-job-1", self.job_manager.jobs)

    def test_generated_job_ids_are_unique(self):
        first = self.job_manager.create_job(self.config, 0)
        second = self.job_manager.create_job(self.config, 0)
        self.assertNotEqual(first.job_id, second.job_id)

    def test_completed_job_status(self):
        result = self.job_manager.run_job(
            {"f1": "the cat sat", "f2": "the dog"}, self.config, job_id="done")

        self.assertEqual(len(result), 4)
        status = self.job_manager.get_job_status("done")
        self.assertEqual(status['status'], 'completed')
        self.assertEqual(status['num_documents'], 2)
        self.assertEqual(status['num_mapped_items'], 5)
        self.assertEqual(status['num_words'], 4)
        self.assertEqual(status['error_message'], '')
        self.assertGreaterEqual(status['elapsed_seconds'], 0)

    def test_failed_job_status(self):
        with self.assertRaises(PipelineError):
            self.job_manager.run_job({"bad": 3.14}, self.config, job_id="broken")

        status = self.job_manager.get_job_status("broken")
        self.assertEqual(status['status'], 'failed')
        self.assertIn("bad", status['error_message'])

    def test_invalid_config_creates_no_job(self):
        with self.assertRaises(ConfigurationError):
            self.job_manager.run_job({"f": "text"}, PipelineConfig(0, 1), job_id="never")
        self.assertIsNone(self.job_manager.get_job_status("never"))

    def test_unknown_job_status(self):
        self.assertIsNone(self.job_manager.get_job_status("nonexistent"))

    def test_interrupt_unknown_job(self):
        self.assertFalse(self.job_manager.interrupt("nonexistent"))

    def test_interrupt_running_job(self):
        """Interrupting a drain from another thread fails the job"""
        release = threading.Event()
        started = threading.Event()

        def blocking_tokenize(text):
            started.set()
            release.wait(5)
            return []

        def interrupt_when_started():
            started.wait(5)
            self.job_manager.interrupt("blocked")

        interrupter = threading.Thread(target=interrupt_when_started)
        try:
            with patch('wordindex.worker.map_executor.tokenize', side_effect=blocking_tokenize):
                interrupter.start()
                with self.assertRaises(PipelineError) as ctx:
                    self.job_manager.run_job({"f1": "text"}, self.config, job_id="blocked")
        finally:
            release.set()
            interrupter.join()

        self.assertIsInstance(ctx.exception.cause, PipelineInterrupted)
        self.assertEqual(self.job_manager.get_job_status("blocked")['status'], 'failed')

    def test_interrupt_after_drain_returns_still_fails_job(self):
        """An interrupt accepted between drain and phase end is not lost"""
        original_drain = WorkerPool.drain
        accepted = []

        def drain_then_interrupt(pool):
            original_drain(pool)
            if pool.name == 'map':
                accepted.append(self.job_manager.interrupt("late"))

        with patch.object(WorkerPool, 'drain', autospec=True, side_effect=drain_then_interrupt):
            with self.assertRaises(PipelineError) as ctx:
                self.job_manager.run_job({"f1": "the cat"}, self.config, job_id="late")

        self.assertEqual(accepted, [True])
        self.assertIsInstance(ctx.exception.cause, PipelineInterrupted)
        self.assertEqual(self.job_manager.get_job_status("late")['status'], 'failed')

    def test_failing_completion_observer_fails_job(self):
        class BrokenObserver(PipelineObserver):
            def job_completed(self, job, result):
                raise RuntimeError("observer broke")

        with self.assertRaises(RuntimeError):
            self.job_manager.run_job({"f1": "the cat"}, self.config,
                                     observers=[BrokenObserver()], job_id="observed")

        status = self.job_manager.get_job_status("observed")
        self.assertEqual(status['status'], 'failed')
        self.assertIn("observer broke", status['error_message'])


if __name__ == '__main__':
    unittest.main()
