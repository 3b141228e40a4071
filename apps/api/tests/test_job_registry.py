"""In-memory job registry contract tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import threading
import unittest

from app.repositories.base import DuplicateJobError, JobNotFoundError, SourceMetadata
from app.repositories.memory import InMemoryJobRegistry
from app.schemas.job import JobStatus


def _metadata(submitted_at: datetime | None = None) -> SourceMetadata:
    return SourceMetadata(
        file_name="lecture.mp4",
        duration_seconds=900.0,
        submitted_at=submitted_at or datetime.now(UTC),
        video_id="1700000000000-abc.mp4",
        video_url="/api/video/1700000000000-abc.mp4",
    )


class JobRegistryTests(unittest.TestCase):
    def test_create_registers_processing_job_without_result(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_1", _metadata())

        job = registry.get("req_1")
        assert job is not None
        self.assertEqual(job.status, JobStatus.PROCESSING)
        self.assertIsNone(job.result)
        self.assertIsNone(job.completed_at)
        self.assertEqual(job.metadata.file_name, "lecture.mp4")
        self.assertEqual(len(registry), 1)

    def test_create_rejects_duplicate_correlation_id(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_1", _metadata())
        with self.assertRaises(DuplicateJobError):
            registry.create("req_1", _metadata())
        self.assertEqual(len(registry), 1)

    def test_get_unknown_returns_none(self) -> None:
        self.assertIsNone(InMemoryJobRegistry().get("req_missing"))

    def test_complete_sets_result_and_completed_at_once(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_1", _metadata())

        first = registry.complete("req_1", {"text": "first"})
        second = registry.complete("req_1", {"text": "second"})

        self.assertTrue(first.applied)
        self.assertFalse(second.applied)
        job = registry.get("req_1")
        assert job is not None
        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.result, {"text": "first"})
        self.assertEqual(job.completed_at, first.job.completed_at)
        self.assertIs(second.job, first.job)

    def test_fail_is_terminal_and_never_carries_result(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_1", _metadata())

        failed = registry.fail("req_1", "audio unreadable")
        late_completion = registry.complete("req_1", {"text": "late"})

        self.assertTrue(failed.applied)
        self.assertFalse(late_completion.applied)
        job = registry.get("req_1")
        assert job is not None
        self.assertEqual(job.status, JobStatus.FAILED)
        self.assertIsNone(job.result)
        self.assertEqual(job.error, "audio unreadable")
        self.assertIsNotNone(job.completed_at)

    def test_mutators_raise_for_unknown_id_without_writing(self) -> None:
        registry = InMemoryJobRegistry()
        before_writes = registry.write_count
        with self.assertRaises(JobNotFoundError):
            registry.complete("req_missing", {"text": "x"})
        with self.assertRaises(JobNotFoundError):
            registry.fail("req_missing", "boom")
        self.assertEqual(registry.write_count, before_writes)
        self.assertEqual(len(registry), 0)

    def test_discard_removes_job(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_1", _metadata())
        registry.discard("req_1")
        registry.discard("req_1")
        self.assertIsNone(registry.get("req_1"))
        self.assertEqual(len(registry), 0)

    def test_purge_before_evicts_only_older_jobs(self) -> None:
        registry = InMemoryJobRegistry()
        now = datetime.now(UTC)
        registry.create("req_old", _metadata(now - timedelta(hours=2)))
        registry.create("req_new", _metadata(now))

        removed = registry.purge_before(now - timedelta(hours=1))

        self.assertEqual(removed, 1)
        self.assertIsNone(registry.get("req_old"))
        self.assertIsNotNone(registry.get("req_new"))

    def test_concurrent_completions_apply_exactly_once(self) -> None:
        registry = InMemoryJobRegistry()
        registry.create("req_race", _metadata())
        outcomes = []
        outcomes_lock = threading.Lock()
        start = threading.Barrier(16)

        def deliver(index: int) -> None:
            start.wait()
            outcome = registry.complete("req_race", {"text": f"payload-{index}"})
            with outcomes_lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=deliver, args=(index,)) for index in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        applied = [outcome for outcome in outcomes if outcome.applied]
        self.assertEqual(len(applied), 1)
        job = registry.get("req_race")
        assert job is not None
        self.assertEqual(job.result, applied[0].job.result)
        self.assertTrue(all(outcome.job.result == job.result for outcome in outcomes))

    def test_readers_never_observe_completed_without_result(self) -> None:
        registry = InMemoryJobRegistry()
        ids = [f"req_{index}" for index in range(200)]
        for correlation_id in ids:
            registry.create(correlation_id, _metadata())
        torn: list[str] = []
        done = threading.Event()

        def read_loop() -> None:
            while not done.is_set():
                for correlation_id in ids:
                    job = registry.get(correlation_id)
                    if job is None:
                        continue
                    if (job.status is JobStatus.COMPLETED) != (job.result is not None):
                        torn.append(correlation_id)

        reader = threading.Thread(target=read_loop)
        reader.start()
        for correlation_id in ids:
            registry.complete(correlation_id, {"text": correlation_id})
        done.set()
        reader.join()

        self.assertEqual(torn, [])


if __name__ == "__main__":
    unittest.main()
