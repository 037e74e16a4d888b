"""Tests for the background engine-query scheduler."""

from __future__ import annotations

import threading
import time
import unittest
from pathlib import Path

from lazypick.refresh import RefreshScheduler
from lazypick.types import Entry


def _wait_for_results(
    scheduler: RefreshScheduler,
    *,
    expected_count: int,
    timeout_seconds: float = 2.0,
) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(scheduler.drain_results())
        if len(out) >= expected_count:
            break
        scheduler.wait_for_result(timeout=0.01)
    return out


class RefreshSchedulerTests(unittest.TestCase):
    def test_schedule_runs_query_in_background(self) -> None:
        calls: list[tuple[Path, str]] = []
        entry = Entry(name="a", path=Path("/tmp/a"), is_directory=False)

        def query_entries(directory: Path, query: str) -> list[Entry]:
            calls.append((directory, query))
            return [entry]

        scheduler = RefreshScheduler(query_entries)
        request_id = scheduler.schedule(Path("/tmp"), "a")

        results = _wait_for_results(scheduler, expected_count=1)
        self.assertEqual(calls, [(Path("/tmp"), "a")])
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].request.request_id, request_id)
        self.assertEqual(results[0].entries, [entry])
        self.assertTrue(results[0].is_current_for(Path("/tmp"), "a"))
        self.assertFalse(results[0].is_current_for(Path("/tmp"), "ab"))

    def test_latest_pending_request_replaces_older_pending_requests(self) -> None:
        first_started = threading.Event()
        release_first = threading.Event()
        calls: list[str] = []

        def query_entries(_directory: Path, query: str) -> list[Entry]:
            calls.append(query)
            if query == "a":
                first_started.set()
                release_first.wait(timeout=1.0)
            return []

        scheduler = RefreshScheduler(query_entries)
        first_id = scheduler.schedule(Path("/tmp"), "a")
        self.assertTrue(first_started.wait(timeout=1.0))
        scheduler.schedule(Path("/tmp"), "ab")
        third_id = scheduler.schedule(Path("/tmp"), "abc")
        release_first.set()

        results = _wait_for_results(scheduler, expected_count=2)
        self.assertEqual(calls, ["a", "abc"])
        self.assertEqual([result.request.request_id for result in results], [first_id, third_id])

    def test_raising_query_produces_empty_result(self) -> None:
        def query_entries(_directory: Path, _query: str) -> list[Entry]:
            raise RuntimeError("engine exploded")

        scheduler = RefreshScheduler(query_entries)
        with self.assertLogs("lazypick.refresh", level="ERROR"):
            scheduler.schedule(Path("/tmp"), "x")
            results = _wait_for_results(scheduler, expected_count=1)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].entries, [])

    def test_worker_stops_when_idle(self) -> None:
        scheduler = RefreshScheduler(lambda _directory, _query: [])
        scheduler.schedule(Path("/tmp"), "")
        _wait_for_results(scheduler, expected_count=1)

        deadline = time.monotonic() + 1.0
        while scheduler.busy and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertFalse(scheduler.busy)


if __name__ == "__main__":
    unittest.main()
