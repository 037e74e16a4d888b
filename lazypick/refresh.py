"""Background refresh worker for ranking-engine queries."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from .types import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshRequest:
    """One engine query, tagged with the state it was issued for."""

    request_id: int
    working_directory: Path
    query: str


@dataclass(frozen=True)
class RefreshResult:
    """Completed engine query from the background worker."""

    request: RefreshRequest
    entries: list[Entry]

    def is_current_for(self, working_directory: Path, query: str) -> bool:
        """Return whether this result answers the given live directory/query."""
        return self.request.working_directory == working_directory and self.request.query == query


class RefreshScheduler:
    """Single-threaded latest-request-wins engine query scheduler.

    While one query runs, newer requests replace the pending one, so at most
    one stale query is ever in flight. Results are queued for the owner to
    drain on its own thread; the owner decides which results still apply.
    """

    def __init__(self, query_entries: Callable[[Path, str], list[Entry]]) -> None:
        self._query_entries = query_entries
        self._lock = threading.Lock()
        self._pending: RefreshRequest | None = None
        self._running = False
        self._next_request_id = 1
        self._results: Queue[RefreshResult] = Queue()
        self._completed = threading.Condition()

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return

            try:
                entries = self._query_entries(request.working_directory, request.query)
            except Exception:
                logger.exception("engine query %r in %s raised", request.query, request.working_directory)
                entries = []
            self._results.put(RefreshResult(request=request, entries=list(entries)))
            with self._completed:
                self._completed.notify_all()

    def schedule(self, working_directory: Path, query: str) -> int:
        """Queue or replace pending work and return the request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = RefreshRequest(
                request_id=request_id,
                working_directory=working_directory,
                query=query,
            )
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="lazypick-refresh",
            daemon=True,
        )
        worker.start()
        return request_id

    def drain_results(self) -> list[RefreshResult]:
        """Drain all completed results in completion order."""
        out: list[RefreshResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def wait_for_result(self, timeout: float | None = None) -> bool:
        """Block until a result is queued or ``timeout`` elapses."""
        with self._completed:
            if not self._results.empty():
                return True
            self._completed.wait(timeout=timeout)
        return not self._results.empty()

    @property
    def busy(self) -> bool:
        """Whether a query is running or pending."""
        with self._lock:
            return self._running


__all__ = [
    "RefreshRequest",
    "RefreshResult",
    "RefreshScheduler",
]
