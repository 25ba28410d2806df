"""Mutation Queue - single-flight FIFO worker for store writes.

Writes are appended to a FIFO. The call that finds no drain in progress
becomes the drainer and processes requests on its own call stack until
the queue is empty; every other call returns as soon as its request is
queued. There is no background thread.

Drain loop:
    1. Peek at the head.
    2. Hand it to the apply callback (reload -> mutate -> persist).
    3. Pop the head, whether the step succeeded or not.
    4. Repeat until empty.

Failure policy:
    A failing request is dropped, the remaining requests still drain, and
    the first error is re-raised to the drainer once the queue is empty.
    Later errors in the same drain are logged and counted only.

Nested frames:
    A migration body runs inside ``nested()``. Writes it issues go to a
    fresh frame owned by the current thread and drain immediately, so the
    body sees its own effects before the migration step completes. Writes
    from other threads keep going to the main queue.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Deque, Generator

from tablevault.domain.entities import Mutation
from tablevault.infrastructure.logging import get_logger
from tablevault.infrastructure.metrics import MetricsRegistry
from tablevault.infrastructure.tracing import trace_span

logger = get_logger(__name__)


@dataclass
class _Frame:
    """One FIFO plus whether someone is currently draining it."""

    items: Deque[Mutation] = field(default_factory=deque)
    draining: bool = False


class MutationQueue:
    """Single-flight FIFO of pending writes.

    Usage:
        queue = MutationQueue(apply=store_step)
        queue.submit(InsertMutation(table="users", record={...}))

    Thread Safety:
        Queue bookkeeping is guarded by a lock. A submit from another
        thread during a drain is appended and processed by the running
        drainer, in order.
    """

    def __init__(
        self,
        apply: Callable[[Mutation], None],
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            apply: Performs one drain step for a mutation.
            metrics: Optional registry for queue metrics.
        """
        self._apply = apply
        self._metrics = metrics
        self._lock = threading.Lock()
        self._main = _Frame()
        self._local = threading.local()

    @property
    def pending(self) -> int:
        """Number of requests not yet fully processed, head included."""
        with self._lock:
            nested = sum(len(f.items) for f in self._frames())
            return len(self._main.items) + nested

    @property
    def is_draining(self) -> bool:
        return self._current_frame().draining

    def submit(self, mutation: Mutation) -> None:
        """Queue a mutation, draining it now if no drain is running.

        Raises:
            Exception: The first error raised by a step of the drain this
                call ran, if it ran one.
        """
        frame = self._current_frame()
        with self._lock:
            frame.items.append(mutation)
            self._update_depth()
            if frame.draining:
                logger.debug("mutation_queued", kind=mutation.kind.value, depth=len(frame.items))
                return
            frame.draining = True

        self._drain(frame)

    def flush(self) -> None:
        """Drain whatever is pending on the current frame."""
        frame = self._current_frame()
        with self._lock:
            if frame.draining or not frame.items:
                return
            frame.draining = True

        self._drain(frame)

    @contextmanager
    def nested(self) -> Generator[None, None, None]:
        """Route this thread's submits to a private frame for the duration."""
        frames = self._frames()
        frame = _Frame()
        frames.append(frame)
        try:
            yield
        finally:
            frames.pop()
            if frame.items:
                logger.warning("nested_mutations_discarded", count=len(frame.items))

    def _frames(self) -> list[_Frame]:
        frames = getattr(self._local, "frames", None)
        if frames is None:
            frames = []
            self._local.frames = frames
        return frames

    def _current_frame(self) -> _Frame:
        frames = self._frames()
        return frames[-1] if frames else self._main

    def _drain(self, frame: _Frame) -> None:
        first_error: Exception | None = None

        try:
            while True:
                with self._lock:
                    if not frame.items:
                        frame.draining = False
                        break
                    mutation = frame.items[0]

                try:
                    self._run_step(mutation)
                except Exception as e:
                    if first_error is None:
                        first_error = e
                    else:
                        logger.error(
                            "drain_step_error_suppressed",
                            kind=mutation.kind.value,
                            error=str(e),
                        )
                finally:
                    with self._lock:
                        frame.items.popleft()
                        self._update_depth()
        except BaseException:
            with self._lock:
                frame.draining = False
            raise

        if first_error is not None:
            raise first_error

    def _run_step(self, mutation: Mutation) -> None:
        kind = mutation.kind.value
        start = time.perf_counter()

        with trace_span(
            "tablevault.drain_step",
            {"mutation.kind": kind, "mutation.table": mutation.target},
        ):
            try:
                self._apply(mutation)
            except Exception as e:
                self._count(kind, "error")
                logger.warning(
                    "drain_step_failed", kind=kind, table=mutation.target, error=str(e)
                )
                raise

        self._count(kind, "success")
        if self._metrics is not None:
            self._metrics.drain_step_latency_seconds.labels(kind=kind).observe(
                time.perf_counter() - start
            )
        logger.debug("drain_step_completed", kind=kind, table=mutation.target)

    def _count(self, kind: str, status: str) -> None:
        if self._metrics is not None:
            self._metrics.mutations_total.labels(kind=kind, status=status).inc()

    def _update_depth(self) -> None:
        # Caller holds self._lock
        if self._metrics is not None:
            self._metrics.queue_depth.set(len(self._main.items))
