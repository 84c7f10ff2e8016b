"""Fork-join helpers for outer-loop partitions."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from multiprocessing import cpu_count

logger = logging.getLogger(__name__)

NUM_THREADS_ENV = "FCSYMPY_NUM_THREADS"

Worker = Callable[[int, int], None]


def resolve_n_threads(n_threads: int | None = None) -> int:
    """Return the thread count to use.

    ``None`` reads ``FCSYMPY_NUM_THREADS`` and falls back to the number of
    CPUs.
    """

    if n_threads is None:
        n_threads_env = os.environ.get(NUM_THREADS_ENV, "").strip()
        if n_threads_env:
            try:
                n_threads = int(n_threads_env)
            except ValueError as exc:
                raise ValueError(f"{NUM_THREADS_ENV} must be an integer, got '{n_threads_env}'.") from exc
        else:
            n_threads = cpu_count()
    n_threads = int(n_threads)
    if n_threads <= 0:
        raise ValueError("n_threads must be positive.")
    return n_threads


def partition_ranges(n_items: int, n_parts: int) -> list[tuple[int, int]]:
    """Split ``range(n_items)`` into at most ``n_parts`` contiguous ranges."""

    if n_items <= 0:
        return []
    n_parts = max(1, min(int(n_parts), int(n_items)))
    bounds = [(k * n_items) // n_parts for k in range(n_parts + 1)]
    return [(bounds[k], bounds[k + 1]) for k in range(n_parts) if bounds[k + 1] > bounds[k]]


def run_partitioned(worker: Worker, n_items: int, n_threads: int | None = None) -> None:
    """Call ``worker(start, stop)`` over disjoint ranges covering ``n_items``.

    Workers must write to disjoint memory. All partitions are joined before
    returning and the first failure is re-raised in the caller.
    """

    nthr = resolve_n_threads(n_threads)
    ranges = partition_ranges(n_items, nthr)
    if len(ranges) <= 1:
        for start, stop in ranges:
            worker(start, stop)
        return

    logger.debug("Running %d partitions over %d items on %d threads.", len(ranges), n_items, nthr)
    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        futures = [pool.submit(worker, start, stop) for start, stop in ranges]
        for fut in futures:
            fut.result()
