"""Abstract discrete-log solver contract.

A solver recovers x from x * Base for x below 2^b, where b is one of the
solver's configured bit widths. Concrete engines only describe how to
build a table for one width and how to search it; this module owns the
lifecycle shared by all of them:

- tables are built once per width on a worker thread, off the event loop
- concurrent initialize() calls coalesce onto the single in-flight build
- a table is published only when complete and is never mutated again
- solve() fails fast with NotInitializedError until every configured
  width has a table
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from confidential_balance.core.group import GroupElement, H
from confidential_balance.errors import (
    ConfigurationError,
    DiscreteLogNotFoundError,
    NotInitializedError,
)
from confidential_balance.utils.constants import DEFAULT_BIT_WIDTHS

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(thread_name_prefix="dlog-table")
        return _executor


def _covers(tables: dict[int, SolverTable], widths: tuple[int, ...]) -> bool:
    return all(width in tables for width in widths)


class SolverTable(Protocol):
    """Frozen per-width search structure."""

    bit_width: int

    def solve(self, target: GroupElement) -> int | None: ...

    def __len__(self) -> int: ...


class DiscreteLogSolver(ABC):
    """Bounded discrete-log solver over a fixed base point.

    Subclasses set algorithm_name and implement _build_table(); they may
    tighten _validate_width().
    """

    algorithm_name: str = "abstract"

    def __init__(
        self,
        bit_widths: Iterable[int] = DEFAULT_BIT_WIDTHS,
        base: GroupElement | None = None,
    ) -> None:
        self.base = base if base is not None else H
        self._bit_widths = self._normalize_widths(bit_widths)
        self._tables: dict[int, SolverTable] = {}
        self._builds: dict[int, Future] = {}
        self._generation = 0
        self._lock = threading.Lock()

    # -- Configuration --

    @property
    def bit_widths(self) -> tuple[int, ...]:
        """Configured widths, ascending."""
        return self._bit_widths

    @property
    def max_bit_width(self) -> int:
        return self._bit_widths[-1]

    def _validate_width(self, bit_width: int) -> None:
        if not isinstance(bit_width, int) or bit_width <= 0:
            raise ConfigurationError(f"bit width must be a positive integer, got {bit_width!r}")

    def _normalize_widths(self, bit_widths: Iterable[int]) -> tuple[int, ...]:
        widths = sorted(set(bit_widths))
        if not widths:
            raise ConfigurationError("at least one bit width is required")
        for width in widths:
            self._validate_width(width)
        return tuple(widths)

    def _configure(self, bit_widths: Iterable[int] | None) -> tuple[int, ...]:
        """Merge requested widths into the configured set; return the requested ones."""
        if bit_widths is None:
            return self._bit_widths
        requested = self._normalize_widths(bit_widths)
        with self._lock:
            self._bit_widths = tuple(sorted(set(self._bit_widths) | set(requested)))
        return requested

    # -- Table lifecycle --

    @abstractmethod
    def _build_table(self, bit_width: int) -> SolverTable:
        """Build the complete table for one width. Runs on a worker thread."""

    def _run_build(self, bit_width: int, generation: int) -> SolverTable:
        start = time.perf_counter()
        try:
            table = self._build_table(bit_width)
        except BaseException:
            with self._lock:
                if generation == self._generation:
                    self._builds.pop(bit_width, None)
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        with self._lock:
            # A clear() during the build discards its result.
            if generation == self._generation:
                self._tables[bit_width] = table
        logger.info(
            "%s: built %d-bit table (%d entries) in %.2f ms",
            self.algorithm_name, bit_width, len(table), elapsed_ms,
        )
        return table

    def _start_build(self, bit_width: int) -> Future:
        with self._lock:
            future = self._builds.get(bit_width)
            if future is None or future.cancelled():
                future = _get_executor().submit(self._run_build, bit_width, self._generation)
                self._builds[bit_width] = future
        return future

    async def initialize(self, bit_widths: Iterable[int] | None = None) -> None:
        """Build any missing tables for bit_widths (default: all configured).

        Idempotent. Concurrent callers wait on the same build. A failed
        build is forgotten, so awaiting initialize() again retries it.
        """
        widths = self._configure(bit_widths)
        futures = [self._start_build(width) for width in widths]
        for future in futures:
            # Shielded so one caller's cancellation never aborts a shared build.
            await asyncio.shield(asyncio.wrap_future(future))

    def initialize_sync(self, bit_widths: Iterable[int] | None = None) -> None:
        """Blocking variant of initialize() for code outside an event loop."""
        widths = self._configure(bit_widths)
        futures = [self._start_build(width) for width in widths]
        for future in futures:
            future.result()

    def is_initialized(self) -> bool:
        return _covers(self._tables, self._bit_widths)

    def has_table(self, bit_width: int) -> bool:
        return bit_width in self._tables

    def get_table(self, bit_width: int) -> SolverTable | None:
        return self._tables.get(bit_width)

    def clear(self) -> None:
        """Drop every table. The solver must be initialized again before use."""
        with self._lock:
            self._tables = {}
            self._builds = {}
            self._generation += 1

    # -- Solving --

    def solve(self, target: GroupElement | bytes) -> int:
        """Return x with x * Base == target, trying the smallest table first.

        Raises:
            NotInitializedError: a configured table is not built yet.
            DiscreteLogNotFoundError: no table yields a verified match.
        """
        if not isinstance(target, GroupElement):
            target = GroupElement.from_bytes(target)
        # Snapshot once: a table dict only grows in place, widths are replaced whole.
        tables, widths = self._tables, self._bit_widths
        if not _covers(tables, widths):
            raise NotInitializedError(
                f"{self.algorithm_name} solver is not initialized; await initialize() first"
            )
        for width in widths:
            x = tables[width].solve(target)
            if x is not None:
                return x
        raise DiscreteLogNotFoundError(
            f"{self.algorithm_name}: no solution below 2^{widths[-1]}"
        )

    def __repr__(self) -> str:
        built = sorted(self._tables)
        return f"{type(self).__name__}(bit_widths={self._bit_widths}, built={built})"
