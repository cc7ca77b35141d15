"""Pollard kangaroo solver with precomputed tame distinguished points.

Tame kangaroos start at known exponents spread over [0, 2^(b+1)) and hop
with a pseudo-random jump set until they land on a distinguished point
(DP); each DP is stored with its exponent. At solve time a wild kangaroo
starts at target + y * Base, y random in [0, 2^b), and hops with the same
jump set. Once it lands on a tame footprint both walks coincide, so it
reaches a stored DP and the exponent difference gives x.

The search is probabilistic: a wild walk that misses every tame trail is
restarted with a fresh offset, up to max_attempts times. Any candidate is
range-checked and verified before it is returned.

Precomputation costs roughly table_size * walk_length group additions,
which grows as 2^(2b/3) with the default table size. Tables can be saved
to .npz files and reloaded to skip it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from confidential_balance.core.group import GroupElement, H
from confidential_balance.dlog.base import DiscreteLogSolver
from confidential_balance.errors import ConfigurationError
from confidential_balance.utils.constants import (
    DEFAULT_BIT_WIDTHS,
    KANGAROO_DIR_ENV_VAR,
    KANGAROO_WALK_FACTOR,
    POINT_SIZE,
)
from confidential_balance.utils.types import KangarooParams

logger = logging.getLogger(__name__)


class KangarooTable:
    """Frozen tame-DP table and jump set for one bit width."""

    __slots__ = (
        "bit_width", "base", "walk_length", "jump_exponents",
        "max_attempts", "_jump_points", "_traps",
    )

    def __init__(
        self,
        bit_width: int,
        base: GroupElement,
        walk_length: int,
        jump_exponents: list[int],
        traps: dict[bytes, int],
        max_attempts: int,
    ) -> None:
        self.bit_width = bit_width
        self.base = base
        self.walk_length = walk_length
        self.jump_exponents = tuple(jump_exponents)
        self.max_attempts = max_attempts
        self._jump_points = tuple(base * s for s in self.jump_exponents)
        self._traps = traps

    @classmethod
    def build(
        cls,
        bit_width: int,
        base: GroupElement = H,
        params: KangarooParams | None = None,
    ) -> KangarooTable:
        params = params or KangarooParams()
        walk_length = params.walk_length_for(bit_width)
        table_size = params.table_size_for(bit_width)
        n = 1 << bit_width
        mean = max(1, walk_length // 2)

        rng = np.random.default_rng(params.seed)
        jumps = [int(s) for s in rng.integers(1, 2 * mean + 1, size=params.num_jumps)]
        table = cls(bit_width, base, walk_length, jumps, {}, params.max_attempts)

        traps: dict[bytes, int] = {}
        for _ in range(4 * table_size):
            if len(traps) >= table_size:
                break
            # Wild starts x + y fall anywhere in [0, 2n).
            start = int(rng.integers(0, 2 * n, dtype=np.uint64))
            hit = table._walk(base * start)
            if hit is None:
                continue
            dp, distance = hit
            traps.setdefault(dp, start + distance)
        table._traps = traps
        return table

    # -- Walk primitives --

    def _is_distinguished(self, encoded: bytes) -> bool:
        return int.from_bytes(encoded[:8], "little") % self.walk_length == 0

    def _jump_index(self, encoded: bytes) -> int:
        return int.from_bytes(encoded[8:16], "little") % len(self.jump_exponents)

    def _walk(self, start: GroupElement) -> tuple[bytes, int] | None:
        """Hop from start to the first DP. Returns (dp, distance) or None if too long."""
        point = start
        distance = 0
        for _ in range(KANGAROO_WALK_FACTOR * self.walk_length):
            encoded = point.to_bytes()
            if self._is_distinguished(encoded):
                return encoded, distance
            idx = self._jump_index(encoded)
            point = point + self._jump_points[idx]
            distance += self.jump_exponents[idx]
        return None

    # -- Solving --

    def solve(self, target: GroupElement) -> int | None:
        n = 1 << self.bit_width
        rng = np.random.default_rng()
        for _ in range(self.max_attempts):
            offset = int(rng.integers(0, n, dtype=np.uint64))
            hit = self._walk(target + self.base * offset)
            if hit is None:
                continue
            dp, distance = hit
            tame_log = self._traps.get(dp)
            if tame_log is None:
                continue
            x = tame_log - offset - distance
            if 0 <= x < n and self.base * x == target:
                return x
        return None

    # -- Persistence --

    def save(self, path: str | os.PathLike) -> None:
        dps = list(self._traps)
        np.savez(
            path,
            bit_width=np.int64(self.bit_width),
            walk_length=np.int64(self.walk_length),
            jumps=np.array(self.jump_exponents, dtype=np.uint64),
            points=np.frombuffer(b"".join(dps), dtype=np.uint8).reshape(-1, POINT_SIZE),
            logs=np.array([self._traps[dp] for dp in dps], dtype=np.uint64),
            base=np.frombuffer(self.base.to_bytes(), dtype=np.uint8),
        )

    @classmethod
    def load(
        cls,
        path: str | os.PathLike,
        base: GroupElement = H,
        params: KangarooParams | None = None,
    ) -> KangarooTable:
        params = params or KangarooParams()
        with np.load(path) as data:
            if data["base"].tobytes() != base.to_bytes():
                raise ConfigurationError(f"Kangaroo table {path} was built for a different base point")
            points = data["points"]
            logs = data["logs"]
            traps = {points[i].tobytes(): int(logs[i]) for i in range(len(logs))}
            return cls(
                bit_width=int(data["bit_width"]),
                base=base,
                walk_length=int(data["walk_length"]),
                jump_exponents=[int(s) for s in data["jumps"]],
                traps=traps,
                max_attempts=params.max_attempts,
            )

    def __len__(self) -> int:
        return len(self._traps)

    def __repr__(self) -> str:
        return (
            f"KangarooTable(bit_width={self.bit_width}, walk_length={self.walk_length}, "
            f"traps={len(self._traps)})"
        )


class KangarooSolver(DiscreteLogSolver):
    """Alternate engine: kangaroo search over precomputed tame tables.

    If table_dir (or $CONFIDENTIAL_BALANCE_KANGAROO_DIR) holds
    kangaroo_<width>.npz, that table is loaded instead of built.
    """

    algorithm_name = "kangaroo"

    def __init__(
        self,
        bit_widths: Iterable[int] = DEFAULT_BIT_WIDTHS,
        base: GroupElement | None = None,
        params: KangarooParams | None = None,
        table_dir: str | os.PathLike | None = None,
    ) -> None:
        self.params = params or KangarooParams()
        super().__init__(bit_widths=bit_widths, base=base)
        if table_dir is None:
            table_dir = os.environ.get(KANGAROO_DIR_ENV_VAR) or None
        self.table_dir = Path(table_dir) if table_dir is not None else None

    def _validate_width(self, bit_width: int) -> None:
        super()._validate_width(bit_width)
        self.params.walk_length_for(bit_width)

    def table_path(self, bit_width: int) -> Path | None:
        if self.table_dir is None:
            return None
        return self.table_dir / f"kangaroo_{bit_width}.npz"

    def _build_table(self, bit_width: int) -> KangarooTable:
        path = self.table_path(bit_width)
        if path is not None and path.exists():
            logger.info("kangaroo: loading %d-bit table from %s", bit_width, path)
            table = KangarooTable.load(path, self.base, self.params)
            if table.bit_width != bit_width:
                raise ConfigurationError(
                    f"{path} holds a {table.bit_width}-bit table, expected {bit_width}"
                )
            return table
        return KangarooTable.build(bit_width, self.base, self.params)

    def save_tables(self, directory: str | os.PathLike | None = None) -> list[Path]:
        """Write every built table as kangaroo_<width>.npz; return the paths."""
        target = Path(directory) if directory is not None else self.table_dir
        if target is None:
            raise ConfigurationError("no table directory given")
        target.mkdir(parents=True, exist_ok=True)
        paths = []
        for width in self.bit_widths:
            table = self.get_table(width)
            if table is None:
                continue
            path = target / f"kangaroo_{width}.npz"
            table.save(path)
            paths.append(path)
        return paths
