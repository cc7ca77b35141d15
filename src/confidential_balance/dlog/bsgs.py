"""Baby-step giant-step discrete-log tables.

Given P = x * Base with 0 <= x < 2^b, finds x in O(2^(b/2)) group
operations using a table of 2^(b/2) baby steps.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from confidential_balance.core.group import GroupElement, H
from confidential_balance.dlog.base import DiscreteLogSolver
from confidential_balance.errors import ConfigurationError


class DiscreteLogTable:
    """Frozen baby-step table for one bit width.

    baby_steps maps encode(j * Base) -> j for j in [0, m), m = 2^(b/2),
    so the table covers exponents in [0, 2^b).
    """

    __slots__ = ("bit_width", "m", "base", "_baby_steps", "_neg_giant_step")

    def __init__(
        self,
        bit_width: int,
        base: GroupElement,
        baby_steps: Mapping[bytes, int],
        giant_step: GroupElement,
    ) -> None:
        self.bit_width = bit_width
        self.m = 1 << (bit_width // 2)
        self.base = base
        self._baby_steps = baby_steps
        self._neg_giant_step = -giant_step

    @classmethod
    def build(cls, bit_width: int, base: GroupElement = H) -> DiscreteLogTable:
        """Compute j * Base for j in [0, m) using additions only."""
        validate_bsgs_width(bit_width)
        m = 1 << (bit_width // 2)
        baby_steps: dict[bytes, int] = {}
        current = GroupElement.identity()
        for j in range(m):
            baby_steps[current.to_bytes()] = j
            current = current + base
        # current == m * Base here
        return cls(bit_width, base, MappingProxyType(baby_steps), current)

    @property
    def baby_steps(self) -> Mapping[bytes, int]:
        return self._baby_steps

    def covers(self, x: int) -> bool:
        return 0 <= x < (1 << self.bit_width)

    def solve(self, target: GroupElement) -> int | None:
        """Return x in [0, 2^b) with x * Base == target, or None.

        Every table hit is confirmed by recomputing the exponent's point.
        """
        m = self.m
        baby_steps = self._baby_steps
        gamma = target
        for i in range(m):
            j = baby_steps.get(gamma.to_bytes())
            if j is not None:
                x = i * m + j
                if self.base * x == target:
                    return x
            gamma = gamma + self._neg_giant_step
        return None

    def __len__(self) -> int:
        return len(self._baby_steps)

    def __repr__(self) -> str:
        return f"DiscreteLogTable(bit_width={self.bit_width}, m={self.m})"


def validate_bsgs_width(bit_width: int) -> None:
    if not isinstance(bit_width, int) or bit_width <= 0:
        raise ConfigurationError(f"bit width must be positive, got {bit_width!r}")
    if bit_width % 2 != 0:
        raise ConfigurationError(f"bit width must be even for BSGS, got {bit_width}")


class BsgsSolver(DiscreteLogSolver):
    """Table-based solver holding one DiscreteLogTable per configured width.

    Small amounts resolve in the small table; larger ones fall through to
    the next width up.
    """

    algorithm_name = "bsgs"

    def _validate_width(self, bit_width: int) -> None:
        validate_bsgs_width(bit_width)

    def _build_table(self, bit_width: int) -> DiscreteLogTable:
        return DiscreteLogTable.build(bit_width, self.base)
