"""Dataclass definitions for confidential balance parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass

from confidential_balance.errors import ConfigurationError
from confidential_balance.utils.constants import (
    BITS_PER_CHUNK,
    KANGAROO_MAX_ATTEMPTS,
    KANGAROO_MAX_BIT_WIDTH,
    KANGAROO_NUM_JUMPS,
    NORMALIZED_CHUNK_BITS,
    RADIX_DECOMP_BITS,
    V_MAX_BITS,
)


@dataclass(frozen=True)
class ChunkParams:
    """Chunking parameters shared with the range-proof system.

    The prover and the decomposer must agree on all three values bit for bit.
    """

    v_max_bits: int = V_MAX_BITS
    radix_decomp_bits: int = RADIX_DECOMP_BITS
    bits_per_chunk: int = BITS_PER_CHUNK

    def __post_init__(self) -> None:
        if self.radix_decomp_bits <= 0:
            raise ConfigurationError("radix_decomp_bits must be > 0")
        if self.v_max_bits <= 0:
            raise ConfigurationError("v_max_bits must be > 0")
        if self.bits_per_chunk <= 0:
            raise ConfigurationError("bits_per_chunk must be > 0")
        if self.v_max_bits % self.radix_decomp_bits != 0:
            raise ConfigurationError("v_max_bits must be a multiple of radix_decomp_bits")
        if self.bits_per_chunk < self.radix_decomp_bits:
            raise ConfigurationError("bits_per_chunk must be >= radix_decomp_bits")

    @property
    def num_chunks(self) -> int:
        return self.v_max_bits // self.radix_decomp_bits

    @property
    def radix(self) -> int:
        return 1 << self.radix_decomp_bits

    @property
    def chunk_limit(self) -> int:
        """Largest value a single chunk may hold."""
        return (1 << self.bits_per_chunk) - 1

    @classmethod
    def normalized(cls, v_max_bits: int = V_MAX_BITS) -> ChunkParams:
        """Plain base-2^16 digits, no borrowing between chunks."""
        return cls(
            v_max_bits=v_max_bits,
            radix_decomp_bits=NORMALIZED_CHUNK_BITS,
            bits_per_chunk=NORMALIZED_CHUNK_BITS,
        )


@dataclass(frozen=True)
class KangarooParams:
    """Tuning knobs for the kangaroo solver.

    table_size: number of tame distinguished points kept per width.
        None picks 2^ceil(width/3).
    num_jumps: size of the pseudo-random jump set.
    max_attempts: wild walks tried per table before giving up.
    seed: seed for the jump set and tame starts. Tables built with the
        same seed and width are identical.
    """

    table_size: int | None = None
    num_jumps: int = KANGAROO_NUM_JUMPS
    max_attempts: int = KANGAROO_MAX_ATTEMPTS
    seed: int = 0

    def __post_init__(self) -> None:
        if self.table_size is not None and self.table_size <= 0:
            raise ConfigurationError("table_size must be > 0")
        if self.num_jumps <= 0:
            raise ConfigurationError("num_jumps must be > 0")
        if self.max_attempts <= 0:
            raise ConfigurationError("max_attempts must be > 0")

    def table_size_for(self, bit_width: int) -> int:
        if self.table_size is not None:
            return self.table_size
        return 1 << math.ceil(bit_width / 3)

    def walk_length_for(self, bit_width: int) -> int:
        """Expected steps between distinguished points, about sqrt(N / T)."""
        if bit_width <= 0 or bit_width > KANGAROO_MAX_BIT_WIDTH:
            raise ConfigurationError(
                f"kangaroo bit width must be in [1, {KANGAROO_MAX_BIT_WIDTH}], got {bit_width}"
            )
        return max(1, math.isqrt((1 << bit_width) // self.table_size_for(bit_width)))
