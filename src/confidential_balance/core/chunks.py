"""Radix chunk decomposition of wide balances.

A balance 0 <= v < 2^v_max_bits is split into ell = v_max_bits /
radix_decomp_bits chunks w[0..ell-1] with

    v = sum(w[i] * R^i),  R = 2^radix_decomp_bits,  w[i] < 2^bits_per_chunk

Starting from plain base-R digits, each chunk borrows as many whole units
from its upper neighbour as still fit, packing magnitude into the low
chunks. Only the low chunks then carry value, so fewer of them need a
discrete log at decryption time.
"""

from __future__ import annotations

from collections.abc import Sequence

from confidential_balance.errors import ConfigurationError, RangeError
from confidential_balance.utils.types import ChunkParams


def _check_value(v: int, v_max_bits: int) -> None:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"Value must be an int, got {type(v).__name__}")
    if v < 0 or v >= (1 << v_max_bits):
        raise RangeError(f"Value must be in [0, 2^{v_max_bits}), got {v}")


def canonical_chunks(v: int, radix_decomp_bits: int, v_max_bits: int) -> list[int]:
    """Plain base-2^radix_decomp_bits digits of v, least significant first."""
    mask = (1 << radix_decomp_bits) - 1
    return [(v >> (i * radix_decomp_bits)) & mask for i in range(v_max_bits // radix_decomp_bits)]


def maximal_radix_chunks(
    v: int,
    radix_decomp_bits: int,
    v_max_bits: int,
    bits_per_chunk: int,
) -> list[int]:
    """Decompose v into locally maximal chunks.

    Raises:
        ConfigurationError: inconsistent parameters.
        RangeError: v outside [0, 2^v_max_bits).
    """
    params = ChunkParams(v_max_bits, radix_decomp_bits, bits_per_chunk)
    _check_value(v, v_max_bits)

    radix = params.radix
    limit = params.chunk_limit
    w = canonical_chunks(v, radix_decomp_bits, v_max_bits)

    changed = True
    while changed:
        changed = False
        for i in range(len(w) - 1):
            room = limit - w[i]
            if room < radix or w[i + 1] == 0:
                continue
            t = min(w[i + 1], room // radix)
            w[i] += t * radix
            w[i + 1] -= t
            changed = True
    return w


def recompose(chunks: Sequence[int], radix_decomp_bits: int) -> int:
    """sum(chunks[i] * 2^(radix_decomp_bits * i))."""
    v = 0
    for i in reversed(range(len(chunks))):
        v = (v << radix_decomp_bits) + chunks[i]
    return v


class ChunkDecomposer:
    """Decompose and recompose balances for one fixed ChunkParams."""

    def __init__(self, params: ChunkParams | None = None) -> None:
        self.params = params or ChunkParams()

    @property
    def num_chunks(self) -> int:
        return self.params.num_chunks

    def decompose(self, v: int) -> list[int]:
        p = self.params
        return maximal_radix_chunks(v, p.radix_decomp_bits, p.v_max_bits, p.bits_per_chunk)

    def canonical_chunks(self, v: int) -> list[int]:
        _check_value(v, self.params.v_max_bits)
        return canonical_chunks(v, self.params.radix_decomp_bits, self.params.v_max_bits)

    def recompose(self, chunks: Sequence[int]) -> int:
        if len(chunks) != self.num_chunks:
            raise ConfigurationError(
                f"Expected {self.num_chunks} chunks, got {len(chunks)}"
            )
        for i, w in enumerate(chunks):
            if w < 0 or w > self.params.chunk_limit:
                raise RangeError(
                    f"Chunk {i} must be in [0, 2^{self.params.bits_per_chunk}), got {w}"
                )
        return recompose(chunks, self.params.radix_decomp_bits)

    def is_locally_maximal(self, chunks: Sequence[int]) -> bool:
        """True if no chunk could absorb another unit from its upper neighbour."""
        radix = self.params.radix
        limit = self.params.chunk_limit
        return all(
            chunks[i] + radix > limit or chunks[i + 1] == 0
            for i in range(len(chunks) - 1)
        )

    def __repr__(self) -> str:
        p = self.params
        return (
            f"ChunkDecomposer(v_max_bits={p.v_max_bits}, "
            f"radix_decomp_bits={p.radix_decomp_bits}, bits_per_chunk={p.bits_per_chunk})"
        )
