"""Tests for radix chunk decomposition."""

import numpy as np
import pytest

from confidential_balance.core.chunks import (
    ChunkDecomposer,
    canonical_chunks,
    maximal_radix_chunks,
    recompose,
)
from confidential_balance.errors import ConfigurationError, RangeError
from confidential_balance.utils.constants import BITS_PER_CHUNK, RADIX_DECOMP_BITS, V_MAX_BITS
from confidential_balance.utils.types import ChunkParams

LIMIT = 2**32 - 1


class TestChunkParams:
    def test_defaults(self):
        params = ChunkParams()
        assert (params.v_max_bits, params.radix_decomp_bits, params.bits_per_chunk) == (
            V_MAX_BITS, RADIX_DECOMP_BITS, BITS_PER_CHUNK,
        )
        assert params.num_chunks == 8
        assert params.radix == 65536
        assert params.chunk_limit == LIMIT

    def test_normalized(self):
        params = ChunkParams.normalized()
        assert params.bits_per_chunk == params.radix_decomp_bits == 16

    @pytest.mark.parametrize(
        "args",
        [(128, 0, 32), (0, 16, 32), (128, 16, 0), (128, -16, 32), (100, 16, 32), (128, 16, 8)],
    )
    def test_invalid(self, args):
        with pytest.raises(ConfigurationError):
            ChunkParams(*args)


class TestMaximalRadixChunks:
    def test_zero(self):
        assert maximal_radix_chunks(0, 16, 128, 32) == [0] * 8

    def test_small_value_fits_first_chunk(self):
        assert maximal_radix_chunks(123456789, 16, 128, 32) == [123456789] + [0] * 7

    def test_borrow_single_unit(self):
        assert maximal_radix_chunks(2**16, 16, 128, 32) == [65536] + [0] * 7

    def test_borrow_across_two_positions(self):
        chunks = maximal_radix_chunks(2**32, 16, 128, 32)
        assert chunks == [2**32 - 65536, 1] + [0] * 6

    def test_max_value(self):
        v = 2**128 - 1
        chunks = maximal_radix_chunks(v, 16, 128, 32)
        assert len(chunks) == 8
        assert recompose(chunks, 16) == v
        assert all(0 <= w <= LIMIT for w in chunks)
        assert ChunkDecomposer().is_locally_maximal(chunks)

    def test_random_round_trips(self):
        rng = np.random.default_rng(7)
        decomposer = ChunkDecomposer()
        for _ in range(50):
            v = int.from_bytes(rng.bytes(16), "little")
            chunks = decomposer.decompose(v)
            assert len(chunks) == 8
            assert all(0 <= w <= LIMIT for w in chunks)
            assert decomposer.recompose(chunks) == v
            assert decomposer.is_locally_maximal(chunks)

    def test_normalized_equals_canonical(self):
        v = 0x0123_4567_89AB_CDEF_FEDC_BA98_7654_3210
        assert maximal_radix_chunks(v, 16, 128, 16) == canonical_chunks(v, 16, 128)

    @pytest.mark.parametrize("v", [-1, 2**128])
    def test_out_of_range(self, v):
        with pytest.raises(RangeError):
            maximal_radix_chunks(v, 16, 128, 32)

    @pytest.mark.parametrize("v", [True, 3.0])
    def test_value_must_be_int(self, v):
        with pytest.raises(TypeError):
            maximal_radix_chunks(v, 16, 128, 32)

    def test_parameters_checked_before_value(self):
        with pytest.raises(ConfigurationError):
            maximal_radix_chunks(-1, 0, 128, 32)

    def test_other_geometry(self):
        chunks = maximal_radix_chunks(1000, 4, 16, 8)
        assert len(chunks) == 4
        assert recompose(chunks, 4) == 1000
        assert all(w <= 255 for w in chunks)


class TestCanonicalChunks:
    def test_digits(self):
        assert canonical_chunks(0x0003_0002_0001, 16, 64) == [1, 2, 3, 0]

    def test_decomposer_checks_range(self):
        with pytest.raises(RangeError):
            ChunkDecomposer().canonical_chunks(2**128)


class TestRecompose:
    def setup_method(self):
        self.decomposer = ChunkDecomposer()

    def test_function(self):
        assert recompose([1, 2, 3], 16) == 1 + 2 * 2**16 + 3 * 2**32
        assert recompose([], 16) == 0

    def test_wrong_count(self):
        with pytest.raises(ConfigurationError):
            self.decomposer.recompose([1, 2, 3])

    def test_negative_chunk(self):
        with pytest.raises(RangeError):
            self.decomposer.recompose([-1] + [0] * 7)

    def test_chunk_too_wide(self):
        with pytest.raises(RangeError):
            self.decomposer.recompose([2**32] + [0] * 7)


class TestLocalMaximality:
    def setup_method(self):
        self.decomposer = ChunkDecomposer()

    def test_canonical_digits_not_maximal(self):
        assert not self.decomposer.is_locally_maximal([1, 1, 0, 0, 0, 0, 0, 0])

    def test_full_low_chunk(self):
        assert self.decomposer.is_locally_maximal([LIMIT, 5, 0, 0, 0, 0, 0, 0])

    def test_all_zero(self):
        assert self.decomposer.is_locally_maximal([0] * 8)
