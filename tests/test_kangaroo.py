"""Tests for the kangaroo solver and its table persistence."""

import pytest

from confidential_balance.core.elgamal import TwistedElGamalCipher
from confidential_balance.core.group import G, H
from confidential_balance.core.keys import KeyPair
from confidential_balance.dlog import KangarooSolver, KangarooTable
from confidential_balance.errors import (
    ConfigurationError,
    DiscreteLogNotFoundError,
    NotInitializedError,
)
from confidential_balance.utils.types import KangarooParams

PARAMS = KangarooParams(max_attempts=256)


@pytest.fixture(scope="module")
def table():
    return KangarooTable.build(16, params=PARAMS)


class TestKangarooParams:
    def test_defaults_for_16_bits(self):
        params = KangarooParams()
        assert params.table_size_for(16) == 64
        assert params.walk_length_for(16) == 32

    def test_explicit_table_size(self):
        params = KangarooParams(table_size=256)
        assert params.table_size_for(16) == 256
        assert params.walk_length_for(16) == 16

    @pytest.mark.parametrize("width", [0, 63])
    def test_width_limits(self, width):
        with pytest.raises(ConfigurationError):
            KangarooParams().walk_length_for(width)

    @pytest.mark.parametrize(
        "kwargs", [{"table_size": 0}, {"num_jumps": 0}, {"max_attempts": 0}]
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            KangarooParams(**kwargs)


class TestKangarooTable:
    def test_build_is_deterministic(self, table):
        again = KangarooTable.build(16, params=PARAMS)
        assert again.jump_exponents == table.jump_exponents
        assert len(again) == len(table)

    def test_table_populated(self, table):
        assert table.bit_width == 16
        assert table.walk_length == 32
        assert 0 < len(table) <= 64
        assert len(table.jump_exponents) == PARAMS.num_jumps
        assert all(1 <= s <= 32 for s in table.jump_exponents)

    @pytest.mark.parametrize("x", [0, 1, 777, 40000, 65535])
    def test_solve(self, table, x):
        assert table.solve(H * x) == x

    def test_out_of_range_returns_none(self):
        small = KangarooTable.build(16, params=KangarooParams(max_attempts=4))
        assert small.solve(H * 2**20) is None

    def test_save_and_load(self, table, tmp_path):
        path = tmp_path / "kangaroo_16.npz"
        table.save(path)
        loaded = KangarooTable.load(path, params=PARAMS)
        assert loaded.bit_width == 16
        assert loaded.walk_length == table.walk_length
        assert loaded.jump_exponents == table.jump_exponents
        assert len(loaded) == len(table)
        assert loaded.solve(H * 12345) == 12345

    def test_load_rejects_other_base(self, table, tmp_path):
        path = tmp_path / "kangaroo_16.npz"
        table.save(path)
        with pytest.raises(ConfigurationError):
            KangarooTable.load(path, base=G)


class TestKangarooSolver:
    def test_algorithm_name(self):
        assert KangarooSolver(bit_widths=(16,)).algorithm_name == "kangaroo"

    def test_odd_width_allowed(self):
        assert KangarooSolver(bit_widths=(15,)).bit_widths == (15,)

    def test_width_too_large(self):
        with pytest.raises(ConfigurationError):
            KangarooSolver(bit_widths=(64,))

    def test_solve_before_initialize(self):
        with pytest.raises(NotInitializedError):
            KangarooSolver(bit_widths=(16,)).solve(H)

    async def test_initialize_and_decrypt(self):
        solver = KangarooSolver(bit_widths=(16,), params=PARAMS)
        await solver.initialize()
        assert solver.is_initialized()

        cipher = TwistedElGamalCipher(solver)
        key = KeyPair.generate()
        for x in (0, 31337, 65535):
            assert cipher.decrypt(cipher.encrypt(x, key.public_key), key) == x

    def test_not_found(self):
        solver = KangarooSolver(bit_widths=(16,), params=KangarooParams(max_attempts=4))
        solver.initialize_sync()
        with pytest.raises(DiscreteLogNotFoundError):
            solver.solve(H * 2**20)

    def test_save_tables_and_reload(self, tmp_path):
        solver = KangarooSolver(bit_widths=(16,), params=PARAMS)
        solver.initialize_sync()
        paths = solver.save_tables(tmp_path)
        assert paths == [tmp_path / "kangaroo_16.npz"]

        reloaded = KangarooSolver(bit_widths=(16,), params=PARAMS, table_dir=tmp_path)
        reloaded.initialize_sync()
        assert len(reloaded.get_table(16)) == len(solver.get_table(16))
        assert reloaded.solve(H * 54321) == 54321

    def test_table_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONFIDENTIAL_BALANCE_KANGAROO_DIR", str(tmp_path))
        solver = KangarooSolver(bit_widths=(16,))
        assert solver.table_path(16) == tmp_path / "kangaroo_16.npz"

    def test_mismatched_file_width(self, table, tmp_path):
        table.save(tmp_path / "kangaroo_18.npz")
        solver = KangarooSolver(bit_widths=(18,), table_dir=tmp_path)
        with pytest.raises(ConfigurationError):
            solver.initialize_sync()

    def test_save_tables_without_directory(self, monkeypatch):
        monkeypatch.delenv("CONFIDENTIAL_BALANCE_KANGAROO_DIR", raising=False)
        with pytest.raises(ConfigurationError):
            KangarooSolver(bit_widths=(16,)).save_tables()
