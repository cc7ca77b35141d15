"""Tests for process-wide solver selection."""

import pytest

from confidential_balance import dlog
from confidential_balance.core.elgamal import TwistedElGamalCipher
from confidential_balance.dlog import (
    BsgsSolver,
    KangarooSolver,
    available_solvers,
    create_solver,
    get_solver,
    reset_solver,
    set_solver,
)
from confidential_balance.errors import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_selection(monkeypatch):
    monkeypatch.delenv("CONFIDENTIAL_BALANCE_SOLVER", raising=False)
    reset_solver()
    yield
    reset_solver()


class TestCreateSolver:
    def test_available(self):
        assert available_solvers() == ["bsgs", "kangaroo"]

    def test_default_is_bsgs(self):
        solver = create_solver()
        assert isinstance(solver, BsgsSolver)
        assert solver.bit_widths == (16, 32)

    def test_by_name(self):
        solver = create_solver("Kangaroo", bit_widths=[16])
        assert isinstance(solver, KangarooSolver)
        assert solver.bit_widths == (16,)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONFIDENTIAL_BALANCE_SOLVER", "kangaroo")
        assert create_solver(bit_widths=[16]).algorithm_name == "kangaroo"

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError):
            create_solver("rho")


class TestProcessSolver:
    def test_get_solver_is_cached(self):
        assert get_solver() is get_solver()

    def test_set_solver(self):
        solver = BsgsSolver(bit_widths=(8,))
        set_solver(solver)
        assert get_solver() is solver
        set_solver(solver)

    def test_set_solver_twice_rejected(self):
        set_solver(BsgsSolver(bit_widths=(8,)))
        with pytest.raises(ConfigurationError):
            set_solver(BsgsSolver(bit_widths=(8,)))

    def test_set_solver_type_checked(self):
        with pytest.raises(ConfigurationError):
            set_solver(object())

    def test_reset(self):
        first = get_solver()
        reset_solver()
        assert get_solver() is not first

    def test_cipher_uses_process_solver(self):
        solver = BsgsSolver(bit_widths=(8,))
        set_solver(solver)
        cipher = TwistedElGamalCipher()
        assert cipher.solver is solver
        assert cipher.max_bit_width == 8
        assert dlog.get_solver() is solver
