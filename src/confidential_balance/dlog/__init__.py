"""Discrete-log solvers for twisted ElGamal decryption.

Two engines fulfil the same DiscreteLogSolver contract:

- ``bsgs``: baby-step giant-step tables (default)
- ``kangaroo``: Pollard kangaroo over precomputed tame tables

The process-wide engine is selected once, either by calling set_solver()
at startup or lazily by get_solver(), which honours the
CONFIDENTIAL_BALANCE_SOLVER environment variable.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable

from confidential_balance.dlog.base import DiscreteLogSolver
from confidential_balance.dlog.bsgs import BsgsSolver, DiscreteLogTable
from confidential_balance.dlog.kangaroo import KangarooSolver, KangarooTable
from confidential_balance.errors import ConfigurationError
from confidential_balance.utils.constants import (
    DEFAULT_BIT_WIDTHS,
    DEFAULT_SOLVER,
    SOLVER_ENV_VAR,
)

logger = logging.getLogger(__name__)

_SOLVERS: dict[str, type[DiscreteLogSolver]] = {
    BsgsSolver.algorithm_name: BsgsSolver,
    KangarooSolver.algorithm_name: KangarooSolver,
}

_solver: DiscreteLogSolver | None = None
_solver_lock = threading.Lock()


def available_solvers() -> list[str]:
    return sorted(_SOLVERS)


def create_solver(
    name: str | None = None,
    bit_widths: Iterable[int] = DEFAULT_BIT_WIDTHS,
    **kwargs,
) -> DiscreteLogSolver:
    """Instantiate a solver by name (default: $CONFIDENTIAL_BALANCE_SOLVER or bsgs)."""
    if name is None:
        name = os.environ.get(SOLVER_ENV_VAR) or DEFAULT_SOLVER
    key = name.strip().lower()
    try:
        cls = _SOLVERS[key]
    except KeyError:
        raise ConfigurationError(
            f"Unknown discrete-log solver {name!r}; choose from {available_solvers()}"
        ) from None
    return cls(bit_widths=bit_widths, **kwargs)


def get_solver() -> DiscreteLogSolver:
    """Return the process-wide solver, creating it on first use."""
    global _solver
    with _solver_lock:
        if _solver is None:
            _solver = create_solver()
            logger.debug("selected discrete-log solver: %s", _solver.algorithm_name)
        return _solver


def set_solver(solver: DiscreteLogSolver) -> None:
    """Install the process-wide solver. Allowed once per process."""
    global _solver
    if not isinstance(solver, DiscreteLogSolver):
        raise ConfigurationError(f"Expected a DiscreteLogSolver, got {type(solver).__name__}")
    with _solver_lock:
        if _solver is not None and _solver is not solver:
            raise ConfigurationError(
                f"A {_solver.algorithm_name} solver is already selected for this process"
            )
        _solver = solver
        logger.debug("selected discrete-log solver: %s", solver.algorithm_name)


def reset_solver() -> None:
    """Forget the process-wide solver so a new one can be selected."""
    global _solver
    with _solver_lock:
        _solver = None


__all__ = [
    "BsgsSolver",
    "DiscreteLogSolver",
    "DiscreteLogTable",
    "KangarooSolver",
    "KangarooTable",
    "available_solvers",
    "create_solver",
    "get_solver",
    "reset_solver",
    "set_solver",
]
