"""Twisted ElGamal confidential balances with bounded discrete-log decryption."""

from __future__ import annotations

__version__ = "0.1.0"

from confidential_balance.core.balance import EncryptedBalance
from confidential_balance.core.chunks import ChunkDecomposer, maximal_radix_chunks, recompose
from confidential_balance.core.elgamal import Ciphertext, TwistedElGamalCipher
from confidential_balance.core.group import G, GroupElement, H
from confidential_balance.core.keys import KeyPair
from confidential_balance.dlog import (
    BsgsSolver,
    DiscreteLogSolver,
    KangarooSolver,
    create_solver,
    get_solver,
    set_solver,
)
from confidential_balance.errors import (
    ConfidentialBalanceError,
    ConfigurationError,
    DiscreteLogNotFoundError,
    InvalidPointError,
    NotInitializedError,
    RangeError,
)
from confidential_balance.utils.types import ChunkParams, KangarooParams

__all__ = [
    "BsgsSolver",
    "ChunkDecomposer",
    "ChunkParams",
    "Ciphertext",
    "ConfidentialBalanceError",
    "ConfigurationError",
    "DiscreteLogNotFoundError",
    "DiscreteLogSolver",
    "EncryptedBalance",
    "G",
    "GroupElement",
    "H",
    "InvalidPointError",
    "KangarooParams",
    "KangarooSolver",
    "KeyPair",
    "NotInitializedError",
    "RangeError",
    "TwistedElGamalCipher",
    "create_solver",
    "get_solver",
    "maximal_radix_chunks",
    "recompose",
    "set_solver",
    "__version__",
]
