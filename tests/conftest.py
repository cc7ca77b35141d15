"""Shared fixtures: one initialized solver and key pair per test session."""

import pytest

from confidential_balance.core.elgamal import TwistedElGamalCipher
from confidential_balance.core.keys import KeyPair
from confidential_balance.dlog import BsgsSolver


@pytest.fixture(scope="session")
def solver():
    s = BsgsSolver(bit_widths=(16, 32))
    s.initialize_sync()
    return s


@pytest.fixture(scope="session")
def cipher(solver):
    return TwistedElGamalCipher(solver)


@pytest.fixture(scope="session")
def key_pair():
    return KeyPair.generate()
