"""Twisted ElGamal encryption over edwards25519.

A ciphertext of x under public key pk = sk * G is

    C = x * H + r * pk
    D = r * G

for a fresh random scalar r. Decryption computes C - sk * D = x * H and
recovers x with a bounded discrete-log solver, so plaintexts must stay
within the solver's bit widths. Ciphertexts add component-wise, which
adds the plaintexts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from confidential_balance.core.group import G, GroupElement, H, random_scalar
from confidential_balance.errors import ConfigurationError, InvalidPointError, RangeError
from confidential_balance.utils.constants import GROUP_ORDER, POINT_SIZE

if TYPE_CHECKING:
    from confidential_balance.core.keys import KeyPair
    from confidential_balance.dlog.base import DiscreteLogSolver


@dataclass(frozen=True)
class Ciphertext:
    """Twisted ElGamal ciphertext (C, D). Serialized as C then D."""

    C: GroupElement
    D: GroupElement

    SIZE: ClassVar[int] = 2 * POINT_SIZE

    def __add__(self, other: Ciphertext) -> Ciphertext:
        if not isinstance(other, Ciphertext):
            return NotImplemented
        return Ciphertext(self.C + other.C, self.D + other.D)

    def __sub__(self, other: Ciphertext) -> Ciphertext:
        if not isinstance(other, Ciphertext):
            return NotImplemented
        return Ciphertext(self.C - other.C, self.D - other.D)

    def add_amount(self, amount: int) -> Ciphertext:
        """Shift the plaintext by +amount without re-randomizing."""
        return Ciphertext(self.C + H * amount, self.D)

    def subtract_amount(self, amount: int) -> Ciphertext:
        return Ciphertext(self.C - H * amount, self.D)

    def to_bytes(self) -> bytes:
        return self.C.to_bytes() + self.D.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> Ciphertext:
        if len(data) != cls.SIZE:
            raise InvalidPointError(f"Ciphertext must be exactly {cls.SIZE} bytes, got {len(data)}")
        return cls(
            C=GroupElement.from_bytes(data[:POINT_SIZE]),
            D=GroupElement.from_bytes(data[POINT_SIZE:]),
        )


class TwistedElGamalCipher:
    """Encrypt, decrypt and combine twisted ElGamal ciphertexts.

    The cipher only depends on the abstract solver contract. With no
    solver given it uses the process-wide one from dlog.get_solver().
    """

    def __init__(self, solver: DiscreteLogSolver | None = None) -> None:
        if solver is not None and solver.base != H:
            raise ConfigurationError("Solver must be built over the message generator H")
        self._solver = solver

    @property
    def solver(self) -> DiscreteLogSolver:
        if self._solver is None:
            from confidential_balance.dlog import get_solver

            self._solver = get_solver()
        return self._solver

    @property
    def max_bit_width(self) -> int:
        """Plaintexts must be below 2^max_bit_width."""
        return self.solver.max_bit_width

    async def initialize(self) -> None:
        """Build the solver's tables so decrypt() can run."""
        await self.solver.initialize()

    def encrypt(
        self,
        x: int,
        public_key: GroupElement | bytes,
        randomness: int | None = None,
    ) -> Ciphertext:
        """Randomized encryption of 0 <= x < 2^max_bit_width.

        randomness, if given, must be a scalar in [1, L); callers that need
        reproducible ciphertexts (proof generation) pass it explicitly.
        """
        self._check_plaintext(x)
        pk = _as_point(public_key)
        if randomness is None:
            r = random_scalar()
        else:
            if not 0 < randomness < GROUP_ORDER:
                raise RangeError("randomness must be a scalar in [1, L)")
            r = randomness
        return Ciphertext(C=H * x + pk * r, D=G * r)

    def encrypt_with_no_randomness(self, x: int) -> Ciphertext:
        """Publicly known encryption (x * H, identity), decryptable by any key."""
        self._check_plaintext(x)
        return Ciphertext(C=H * x, D=GroupElement.identity())

    def decrypt(self, ciphertext: Ciphertext, key_pair: KeyPair) -> int:
        """Recover x from C - sk * D = x * H.

        Raises:
            NotInitializedError: the solver's tables are not built yet.
            DiscreteLogNotFoundError: wrong key or x outside every table.
        """
        message_point = ciphertext.C - ciphertext.D * key_pair.private_key
        return self.solver.solve(message_point)

    @staticmethod
    def add(c1: Ciphertext, c2: Ciphertext) -> Ciphertext:
        return c1 + c2

    @staticmethod
    def subtract(c1: Ciphertext, c2: Ciphertext) -> Ciphertext:
        return c1 - c2

    def _check_plaintext(self, x: int) -> None:
        if isinstance(x, bool) or not isinstance(x, int):
            raise TypeError(f"Plaintext must be an int, got {type(x).__name__}")
        limit = 1 << self.max_bit_width
        if x < 0 or x >= limit:
            raise RangeError(f"Plaintext must be in [0, 2^{self.max_bit_width}), got {x}")


def _as_point(value: GroupElement | bytes) -> GroupElement:
    if isinstance(value, GroupElement):
        return value
    return GroupElement.from_bytes(value)
