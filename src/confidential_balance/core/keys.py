"""Twisted ElGamal key pairs."""

from __future__ import annotations

from dataclasses import dataclass

from confidential_balance.core.group import G, GroupElement, random_scalar, scalar_from_bytes
from confidential_balance.errors import RangeError
from confidential_balance.utils.constants import GROUP_ORDER, SCALAR_SIZE


@dataclass(frozen=True)
class KeyPair:
    """(private_key, public_key = private_key * G)."""

    private_key: int
    public_key: GroupElement

    @classmethod
    def generate(cls) -> KeyPair:
        return cls.from_private_key(random_scalar())

    @classmethod
    def from_private_key(cls, private_key: int | bytes) -> KeyPair:
        """Accept a scalar or its 32-byte little-endian encoding."""
        if isinstance(private_key, bytes):
            if len(private_key) != SCALAR_SIZE:
                raise RangeError(
                    f"Private key must be exactly {SCALAR_SIZE} bytes, got {len(private_key)}"
                )
            private_key = scalar_from_bytes(private_key)
        sk = private_key % GROUP_ORDER
        if sk == 0:
            raise RangeError("Private key must be a non-zero scalar")
        return cls(private_key=sk, public_key=G * sk)

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key!r})"
