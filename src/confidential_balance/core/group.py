"""Prime-order group adapter over libsodium's edwards25519 primitives.

Points live in the prime-order subgroup of edwards25519 and are carried
around as their canonical 32-byte encodings. All arithmetic is delegated
to libsodium through PyNaCl; this module only supplies the pieces
libsodium leaves to the caller: the identity point and the zero scalar,
both of which its scalar multiplication rejects.
"""

from __future__ import annotations

import hashlib

import nacl.bindings
import nacl.utils

from confidential_balance.errors import InvalidPointError
from confidential_balance.utils.constants import (
    GROUP_ORDER,
    H_GENERATOR_TAG,
    POINT_SIZE,
    SCALAR_SIZE,
)

IDENTITY_BYTES: bytes = b"\x01" + bytes(POINT_SIZE - 1)


def scalar_to_bytes(k: int) -> bytes:
    """Little-endian encoding of k mod L."""
    return (k % GROUP_ORDER).to_bytes(SCALAR_SIZE, byteorder="little")


def scalar_from_bytes(data: bytes) -> int:
    return int.from_bytes(data, byteorder="little") % GROUP_ORDER


def random_scalar() -> int:
    """Uniformly random non-zero scalar: 64 random bytes reduced mod L."""
    while True:
        wide = nacl.utils.random(2 * SCALAR_SIZE)
        k = scalar_from_bytes(nacl.bindings.crypto_core_ed25519_scalar_reduce(wide))
        if k != 0:
            return k


class GroupElement:
    """A point of the prime-order subgroup, stored as its encoding.

    The constructor trusts its input; use from_bytes() for anything that
    crossed a trust boundary.
    """

    __slots__ = ("_encoded",)

    def __init__(self, encoded: bytes) -> None:
        self._encoded = encoded

    @classmethod
    def from_bytes(cls, data: bytes) -> GroupElement:
        """Decode and validate a 32-byte point encoding."""
        data = bytes(data)
        if len(data) != POINT_SIZE:
            raise InvalidPointError(f"Point must be exactly {POINT_SIZE} bytes, got {len(data)}")
        if data != IDENTITY_BYTES and not nacl.bindings.crypto_core_ed25519_is_valid_point(data):
            raise InvalidPointError("Bytes do not encode a point of the prime-order subgroup")
        return cls(data)

    @classmethod
    def identity(cls) -> GroupElement:
        return cls(IDENTITY_BYTES)

    @classmethod
    def base_mul(cls, k: int) -> GroupElement:
        """k * G for the standard base point G."""
        k %= GROUP_ORDER
        if k == 0:
            return cls.identity()
        return cls(nacl.bindings.crypto_scalarmult_ed25519_base_noclamp(scalar_to_bytes(k)))

    @classmethod
    def hash_to_point(cls, tag: bytes) -> GroupElement:
        """Map a tag to a point with unknown discrete log w.r.t. G."""
        digest = hashlib.sha512(tag).digest()
        return cls(nacl.bindings.crypto_core_ed25519_from_uniform(digest[:32]))

    def to_bytes(self) -> bytes:
        return self._encoded

    @property
    def is_identity(self) -> bool:
        return self._encoded == IDENTITY_BYTES

    def __add__(self, other: GroupElement) -> GroupElement:
        if not isinstance(other, GroupElement):
            return NotImplemented
        return GroupElement(nacl.bindings.crypto_core_ed25519_add(self._encoded, other._encoded))

    def __sub__(self, other: GroupElement) -> GroupElement:
        if not isinstance(other, GroupElement):
            return NotImplemented
        return GroupElement(nacl.bindings.crypto_core_ed25519_sub(self._encoded, other._encoded))

    def __neg__(self) -> GroupElement:
        return GroupElement(nacl.bindings.crypto_core_ed25519_sub(IDENTITY_BYTES, self._encoded))

    def __mul__(self, k: int) -> GroupElement:
        if not isinstance(k, int):
            return NotImplemented
        k %= GROUP_ORDER
        if k == 0 or self.is_identity:
            return GroupElement.identity()
        return GroupElement(
            nacl.bindings.crypto_scalarmult_ed25519_noclamp(scalar_to_bytes(k), self._encoded)
        )

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupElement):
            return NotImplemented
        return self._encoded == other._encoded

    def __hash__(self) -> int:
        return hash(self._encoded)

    def __bytes__(self) -> bytes:
        return self._encoded

    def __repr__(self) -> str:
        if self.is_identity:
            return "GroupElement(identity)"
        return f"GroupElement({self._encoded.hex()[:16]}...)"


# Primary generator G and secondary generator H.
G: GroupElement = GroupElement.base_mul(1)
H: GroupElement = GroupElement.hash_to_point(H_GENERATOR_TAG)
