"""Chunked encrypted balances."""

from __future__ import annotations

from collections.abc import Sequence

from confidential_balance.core.chunks import ChunkDecomposer
from confidential_balance.core.elgamal import Ciphertext, TwistedElGamalCipher
from confidential_balance.core.group import GroupElement
from confidential_balance.core.keys import KeyPair
from confidential_balance.errors import ConfigurationError, InvalidPointError
from confidential_balance.utils.types import ChunkParams


class EncryptedBalance:
    """A balance split into chunks, each encrypted under the same public key.

    chunks is only known to whoever encrypted or decrypted the balance;
    balances derived homomorphically carry chunks=None.
    """

    def __init__(
        self,
        ciphertexts: Sequence[Ciphertext],
        public_key: GroupElement | None = None,
        chunks: Sequence[int] | None = None,
        params: ChunkParams | None = None,
    ) -> None:
        self.params = params or ChunkParams()
        if len(ciphertexts) != self.params.num_chunks:
            raise ConfigurationError(
                f"Expected {self.params.num_chunks} ciphertexts, got {len(ciphertexts)}"
            )
        self.ciphertexts = tuple(ciphertexts)
        self.public_key = public_key
        self.chunks = tuple(chunks) if chunks is not None else None

    @classmethod
    def encrypt(
        cls,
        amount: int,
        public_key: GroupElement,
        cipher: TwistedElGamalCipher | None = None,
        params: ChunkParams | None = None,
    ) -> EncryptedBalance:
        params = params or ChunkParams()
        cipher = cipher or TwistedElGamalCipher()
        if params.bits_per_chunk > cipher.max_bit_width:
            raise ConfigurationError(
                f"bits_per_chunk={params.bits_per_chunk} exceeds the solver's "
                f"{cipher.max_bit_width}-bit range"
            )
        chunks = ChunkDecomposer(params).decompose(amount)
        ciphertexts = [cipher.encrypt(w, public_key) for w in chunks]
        return cls(ciphertexts, public_key=public_key, chunks=chunks, params=params)

    @classmethod
    def decrypt(
        cls,
        ciphertexts: Sequence[Ciphertext],
        key_pair: KeyPair,
        cipher: TwistedElGamalCipher | None = None,
        params: ChunkParams | None = None,
    ) -> EncryptedBalance:
        """Decrypt every chunk. The recovered total is the result's amount."""
        params = params or ChunkParams()
        if len(ciphertexts) != params.num_chunks:
            raise ConfigurationError(
                f"Expected {params.num_chunks} ciphertexts, got {len(ciphertexts)}"
            )
        cipher = cipher or TwistedElGamalCipher()
        chunks = [cipher.decrypt(c, key_pair) for c in ciphertexts]
        return cls(ciphertexts, public_key=key_pair.public_key, chunks=chunks, params=params)

    @classmethod
    def from_bytes(cls, data: bytes, params: ChunkParams | None = None) -> EncryptedBalance:
        params = params or ChunkParams()
        size = Ciphertext.SIZE
        if len(data) != size * params.num_chunks:
            raise InvalidPointError(
                f"Balance must be exactly {size * params.num_chunks} bytes, got {len(data)}"
            )
        ciphertexts = [
            Ciphertext.from_bytes(data[i : i + size]) for i in range(0, len(data), size)
        ]
        return cls(ciphertexts, params=params)

    @property
    def amount(self) -> int:
        if self.chunks is None:
            raise ValueError("Balance amount is unknown until it is decrypted")
        return ChunkDecomposer(self.params).recompose(self.chunks)

    def to_bytes(self) -> bytes:
        return b"".join(c.to_bytes() for c in self.ciphertexts)

    def d_points_bytes(self) -> bytes:
        return b"".join(c.D.to_bytes() for c in self.ciphertexts)

    def add(self, other: EncryptedBalance) -> EncryptedBalance:
        if len(other.ciphertexts) != len(self.ciphertexts):
            raise ConfigurationError("Cannot add balances with different chunk counts")
        return EncryptedBalance(
            [a + b for a, b in zip(self.ciphertexts, other.ciphertexts)],
            public_key=self.public_key,
            params=self.params,
        )

    def __add__(self, other: EncryptedBalance) -> EncryptedBalance:
        if not isinstance(other, EncryptedBalance):
            return NotImplemented
        return self.add(other)

    def __repr__(self) -> str:
        return f"EncryptedBalance(chunks={self.params.num_chunks})"
