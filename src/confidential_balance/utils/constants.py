"""Protocol constants and defaults for confidential balances."""

# -- Group --
# Order of the prime-order subgroup of edwards25519.
GROUP_ORDER: int = 2**252 + 27742317777372353535851937790883648493
POINT_SIZE: int = 32
SCALAR_SIZE: int = 32

# Domain tag hashed to the curve to obtain the secondary generator H.
H_GENERATOR_TAG: bytes = b"confidential-balance/twisted-elgamal/H/v1"

# -- Discrete log --
DEFAULT_BIT_WIDTHS: tuple[int, ...] = (16, 32)

# -- Chunking --
V_MAX_BITS: int = 128
RADIX_DECOMP_BITS: int = 16
BITS_PER_CHUNK: int = 32

# Normalized balances: every chunk is a plain 16-bit digit.
NORMALIZED_CHUNK_BITS: int = 16

# -- Kangaroo --
KANGAROO_NUM_JUMPS: int = 32
KANGAROO_MAX_ATTEMPTS: int = 64
KANGAROO_MAX_BIT_WIDTH: int = 62
KANGAROO_WALK_FACTOR: int = 8

# -- Environment --
SOLVER_ENV_VAR: str = "CONFIDENTIAL_BALANCE_SOLVER"
KANGAROO_DIR_ENV_VAR: str = "CONFIDENTIAL_BALANCE_KANGAROO_DIR"
DEFAULT_SOLVER: str = "bsgs"
