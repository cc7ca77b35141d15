"""Main entry point: python -m confidential_balance"""

from __future__ import annotations

import argparse
import logging
import sys
import time

import numpy as np

from confidential_balance import __version__
from confidential_balance.core.chunks import ChunkDecomposer, recompose
from confidential_balance.core.elgamal import TwistedElGamalCipher
from confidential_balance.core.keys import KeyPair
from confidential_balance.dlog import available_solvers, create_solver
from confidential_balance.errors import ConfidentialBalanceError, ConfigurationError
from confidential_balance.utils.constants import (
    BITS_PER_CHUNK,
    RADIX_DECOMP_BITS,
    V_MAX_BITS,
)
from confidential_balance.utils.types import ChunkParams


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="confidential-balance",
        description="Twisted ElGamal balances: chunk decomposition and decryption benchmarks",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log table builds to stderr")

    sub = parser.add_subparsers(dest="command")

    # decompose
    dec = sub.add_parser("decompose", help="Split a value into locally maximal chunks")
    dec.add_argument("value", type=int, help="Non-negative integer below 2^v-max-bits")
    dec.add_argument("--v-max-bits", type=int, default=V_MAX_BITS)
    dec.add_argument("--radix-bits", type=int, default=RADIX_DECOMP_BITS)
    dec.add_argument("--chunk-bits", type=int, default=BITS_PER_CHUNK)

    # recompose
    rec = sub.add_parser("recompose", help="Sum chunks back into a value")
    rec.add_argument("chunks", type=int, nargs="+", help="Chunks, least significant first")
    rec.add_argument("--radix-bits", type=int, default=RADIX_DECOMP_BITS)

    # bench
    bench = sub.add_parser("bench", help="Time encrypt/decrypt round trips")
    bench.add_argument("--solver", choices=available_solvers(), default=None,
                       help="Discrete-log engine (default: $CONFIDENTIAL_BALANCE_SOLVER or bsgs)")
    bench.add_argument("--bits", type=int, default=16, help="Table width and value range")
    bench.add_argument("--iterations", type=int, default=20, help="Round trips to time")
    bench.add_argument("--seed", type=int, default=None, help="Seed for the random values")

    return parser


def run_decompose(args: argparse.Namespace) -> None:
    params = ChunkParams(args.v_max_bits, args.radix_bits, args.chunk_bits)
    decomposer = ChunkDecomposer(params)
    chunks = decomposer.decompose(args.value)
    print(" ".join(str(w) for w in chunks))


def run_recompose(args: argparse.Namespace) -> None:
    if args.radix_bits <= 0:
        raise ConfigurationError("radix_decomp_bits must be > 0")
    print(recompose(args.chunks, args.radix_bits))


def run_bench(args: argparse.Namespace) -> None:
    """Build a table, then time encrypt and decrypt on random values."""
    solver = create_solver(args.solver, bit_widths=[args.bits])
    print(f"Solver: {solver.algorithm_name} | Bits: {args.bits} | Iterations: {args.iterations}")

    start = time.perf_counter()
    solver.initialize_sync()
    build_ms = (time.perf_counter() - start) * 1000.0

    cipher = TwistedElGamalCipher(solver)
    key = KeyPair.generate()
    rng = np.random.default_rng(args.seed)
    values = [int(v) for v in rng.integers(0, 1 << args.bits, size=args.iterations)]

    enc_ms = np.empty(len(values))
    dec_ms = np.empty(len(values))
    for i, x in enumerate(values):
        t0 = time.perf_counter()
        ct = cipher.encrypt(x, key.public_key)
        t1 = time.perf_counter()
        recovered = cipher.decrypt(ct, key)
        t2 = time.perf_counter()
        if recovered != x:
            raise ConfidentialBalanceError(f"round trip mismatch: {x} -> {recovered}")
        enc_ms[i] = (t1 - t0) * 1000.0
        dec_ms[i] = (t2 - t1) * 1000.0

    print()
    print("=" * 50)
    print(" RESULTS")
    print("=" * 50)
    print(f"  Table build:   {build_ms:.2f} ms")
    if len(values):
        print(f"  Encrypt avg:   {enc_ms.mean():.3f} ms (min {enc_ms.min():.3f}, max {enc_ms.max():.3f})")
        print(f"  Decrypt avg:   {dec_ms.mean():.3f} ms (min {dec_ms.min():.3f}, max {dec_ms.max():.3f})")
    print("=" * 50)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "decompose":
            run_decompose(args)
        elif args.command == "recompose":
            run_recompose(args)
        elif args.command == "bench":
            run_bench(args)
        else:
            parser.print_help()
    except ConfidentialBalanceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
