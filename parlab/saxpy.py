"""The saxpy kernel, result = scale * x + y, with a bandwidth benchmark."""

from __future__ import annotations

import getopt
import math
import re
import sys

import numpy as np

from parlab import timer

DEFAULT_SIZE = 20 * 1000 * 1000
SCALE = 2.0
PROG = "saxpy"

_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def saxpy_serial(scale: float, x, y) -> np.ndarray:
    """Return scale * x + y element-wise in single precision."""
    xs = np.asarray(x, dtype=np.float32)
    ys = np.asarray(y, dtype=np.float32)
    if xs.shape != ys.shape:
        raise ValueError(f"x and y differ in shape: {xs.shape} vs {ys.shape}")
    return (np.float32(scale) * xs + ys).astype(np.float32)


def to_bandwidth(num_bytes: int, seconds: float) -> float:
    """Return the transfer rate in GiB per second."""
    if seconds <= 0:
        return math.inf
    return float(num_bytes) / (1024.0 * 1024.0 * 1024.0) / seconds


def to_gflops(ops: int, seconds: float) -> float:
    """Return the operation rate in billions per second."""
    if seconds <= 0:
        return math.inf
    return float(ops) / 1e9 / seconds


def verify_result(result, gold) -> list[int]:
    """Print and return the indices where result differs from gold."""
    actual = np.asarray(result, dtype=np.float32)
    expected = np.asarray(gold, dtype=np.float32)
    bad = np.flatnonzero(actual != expected)
    for index in bad:
        print(f"Error: [{index}] Got {float(actual[index]):f} expected {float(expected[index]):f}")
    return bad.tolist()


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    n = DEFAULT_SIZE
    try:
        opts, _ = getopt.gnu_getopt(args, "n:?", ["size=", "help"])
    except getopt.GetoptError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1
    for opt, value in opts:
        if opt in ("-n", "--size"):
            n = _atoi(value)
            if n <= 0:
                print(f"Error: size must be positive, got {n}", file=sys.stderr)
                return 1
        else:
            print(f"Usage: {PROG} [-n N]")
            return 1

    total_bytes = 4 * n * 4
    total_flops = 2 * n
    array_x = np.arange(n, dtype=np.float32)
    array_y = np.arange(n, dtype=np.float32)

    min_serial = 1e30
    for _ in range(3):
        start = timer.current_seconds()
        saxpy_serial(SCALE, array_x, array_y)
        min_serial = min(min_serial, timer.current_seconds() - start)

    print(
        f"[saxpy serial]:\t\t[{min_serial * 1000:.3f}] ms\t"
        f"[{to_bandwidth(total_bytes, min_serial):.3f}] GB/s\t"
        f"[{to_gflops(total_flops, min_serial):.3f}] GFLOPS"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())