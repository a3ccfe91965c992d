"""Square roots by Newton iteration on the inverse square root."""

from __future__ import annotations

import getopt
import re
import sys

import numpy as np

from parlab import timer

DEFAULT_SIZE = 20 * 1000 * 1000
INITIAL_GUESS = 1.0
PROG = "sqrt"

_THRESHOLD = np.float32(0.00001)
_ONE = np.float32(1.0)
_TWO = np.float32(2.0)
_THREE = np.float32(3.0)
_HALF = np.float32(0.5)
_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def _stalled(value) -> ValueError:
    return ValueError(f"iteration stalled at a zero guess for value {float(value)}")


def sqrt_serial(values, initial_guess: float = INITIAL_GUESS) -> np.ndarray:
    """Return sqrt of each value, iterating until |g*g*x - 1| <= 1e-5."""
    x = np.asarray(values, dtype=np.float32).ravel()
    guess = np.full(x.shape, initial_guess, dtype=np.float32)
    with np.errstate(all="ignore"):
        error = np.abs(guess * guess * x - _ONE)
        active = np.flatnonzero(error > _THRESHOLD)
        while active.size:
            g = guess[active]
            xa = x[active]
            g = (_THREE * g - xa * g * g * g) * _HALF
            guess[active] = g
            stalled = np.flatnonzero(g == 0)
            if stalled.size:
                raise _stalled(xa[stalled[0]])
            error = np.abs(g * g * xa - _ONE)
            active = active[error > _THRESHOLD]
        return (x * guess).astype(np.float32)


def sqrt_simd(values, initial_guess: float = INITIAL_GUESS, lanes: int = 8) -> np.ndarray:
    """Return sqrt of each value, updating `lanes` values at a time under a mask."""
    if lanes < 1:
        raise ValueError("lane count must be positive")
    x = np.asarray(values, dtype=np.float32).ravel()
    output = np.empty(x.shape, dtype=np.float32)
    with np.errstate(all="ignore"):
        for start in range(0, x.size, lanes):
            xs = x[start:start + lanes]
            guess = np.full(xs.shape, initial_guess, dtype=np.float32)
            mask = np.abs(guess * guess * xs - _ONE) > _THRESHOLD
            while mask.any():
                left = _THREE * guess
                right = guess * guess * guess * xs
                guess = np.where(mask, (left - right) / _TWO, guess)
                stalled = np.flatnonzero(mask & (guess == 0))
                if stalled.size:
                    raise _stalled(xs[stalled[0]])
                mask &= np.abs(guess * guess * xs - _ONE) > _THRESHOLD
            output[start:start + lanes] = xs * guess
    return output


def verify_result(result, gold) -> list[int]:
    """Print and return the indices where result is more than 1e-4 from gold."""
    actual = np.asarray(result, dtype=np.float32)
    expected = np.asarray(gold, dtype=np.float32)
    with np.errstate(invalid="ignore"):
        bad = np.flatnonzero(np.abs(actual - expected) > 1e-4)
    for index in bad:
        print(f"Error: [{index}] Got {float(actual[index]):f} expected {float(expected[index]):f}")
    return bad.tolist()


def _best_time(run, repeats: int) -> float:
    best = 1e30
    for _ in range(repeats):
        start = timer.current_seconds()
        run()
        best = min(best, timer.current_seconds() - start)
    return best


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

    rng = np.random.default_rng(1)
    values = (
        np.float32(0.001) + np.float32(2.998) * rng.random(n, dtype=np.float32)
    ).astype(np.float32)
    gold = np.sqrt(values)

    results = {}

    def serial():
        results["serial"] = sqrt_serial(values, INITIAL_GUESS)

    def simd():
        results["simd"] = sqrt_simd(values, INITIAL_GUESS)

    min_serial = _best_time(serial, 3)
    print(f"[sqrt serial]:\t\t[{min_serial * 1000:.3f}] ms")
    verify_result(results["serial"], gold)

    min_simd = _best_time(simd, 1)
    print(f"[sqrt simd256]:\t\t[{min_simd * 1000:.3f}] ms")
    verify_result(results["simd"], gold)

    speedup = min_serial / min_simd if min_simd > 0 else float("inf")
    print(f"\t\t\t\t({speedup:.2f}x speedup from SIMD256)")
    return 0


if __name__ == "__main__":
    sys.exit(main())