"""Serial and vector-unit versions of abs, clamped exponent and array sum."""

from __future__ import annotations

import getopt
import random
import re
import sys

import numpy as np

from parlab.vecintrin import Mask, Vector, VectorUnit

EXP_MAX = 10
DEFAULT_SIZE = 16
CLAMP = np.float32(9.999999)
PROG = "vrun"

_INT = re.compile(r"\s*([+-]?\d+)")
_RED = "\033[1;31m"
_RESET = "\033[0m"


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def _usage() -> str:
    """Return the usage message for the command."""
    lines = [
        f"Usage: {PROG} [options]",
        "Program Options:",
        "  -s  --size <N>     Use workload size N (Default = 16)",
        "  -l  --log          Print vector unit execution log",
        "  -?  --help         This message",
    ]
    return "\n".join(lines)


def init_values(n: int, width: int, rng: random.Random | None = None):
    """Return (values, exponents, output, gold) arrays of n + width elements.

    Values lie in [-1, 3], exponents in [0, EXP_MAX); output and gold are zero.
    """
    rng = rng if rng is not None else random.Random()
    total = n + width
    draws = []
    exponents = []
    for _ in range(total):
        draws.append(rng.random())
        exponents.append(rng.randrange(EXP_MAX))
    values = np.float32(-1.0) + np.float32(4.0) * np.array(draws, dtype=np.float32)
    return (
        values.astype(np.float32),
        np.array(exponents, dtype=np.int32),
        np.zeros(total, dtype=np.float32),
        np.zeros(total, dtype=np.float32),
    )


def abs_serial(values, n: int) -> np.ndarray:
    """Return |values[i]| for the first n elements; the rest stay zero."""
    source = np.asarray(values, dtype=np.float32)
    output = np.zeros(source.size, dtype=np.float32)
    head = source[:n]
    output[:n] = np.where(head < 0, -head, head)
    return output


def abs_vector(unit: VectorUnit, values, n: int) -> np.ndarray:
    """Absolute value with the vector unit, one full register at a time.

    Lanes past n are processed too, so values must hold enough padding.
    """
    source = np.asarray(values, dtype=np.float32)
    output = np.zeros(source.size, dtype=np.float32)
    x = Vector.zeros(unit.width, "float")
    result = Vector.zeros(unit.width, "float")
    zero = unit.broadcast(0.0, "float")
    for i in range(0, n, unit.width):
        mask_all = unit.init_ones()
        mask_is_negative = unit.init_ones(0)
        unit.vload(x, source, i, mask_all)
        unit.vlt(mask_is_negative, x, zero, mask_all)
        unit.vsub(result, zero, x, mask_is_negative)
        mask_is_not_negative = unit.mask_not(mask_is_negative)
        unit.vload(result, source, i, mask_is_not_negative)
        unit.vstore(output, i, result, mask_all)
    return output


def clamped_exp_serial(values, exponents, n: int) -> np.ndarray:
    """Return values[i] ** exponents[i] clamped to 9.999999 for the first n elements."""
    source = np.asarray(values, dtype=np.float32)
    powers = np.asarray(exponents, dtype=np.int32)
    output = np.zeros(source.size, dtype=np.float32)
    with np.errstate(all="ignore"):
        for index, (x, y) in enumerate(zip(source[:n], powers[:n])):
            if y == 0:
                output[index] = np.float32(1.0)
                continue
            result = x
            for _ in range(int(y) - 1):
                result = result * x
            output[index] = CLAMP if result > CLAMP else result
    return output


def clamped_exp_vector(unit: VectorUnit, values, exponents, n: int) -> np.ndarray:
    """Clamped exponent with the vector unit, one full register at a time."""
    source = np.asarray(values, dtype=np.float32)
    powers = np.asarray(exponents, dtype=np.int32)
    output = np.zeros(source.size, dtype=np.float32)

    x = Vector.zeros(unit.width, "float")
    y = Vector.zeros(unit.width, "int")
    result = Vector.zeros(unit.width, "float")
    zero_i = unit.broadcast(0, "int")
    one_i = unit.broadcast(1, "int")
    max_f = unit.broadcast(float(CLAMP), "float")
    mask_is_zero = Mask.zeros(unit.width)
    mask_gt_max = Mask.zeros(unit.width)

    for i in range(0, n, unit.width):
        mask_all = unit.init_ones()
        unit.vload(x, source, i, mask_all)
        unit.vload(y, powers, i, mask_all)

        unit.veq(mask_is_zero, y, zero_i, mask_all)
        unit.vset(result, 1.0, mask_is_zero)
        mask_active = unit.mask_not(mask_is_zero)

        unit.vload(result, source, i, mask_active)
        unit.vsub(y, y, one_i, mask_active)
        unit.vgt(mask_active, y, zero_i, mask_active)

        while unit.cntbits(mask_active) > 0:
            unit.vmult(result, result, x, mask_active)
            unit.vsub(y, y, one_i, mask_active)
            unit.vgt(mask_active, y, zero_i, mask_active)

        unit.vgt(mask_gt_max, result, max_f, mask_all)
        unit.vset(result, float(CLAMP), mask_gt_max)
        unit.vstore(output, i, result, mask_all)
    return output


def array_sum_serial(values, n: int) -> float:
    """Sum the first n values left to right in single precision."""
    source = np.asarray(values, dtype=np.float32)[:n]
    if source.size == 0:
        return 0.0
    return float(np.add.accumulate(source, dtype=np.float32)[-1])


def array_sum_vector(unit: VectorUnit, values, n: int) -> float:
    """Sum the first n values with the vector unit.

    n is assumed to be a multiple of the width, and the width a power of two.
    """
    source = np.asarray(values, dtype=np.float32)
    total = unit.broadcast(0.0, "float")
    number = Vector.zeros(unit.width, "float")
    mask_all = unit.init_ones()
    for i in range(0, n, unit.width):
        unit.vload(number, source, i, mask_all)
        unit.vadd(total, total, number, mask_all)

    remaining = unit.width // 2
    while remaining:
        unit.hadd(total, total)
        unit.interleave(total, total)
        remaining //= 2

    lanes = [0.0] * unit.width
    unit.vstore(lanes, 0, total, mask_all)
    return float(lanes[0])


def verify_result(values, exponents, output, gold, n: int) -> bool:
    """Compare output with gold over every element, padding included."""
    result = np.asarray(output, dtype=np.float32)
    expected = np.asarray(gold, dtype=np.float32)
    count = min(result.size, expected.size)
    with np.errstate(invalid="ignore"):
        wrong = np.flatnonzero(np.abs(result[:count] - expected[:count]) > np.float32(0.00001))
    if wrong.size == 0:
        print("Results matched with answer!")
        return True

    incorrect = int(wrong[0])
    if incorrect >= n:
        print("You have written to out of bound value!")
    print(f"Wrong calculation at value[{incorrect}]!")
    print("value  = " + "".join(f"{float(v): f} " for v in np.asarray(values)[:n]))
    print("exp    = " + "".join(f"{int(e): 9d} " for e in np.asarray(exponents)[:n]))
    print("output = " + "".join(f"{float(v): f} " for v in result[:n]))
    print("gold   = " + "".join(f"{float(v): f} " for v in expected[:n]))
    return False


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    n = DEFAULT_SIZE
    print_log = False

    try:
        opts, _ = getopt.gnu_getopt(args, "s:l?", ["size=", "log", "help"])
    except getopt.GetoptError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        print(_usage())
        return 1

    for opt, value in opts:
        if opt in ("-s", "--size"):
            n = _atoi(value)
            if n <= 0:
                print(f"Error: Workload size is set to {n} (<0).")
                return -1
        elif opt in ("-l", "--log"):
            print_log = True
        else:
            print(_usage())
            return 1

    unit = VectorUnit()
    values, exponents, _, _ = init_values(n, unit.width, random.Random(1))

    gold = clamped_exp_serial(values, exponents, n)
    output = clamped_exp_vector(unit, values, exponents, n)

    print(f"{_RED}CLAMPED EXPONENT{_RESET} (required) ")
    clamped_correct = verify_result(values, exponents, output, gold, n)
    if print_log:
        unit.logger.print_log(unit.width)
    unit.logger.print_stats(unit.width)

    print("************************ Result Verification *************************")
    print("Passed!!!" if clamped_correct else "@@@ Failed!!!")

    print(f"\n{_RED}ARRAY SUM{_RESET} (bonus) ")
    if n % unit.width == 0:
        sum_gold = array_sum_serial(values, n)
        sum_output = array_sum_vector(unit, values, n)
        epsilon = 0.1
        if abs(sum_gold - sum_output) < epsilon * 2:
            print("Passed!!!")
        else:
            print(f"Expected {sum_gold:f}, got {sum_output:f}\n.")
            print("@@@ Failed!!!")
    else:
        print(
            f"Must have N % VECTOR_WIDTH == 0 for this problem (VECTOR_WIDTH is {unit.width})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())