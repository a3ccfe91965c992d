"""Benchmark of the serial and threaded Mandelbrot renderers."""

from __future__ import annotations

import getopt
import re
import sys

import numpy as np

from parlab import timer
from parlab.mandelbrot import Viewport, mandelbrot_serial, mandelbrot_thread
from parlab.ppm import write_ppm_image

WIDTH = 1600
HEIGHT = 1200
MAX_ITERATIONS = 256
RUNS = 5
PROG = "mandelbrot"

_SEPARATOR = "===================================="
_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


def _usage() -> str:
    """Return the usage message for the command."""
    lines = [
        f"Usage: {PROG} [options]",
        "Program Options:",
        "  -t  --threads <N>  Use N threads",
        "  -v  --view <INT>   Use specified view settings",
        "  -?  --help         This message",
    ]
    return "\n".join(lines)


def _apply_view(viewport: Viewport, view_index: int) -> Viewport:
    if view_index == 2:
        return viewport.scale_and_shift(0.015, -0.986, 0.30)
    if view_index > 1:
        raise ValueError("Invalid view index")
    return viewport


def view_for_index(view_index: int) -> Viewport:
    """Return the viewport selected by a view number (1 or 2)."""
    return _apply_view(Viewport(), view_index)


def verify_result(gold, result, width: int, height: int) -> bool:
    """Report the first pixel where result differs from gold."""
    pixels = width * height
    expected = np.asarray(gold).ravel()[:pixels]
    actual = np.asarray(result).ravel()[:pixels]
    mismatches = np.flatnonzero(expected != actual)
    if mismatches.size:
        index = int(mismatches[0])
        row, col = divmod(index, width)
        print(
            f"Mismatch : [{row}][{col}], Expected : {int(expected[index])}, "
            f"Actual : {int(actual[index])}"
        )
        return False
    return True


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    num_threads = 2
    viewport = Viewport()

    try:
        opts, _ = getopt.gnu_getopt(args, "t:v:?", ["threads=", "view=", "help"])
    except getopt.GetoptError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        print(_usage())
        return 1

    for opt, value in opts:
        if opt in ("-t", "--threads"):
            num_threads = _atoi(value)
        elif opt in ("-v", "--view"):
            try:
                viewport = _apply_view(viewport, _atoi(value))
            except ValueError as exc:
                print(exc, file=sys.stderr)
                return 1
        else:
            print(_usage())
            return 1

    width, height, max_iterations = WIDTH, HEIGHT, MAX_ITERATIONS
    corners = (viewport.x0, viewport.y0, viewport.x1, viewport.y1)
    output_serial = np.zeros(width * height, dtype=np.int32)
    output_thread = np.zeros(width * height, dtype=np.int32)

    min_serial = 1e30
    for _ in range(RUNS):
        output_serial.fill(0)
        start = timer.current_seconds()
        mandelbrot_serial(*corners, width, height, 0, height, max_iterations, output_serial)
        min_serial = min(min_serial, timer.current_seconds() - start)

    print(f"[mandelbrot serial]:\t\t[{min_serial * 1000:.3f}] ms")
    write_ppm_image(output_serial, width, height, "mandelbrot-serial.ppm", max_iterations)

    min_thread = 1e30
    for _ in range(RUNS):
        print(_SEPARATOR)
        output_thread.fill(0)
        start = timer.current_seconds()
        try:
            mandelbrot_thread(num_threads, *corners, width, height, max_iterations, output_thread)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        min_thread = min(min_thread, timer.current_seconds() - start)

    print(_SEPARATOR)
    print(f"[mandelbrot thread]:\t\t[{min_thread * 1000:.3f}] ms")
    write_ppm_image(output_thread, width, height, "mandelbrot-thread.ppm", max_iterations)

    if not verify_result(output_serial, output_thread, width, height):
        print("Error : Output from threads does not match serial output")
        return 1

    speedup = min_serial / min_thread if min_thread > 0 else float("inf")
    print(f"\t\t\t\t({speedup:.2f}x speedup from {num_threads} threads)")
    return 0


if __name__ == "__main__":
    sys.exit(main())