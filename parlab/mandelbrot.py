"""Escape-time Mandelbrot images, computed serially or across threads."""

from __future__ import annotations

import threading
from dataclasses import dataclass

import numpy as np

from parlab import timer

MAX_THREADS = 32

_F = np.float32
_TWO = np.float32(2.0)
_FOUR = np.float32(4.0)


@dataclass(frozen=True)
class Viewport:
    """Complex-plane rectangle mapped onto the image."""

    x0: float = -2.0
    y0: float = -1.0
    x1: float = 1.0
    y1: float = 1.0

    def scale_and_shift(self, scale: float, shift_x: float, shift_y: float) -> "Viewport":
        """Return this viewport scaled about the origin and then shifted."""
        s, sx, sy = _F(scale), _F(shift_x), _F(shift_y)
        return Viewport(
            x0=float(_F(self.x0) * s + sx),
            y0=float(_F(self.y0) * s + sy),
            x1=float(_F(self.x1) * s + sx),
            y1=float(_F(self.y1) * s + sy),
        )


def mandel(c_re: float, c_im: float, count: int) -> int:
    """Return how many iterations ran before the point escaped, at most count."""
    c_re, c_im = _F(c_re), _F(c_im)
    z_re, z_im = c_re, c_im
    iterations = 0
    with np.errstate(over="ignore", invalid="ignore"):
        while iterations < count:
            if z_re * z_re + z_im * z_im > _FOUR:
                break
            new_re = z_re * z_re - z_im * z_im
            new_im = _TWO * z_re * z_im
            z_re = c_re + new_re
            z_im = c_im + new_im
            iterations += 1
    return iterations


def _escape_counts(c_re: np.ndarray, c_im: np.ndarray, count: int) -> np.ndarray:
    counts = np.zeros(c_re.size, dtype=np.int32)
    idx = np.arange(c_re.size)
    cr, ci = c_re, c_im
    zr, zi = c_re.copy(), c_im.copy()
    with np.errstate(over="ignore", invalid="ignore"):
        for _ in range(count):
            escaped = zr * zr + zi * zi > _FOUR
            if escaped.any():
                keep = ~escaped
                idx, cr, ci, zr, zi = idx[keep], cr[keep], ci[keep], zr[keep], zi[keep]
                if idx.size == 0:
                    break
            counts[idx] += 1
            new_re = zr * zr - zi * zi
            new_im = _TWO * zr * zi
            zr = cr + new_re
            zi = ci + new_im
    return counts


def mandelbrot_serial(x0, y0, x1, y1, width, height, start_row, total_rows, max_iterations, output):
    """Fill rows start_row .. start_row+total_rows of the row-major output."""
    if total_rows <= 0 or width <= 0:
        return output
    x0, y0, x1, y1 = _F(x0), _F(y0), _F(x1), _F(y1)
    dx = (x1 - x0) / _F(width)
    dy = (y1 - y0) / _F(height)
    end_row = start_row + total_rows

    xs = x0 + np.arange(width, dtype=np.float32) * dx
    ys = y0 + np.arange(start_row, end_row, dtype=np.float32) * dy
    c_re = np.tile(xs, total_rows)
    c_im = np.repeat(ys, width)

    counts = _escape_counts(c_re, c_im, max_iterations)
    block = counts if isinstance(output, np.ndarray) else counts.tolist()
    output[start_row * width:end_row * width] = block
    return output


def block_rows(thread_id: int, num_threads: int, height: int) -> range:
    """Rows of a contiguous split; the last thread also takes the remainder."""
    num_rows = height // num_threads
    start = thread_id * num_rows
    if thread_id == num_threads - 1:
        num_rows += height % num_threads
    return range(start, start + num_rows)


def interleaved_rows(thread_id: int, num_threads: int, height: int) -> range:
    """Rows assigned round-robin: thread_id, thread_id + num_threads, ..."""
    return range(thread_id, height, num_threads)


def _worker(thread_id, num_threads, x0, y0, x1, y1, width, height, max_iterations, output):
    start = timer.current_seconds()
    for row in interleaved_rows(thread_id, num_threads, height):
        mandelbrot_serial(x0, y0, x1, y1, width, height, row, 1, max_iterations, output)
    interval = timer.current_seconds() - start
    print(f"[thread {thread_id}]:\t\t[{interval * 1000:.3f}] ms")


def mandelbrot_thread(num_threads, x0, y0, x1, y1, width, height, max_iterations, output):
    """Compute the whole image with num_threads workers, including the caller."""
    if num_threads > MAX_THREADS:
        raise ValueError(f"Max allowed threads is {MAX_THREADS}")
    if num_threads < 1:
        raise ValueError("At least one thread is required")

    params = (num_threads, x0, y0, x1, y1, width, height, max_iterations, output)
    workers = [
        threading.Thread(target=_worker, args=(thread_id, *params))
        for thread_id in range(1, num_threads)
    ]
    for worker in workers:
        worker.start()
    _worker(0, *params)
    for worker in workers:
        worker.join()
    return output