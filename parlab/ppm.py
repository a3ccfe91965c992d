"""Writing iteration-count images as binary PPM files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

import numpy as np


def _map_array(data, max_iterations: int) -> np.ndarray:
    counts = np.asarray(data, dtype=np.float32)
    clamped = np.minimum(np.float32(max_iterations), counts)
    with np.errstate(invalid="ignore"):
        mapped = np.power(clamped / np.float32(256.0), np.float32(0.5))
    scaled = np.nan_to_num(np.float32(255.0) * mapped, nan=0.0)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def map_iterations(count: int, max_iterations: int) -> int:
    """Map an iteration count to an 8-bit brightness value."""
    return int(_map_array([count], max_iterations)[0])


def encode_ppm_image(data: Sequence[int], width: int, height: int, max_iterations: int) -> bytes:
    """Return a grey-scale binary PPM image of the iteration counts."""
    counts = np.asarray(data).ravel()
    pixels = width * height
    if counts.size < pixels:
        raise ValueError(f"expected {pixels} values, got {counts.size}")
    header = f"P6\n{width} {height}\n255\n".encode("ascii")
    levels = _map_array(counts[:pixels], max_iterations)
    return header + np.repeat(levels, 3).tobytes()


def write_ppm_image(
    data: Sequence[int],
    width: int,
    height: int,
    filename: str | os.PathLike,
    max_iterations: int,
) -> None:
    """Write the iteration counts to a PPM file and report it."""
    Path(filename).write_bytes(encode_ppm_image(data, width, height, max_iterations))
    print(f"Wrote image file {os.fspath(filename)}")