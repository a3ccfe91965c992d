# parlab

A set of small workloads for exploring parallel execution. Each one comes
with its own timing harness:

- **Mandelbrot**: renders the Mandelbrot set serially and across several
  threads. It compares the two images, reports the speedup and writes the
  images as binary PPM files.
- **Vector unit**: a simulated fixed-width vector unit with masked lanes.
  It logs every instruction and reports lane utilisation. The example
  programs built on it compute an absolute value, a clamped power and an
  array sum.
- **Square root**: Newton's iteration on `1/sqrt(x)`. It runs over the
  whole array and also in lock-step groups of lanes, and checks both
  results against `numpy.sqrt`.
- **SAXPY**: `scale * x + y`, timed and reported as bandwidth and GFLOPS.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command-line programs

### Mandelbrot

```
parlab-mandelbrot [-t N | --threads N] [-v INT | --view INT]
```

- `--threads` sets the number of threads. The default is 2 and the maximum is 32.
- `--view 2` selects a zoomed-in view. View 1, or any smaller number, keeps the full set. Any other view number is an error.

The program renders a 1600×1200 image with at most 256 iterations per
pixel. It does this five times serially and five times threaded. Rows are
handed out to the threads round-robin. It writes `mandelbrot-serial.ppm`
and `mandelbrot-thread.ppm` to the current directory. It then prints the
best time of each version and the speedup. The exit status is 1 if the two
images differ.

### Vector unit

```
parlab-vecintrin [-s N | --size N] [-l | --log]
```

This program fills `N` values from a fixed seed (default 16). It computes
the clamped power both serially and on a four-lane `VectorUnit`, and
checks that the two results agree. It then prints the vector unit
statistics. With `--log` it also prints the lane occupancy of every
instruction. When `N` is a multiple of the vector width, it also checks
the vectorised array sum. A size of zero or less is rejected.

### Square root

```
parlab-sqrt [-n N | --size N]
```

This program computes square roots of `N` random values in `[0.001, 2.999]`
(default 20,000,000) with `sqrt_serial` and `sqrt_simd`. It prints the
best time of each and the speedup of the lane version. Any result more
than `1e-4` away from `numpy.sqrt` is reported.

### SAXPY

```
parlab-saxpy [-n N | --size N]
```

This program runs `saxpy_serial` three times on `N` elements (default
20,000,000). It prints the best time together with the bandwidth in GiB/s
and the GFLOPS.

## Library use

```python
from parlab.mandelbrot import Viewport, mandel, mandelbrot_serial, mandelbrot_thread
from parlab.ppm import encode_ppm_image, write_ppm_image
from parlab.vecintrin import Mask, Vector, VectorUnit
from parlab.vector_programs import clamped_exp_serial, clamped_exp_vector
from parlab.sqrt import sqrt_serial, sqrt_simd
from parlab.saxpy import saxpy_serial
from parlab.timer import current_seconds
```

**Mandelbrot**

- `mandelbrot_serial` fills a range of rows of a row-major output array
  with escape counts computed in single precision.
- `block_rows` and `interleaved_rows` give the two ways of splitting rows
  among threads.

**Vector unit and logging**

- `VectorUnit` runs masked instructions on `Vector` registers, which hold
  `"float"` or `"int"` lanes, and on `Mask` predicates. Its instructions
  include `vload`, `vstore`, `vadd`, `vmult`, `vgt`, `hadd` and
  `interleave`.
- `VectorUnit` records each instruction in a `parlab.vlogger.Logger`.
  `format_stats` and `format_log` return that record as text.

**Timing**

- `parlab.timer` supplies a monotonic nanosecond tick counter and converts
  ticks to seconds and milliseconds.
- `parse_cpuinfo` reads a tick length out of `/proc/cpuinfo` text. The
  tick length used for timing is fixed at one nanosecond.

## What it does not do

Every variant here runs in Python on top of NumPy:

- There are no compiled SIMD kernels and no task-based multi-core
  versions of the Mandelbrot, square-root or SAXPY workloads.
- The SAXPY program times only the serial kernel.
- The square-root program times only the serial and lane versions.