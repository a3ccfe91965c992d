"""Mandelbrot rendering, a simulated vector unit, Newton square roots and SAXPY, with timing harnesses."""

__version__ = "0.1.0"