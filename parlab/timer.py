"""High-resolution timing helpers used by the benchmark drivers."""

from __future__ import annotations

import math
import re
import time

_DEFAULT_SECONDS_PER_TICK = 1e-9

_FLOAT = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_LEADING_FLOAT = re.compile(r"\s*(" + _FLOAT + r")")
_CPU_MHZ_LINE = re.compile(r"cpu\s*MHz\s*:\s*(" + _FLOAT + r")")


def _leading_float(text: str) -> float | None:
    match = _LEADING_FLOAT.match(text)
    return float(match.group(1)) if match else None


def _scale(numerator: float, frequency: float) -> float:
    if frequency == 0:
        return math.inf
    return numerator / frequency


def parse_cpuinfo(text: str) -> float:
    """Return the tick duration in seconds described by /proc/cpuinfo text.

    The nominal frequency after the '@' of a "model name" line is preferred,
    otherwise a "cpu MHz" line is used.  The first usable line wins; if none
    is found one nanosecond per tick is assumed.
    """
    for line in text.splitlines():
        if "model name" in line:
            at = line.find("@")
            if at < 0:
                continue
            after_at = line[at + 1:]
            ghz_at = after_at.find("GHz")
            mhz_at = after_at.find("MHz")
            if ghz_at >= 0:
                ghz = _leading_float(after_at[:ghz_at])
                if ghz is not None:
                    return _scale(1e-9, ghz)
            elif mhz_at >= 0:
                mhz = _leading_float(after_at[:mhz_at])
                if mhz is not None:
                    return _scale(1e-6, mhz)
            continue
        match = _CPU_MHZ_LINE.match(line)
        if match:
            return _scale(1e-6, float(match.group(1)))
    return _DEFAULT_SECONDS_PER_TICK


def current_ticks() -> int:
    """Return the current value of the high-resolution clock, in ticks."""
    return time.perf_counter_ns()


def seconds_per_tick() -> float:
    """Return the duration of one tick in seconds."""
    return _DEFAULT_SECONDS_PER_TICK


def ticks_per_second() -> float:
    """Return the number of ticks in one second."""
    return 1.0 / seconds_per_tick()


def current_seconds() -> float:
    """Return the current clock value in seconds from an arbitrary origin."""
    return current_ticks() * seconds_per_tick()


def ms_per_tick() -> float:
    """Return the duration of one tick in milliseconds."""
    return seconds_per_tick() * 1000.0


def tick_units() -> str:
    """Return the name of the unit a tick is measured in."""
    return "ns"