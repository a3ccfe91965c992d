"""Execution log and lane-utilisation statistics for the emulated vector unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

DEFAULT_WIDTH = 4
MAX_INST_LEN = 32

_STATS_BANNER = "****************** Printing Vector Unit Statistics *******************"
_LOG_BANNER = "***************** Printing Vector Unit Execution Log *****************"
_LOG_HEADER = " Instruction | Vector Lane Occupancy ('*' for active, '_' for inactive)"
_LOG_RULE = "------------- --------------------------------------------------------"


@dataclass(frozen=True)
class LogEntry:
    """One executed instruction and the bit set of the lanes it used."""

    instruction: str
    mask: int


@dataclass
class Statistics:
    """Running totals over every logged instruction."""

    utilized_lane: int = 0
    total_lane: int = 0
    total_instructions: int = 0


@dataclass
class Logger:
    """Records each vector instruction and how many of its lanes were active."""

    entries: list[LogEntry] = field(default_factory=list)
    stats: Statistics = field(default_factory=Statistics)

    def add_log(self, instruction: str, mask: Iterable[bool], n: int = 0) -> None:
        """Record an instruction that ran over the first n lanes of mask."""
        if len(instruction) >= MAX_INST_LEN:
            raise ValueError(
                f"instruction name longer than {MAX_INST_LEN - 1} characters: {instruction!r}"
            )
        lanes = [bool(lane) for lane in mask][:n] if n > 0 else []
        if len(lanes) < n:
            raise ValueError(f"mask has fewer than {n} lanes")
        bits = sum(1 << lane for lane, active in enumerate(lanes) if active)
        self.stats.utilized_lane += sum(lanes)
        self.stats.total_lane += max(n, 0)
        if n > 0:
            self.stats.total_instructions += 1
        self.entries.append(LogEntry(instruction, bits))

    def format_stats(self, width: int = DEFAULT_WIDTH) -> str:
        """Return the statistics report as text."""
        stats = self.stats
        if stats.total_lane:
            utilization = stats.utilized_lane / stats.total_lane * 100
        else:
            utilization = float("nan")
        return "\n".join(
            [
                _STATS_BANNER,
                f"Vector Width:              {width}",
                f"Total Vector Instructions: {stats.total_instructions}",
                f"Vector Utilization:        {utilization:.1f}%",
                f"Utilized Vector Lanes:     {stats.utilized_lane}",
                f"Total Vector Lanes:        {stats.total_lane}",
            ]
        )

    def print_stats(self, width: int = DEFAULT_WIDTH) -> None:
        """Print the statistics report."""
        print(self.format_stats(width))

    def format_log(self, width: int = DEFAULT_WIDTH) -> str:
        """Return the per-instruction lane occupancy table as text."""
        lines = [_LOG_BANNER, _LOG_HEADER, _LOG_RULE]
        for entry in self.entries:
            occupancy = "".join(
                "*" if entry.mask >> lane & 1 else "_" for lane in range(width)
            )
            lines.append(f"{entry.instruction:>12} | {occupancy}")
        return "\n".join(lines)

    def print_log(self, width: int = DEFAULT_WIDTH) -> None:
        """Print the lane occupancy table."""
        print(self.format_log(width))