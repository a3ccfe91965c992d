"""A masked fixed-width vector unit that logs every instruction it runs."""

from __future__ import annotations

from typing import Iterable, MutableSequence, Sequence

import numpy as np

from parlab.vlogger import DEFAULT_WIDTH, Logger

VECTOR_WIDTH = DEFAULT_WIDTH

_DTYPES = {"float": np.float32, "int": np.int32}


def _check_kind(kind: str) -> str:
    if kind not in _DTYPES:
        raise ValueError(f"unknown vector kind {kind!r}; expected 'float' or 'int'")
    return kind


class Mask:
    """Per-lane predicate bits."""

    __slots__ = ("lanes",)
    __hash__ = None

    def __init__(self, lanes: Iterable[bool]):
        self.lanes = np.array(list(lanes), dtype=bool)

    @classmethod
    def zeros(cls, width: int = VECTOR_WIDTH) -> "Mask":
        return cls([False] * width)

    def __len__(self) -> int:
        return self.lanes.size

    def __iter__(self):
        return (bool(lane) for lane in self.lanes)

    def __getitem__(self, index: int) -> bool:
        return bool(self.lanes[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mask):
            return NotImplemented
        return bool(np.array_equal(self.lanes, other.lanes))

    def tolist(self) -> list[bool]:
        return [bool(lane) for lane in self.lanes]

    def __repr__(self) -> str:
        return f"Mask({self.tolist()})"


class Vector:
    """A vector register of 32-bit floats or 32-bit integers."""

    __slots__ = ("lanes", "kind")
    __hash__ = None

    def __init__(self, lanes: Iterable, kind: str = "float"):
        self.kind = _check_kind(kind)
        self.lanes = np.array(list(lanes), dtype=_DTYPES[kind])

    @classmethod
    def zeros(cls, width: int = VECTOR_WIDTH, kind: str = "float") -> "Vector":
        return cls([0] * width, kind)

    def __len__(self) -> int:
        return self.lanes.size

    def __iter__(self):
        return (lane.item() for lane in self.lanes)

    def __getitem__(self, index: int):
        return self.lanes[index].item()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.kind == other.kind and bool(np.array_equal(self.lanes, other.lanes))

    def tolist(self) -> list:
        return self.lanes.tolist()

    def __repr__(self) -> str:
        return f"Vector({self.tolist()}, kind={self.kind!r})"


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class VectorUnit:
    """Executes masked vector instructions and records them in a Logger."""

    def __init__(self, width: int = VECTOR_WIDTH, logger: Logger | None = None):
        if width < 1:
            raise ValueError("vector width must be positive")
        self.width = width
        self.logger = logger if logger is not None else Logger()

    def _log(self, name: str, mask: Mask) -> None:
        self.logger.add_log(name, mask, self.width)

    def _fit(self, *registers) -> None:
        for register in registers:
            if len(register) != self.width:
                raise ValueError(
                    f"register has {len(register)} lanes, unit width is {self.width}"
                )

    @staticmethod
    def _same_kind(*vectors: Vector) -> None:
        kinds = {vector.kind for vector in vectors}
        if len(kinds) > 1:
            raise TypeError(f"mixed vector kinds: {sorted(kinds)}")

    def init_ones(self, first: int | None = None) -> Mask:
        """Return a mask with the first `first` lanes on (all lanes by default)."""
        count = self.width if first is None else first
        return Mask(lane < count for lane in range(self.width))

    def mask_not(self, mask: Mask) -> Mask:
        self._fit(mask)
        result = Mask(~mask.lanes)
        self._log("masknot", self.init_ones())
        return result

    def mask_or(self, mask_a: Mask, mask_b: Mask) -> Mask:
        self._fit(mask_a, mask_b)
        result = Mask(mask_a.lanes | mask_b.lanes)
        self._log("maskor", self.init_ones())
        return result

    def mask_and(self, mask_a: Mask, mask_b: Mask) -> Mask:
        self._fit(mask_a, mask_b)
        result = Mask(mask_a.lanes & mask_b.lanes)
        self._log("maskand", self.init_ones())
        return result

    def cntbits(self, mask: Mask) -> int:
        self._fit(mask)
        count = int(np.count_nonzero(mask.lanes))
        self._log("cntbits", self.init_ones())
        return count

    def vset(self, result: Vector, value, mask: Mask) -> None:
        """Set the active lanes of result to value."""
        self._fit(result, mask)
        result.lanes[mask.lanes] = value
        self._log("vset", mask)

    def broadcast(self, value, kind: str = "float") -> Vector:
        """Return a new register with every lane set to value."""
        result = Vector.zeros(self.width, kind)
        self.vset(result, value, self.init_ones())
        return result

    def vmove(self, dest: Vector, src: Vector, mask: Mask) -> None:
        self._fit(dest, src, mask)
        self._same_kind(dest, src)
        dest.lanes[mask.lanes] = src.lanes[mask.lanes]
        self._log("vmove", mask)

    def vload(self, dest: Vector, src: Sequence, offset: int, mask: Mask) -> None:
        """Load src[offset + lane] into each active lane of dest."""
        self._fit(dest, mask)
        active = np.flatnonzero(mask.lanes)
        positions = offset + active
        if positions.size and (positions.min() < 0 or positions.max() >= len(src)):
            raise IndexError("vector load reads outside the source array")
        dest.lanes[active] = [src[int(position)] for position in positions]
        self._log("vload", mask)

    def vstore(self, dest: MutableSequence, offset: int, src: Vector, mask: Mask) -> None:
        """Store each active lane of src into dest[offset + lane]."""
        self._fit(src, mask)
        active = np.flatnonzero(mask.lanes)
        positions = offset + active
        if positions.size and (positions.min() < 0 or positions.max() >= len(dest)):
            raise IndexError("vector store writes outside the destination array")
        for lane, position in zip(active, positions):
            dest[int(position)] = src.lanes[lane].item()
        self._log("vstore", mask)

    def _binary(self, name, result, vec_a, vec_b, mask, operation) -> None:
        self._fit(result, vec_a, vec_b, mask)
        self._same_kind(result, vec_a, vec_b)
        with np.errstate(all="ignore"):
            values = operation(vec_a.lanes, vec_b.lanes)
        result.lanes[mask.lanes] = values[mask.lanes]
        self._log(name, mask)

    def vadd(self, result: Vector, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._binary("vadd", result, vec_a, vec_b, mask, np.add)

    def vsub(self, result: Vector, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._binary("vsub", result, vec_a, vec_b, mask, np.subtract)

    def vmult(self, result: Vector, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._binary("vmult", result, vec_a, vec_b, mask, np.multiply)

    def vdiv(self, result: Vector, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        """Divide lane-wise; integer lanes truncate toward zero."""
        if vec_a.kind == "int" and vec_b.kind == "int":
            self._fit(result, vec_a, vec_b, mask)
            self._same_kind(result, vec_a, vec_b)
            for lane in np.flatnonzero(mask.lanes):
                divisor = int(vec_b.lanes[lane])
                if divisor == 0:
                    raise ZeroDivisionError(f"integer division by zero in lane {lane}")
                quotient = _trunc_div(int(vec_a.lanes[lane]), divisor)
                result.lanes[lane] = np.array(quotient).astype(np.int32)
            self._log("vdiv", mask)
            return
        self._binary("vdiv", result, vec_a, vec_b, mask, np.divide)

    def vabs(self, result: Vector, vec_a: Vector, mask: Mask) -> None:
        self._fit(result, vec_a, mask)
        self._same_kind(result, vec_a)
        with np.errstate(all="ignore"):
            values = np.abs(vec_a.lanes)
        result.lanes[mask.lanes] = values[mask.lanes]
        self._log("vabs", mask)

    def _compare(self, name, result: Mask, vec_a, vec_b, mask, operation) -> None:
        self._fit(result, vec_a, vec_b, mask)
        self._same_kind(vec_a, vec_b)
        values = operation(vec_a.lanes, vec_b.lanes)
        result.lanes[mask.lanes] = values[mask.lanes]
        self._log(name, mask)

    def vgt(self, result: Mask, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._compare("vgt", result, vec_a, vec_b, mask, np.greater)

    def vlt(self, result: Mask, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._compare("vlt", result, vec_a, vec_b, mask, np.less)

    def veq(self, result: Mask, vec_a: Vector, vec_b: Vector, mask: Mask) -> None:
        self._compare("veq", result, vec_a, vec_b, mask, np.equal)

    def hadd(self, result: Vector, vec: Vector) -> None:
        """Add adjacent lane pairs: [a b c d] -> [a+b a+b c+d c+d]."""
        self._fit(result, vec)
        self._same_kind(result, vec)
        pairs = self.width // 2 * 2
        with np.errstate(all="ignore"):
            sums = vec.lanes[0:pairs:2] + vec.lanes[1:pairs:2]
        result.lanes[:pairs] = np.repeat(sums, 2)

    def interleave(self, result: Vector, vec: Vector) -> None:
        """Move even lanes to the front half and odd lanes to the back half."""
        self._fit(result, vec)
        self._same_kind(result, vec)
        half = self.width // 2
        source = vec.lanes.copy()
        order = [2 * lane if lane < half else 2 * (lane - half) + 1 for lane in range(self.width)]
        result.lanes[:] = source[order]

    def add_user_log(self, text: str) -> None:
        """Add a marker entry to the execution log."""
        self.logger.add_log(text, self.init_ones(), 0)