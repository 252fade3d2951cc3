"""Fixed-width vectors of three-valued bits.

A ``BitVector`` packs its trits into two bit planes held in Python ints:

- ``may0`` has bit *i* set when bit *i* may be 0,
- ``may1`` has bit *i* set when bit *i* may be 1.

Together the planes give each position the 2-bit encoding of ``Trit``.
Logical operations work on whole planes at once; positional algorithms
(the adder, comparisons) read individual trits.  Instances are immutable.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ._trit import Trit


class BitVectorError(ValueError):
    """Contract violation on a bit-vector operation."""


class SizeMismatchError(BitVectorError):
    """Binary operation applied to vectors of different widths."""


def width_mask(width: int) -> int:
    return (1 << width) - 1


def check_sizes(op: str, lhs: BitVector, rhs: BitVector) -> None:
    if lhs.width != rhs.width:
        raise SizeMismatchError(f"{op}: sizes {lhs.width}/{rhs.width}")


class BitVector:
    """An immutable vector of ``Trit`` values, index 0 least significant."""

    __slots__ = ("_width", "_may0", "_may1")

    def __init__(self, width: int, may0: int, may1: int) -> None:
        if width < 0:
            raise BitVectorError(f"Negative width: {width}")
        full = width_mask(width)
        if may0 & ~full or may1 & ~full:
            raise BitVectorError(f"Plane bits outside width {width}")
        if (may0 | may1) != full:
            raise BitVectorError("Bit-vector contains an empty (bottom) trit")
        self._width = width
        self._may0 = may0
        self._may1 = may1

    # -----------------------------------------------------------------------
    # Constructors
    # -----------------------------------------------------------------------

    @classmethod
    def unknown(cls, width: int) -> BitVector:
        full = width_mask(width)
        return cls(width, full, full)

    @classmethod
    def from_int(cls, width: int, value: int) -> BitVector:
        """Fully known vector holding *value* truncated to *width* bits."""
        full = width_mask(width)
        ones = value & full
        return cls(width, full ^ ones, ones)

    @classmethod
    def filled(cls, width: int, trit: Trit) -> BitVector:
        full = width_mask(width)
        return cls(
            width,
            full if trit & Trit.ZERO else 0,
            full if trit & Trit.ONE else 0,
        )

    @classmethod
    def from_trits(cls, trits: Iterable[Trit]) -> BitVector:
        """Build from trits given least significant first."""
        may0 = may1 = 0
        width = 0
        for i, trit in enumerate(trits):
            trit = Trit(trit)
            if trit & Trit.ZERO:
                may0 |= 1 << i
            if trit & Trit.ONE:
                may1 |= 1 << i
            width = i + 1
        return cls(width, may0, may1)

    @classmethod
    def parse(cls, text: str) -> BitVector:
        """Parse the ``0``/``1``/``?`` rendering, most significant first.

        Underscores and spaces are ignored so long vectors can be grouped.
        """
        chars = [c for c in text if c not in "_ "]
        return cls.from_trits(Trit.from_char(c) for c in reversed(chars))

    @classmethod
    def boolean(cls, trit: Trit, width: int = 8) -> BitVector:
        """A boolean result: *trit* in bit 0, zero above."""
        if width < 1:
            raise BitVectorError("Boolean result needs at least one bit")
        return cls.from_int(width, 0).with_trit(0, trit)

    @classmethod
    def concat(cls, parts: Iterable[BitVector]) -> BitVector:
        """Concatenate *parts*, the first part becoming the low bits."""
        may0 = may1 = 0
        width = 0
        for part in parts:
            may0 |= part._may0 << width
            may1 |= part._may1 << width
            width += part._width
        return cls(width, may0, may1)

    # -----------------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def may0(self) -> int:
        return self._may0

    @property
    def may1(self) -> int:
        return self._may1

    @property
    def known_mask(self) -> int:
        """Positions whose value is definitely 0 or definitely 1."""
        return self._may0 ^ self._may1

    @property
    def sign(self) -> Trit:
        if self._width == 0:
            raise BitVectorError("Empty bit-vector has no sign bit")
        return self[self._width - 1]

    @property
    def is_concrete(self) -> bool:
        return self.known_mask == width_mask(self._width)

    @property
    def unknown_count(self) -> int:
        return bin(self._may0 & self._may1).count("1")

    def __len__(self) -> int:
        return self._width

    def __getitem__(self, index: int) -> Trit:
        if index < 0:
            index += self._width
        if not 0 <= index < self._width:
            raise IndexError(f"Bit index {index} out of range for width {self._width}")
        return Trit(((self._may0 >> index) & 1) | (((self._may1 >> index) & 1) << 1))

    def __iter__(self) -> Iterator[Trit]:
        for i in range(self._width):
            yield self[i]

    def trits(self) -> tuple[Trit, ...]:
        return tuple(self)

    def to_int(self) -> int | None:
        """The concrete value, or None if any bit is unknown or width > 64."""
        if self._width > 64 or not self.is_concrete:
            return None
        return self._may1

    def contains(self, value: int) -> bool:
        """True if the concrete *value* is one of the values this vector allows."""
        full = width_mask(self._width)
        value &= full
        return not (value & ~self._may1) and not (~value & full & ~self._may0)

    # -----------------------------------------------------------------------
    # Derived vectors
    # -----------------------------------------------------------------------

    def with_trit(self, index: int, trit: Trit) -> BitVector:
        if not 0 <= index < self._width:
            raise IndexError(f"Bit index {index} out of range for width {self._width}")
        bit = 1 << index
        may0 = self._may0 & ~bit
        may1 = self._may1 & ~bit
        if trit & Trit.ZERO:
            may0 |= bit
        if trit & Trit.ONE:
            may1 |= bit
        return BitVector(self._width, may0, may1)

    def slice(self, low: int, high: int) -> BitVector:
        """Bits ``[low, high)`` as a new vector."""
        if not 0 <= low <= high <= self._width:
            raise BitVectorError(f"Slice [{low}, {high}) out of range for width {self._width}")
        mask = width_mask(high - low)
        return BitVector(high - low, (self._may0 >> low) & mask, (self._may1 >> low) & mask)

    def join(self, other: BitVector) -> BitVector:
        """Keep bits on which both agree; make the rest unknown."""
        check_sizes("join", self, other)
        return BitVector(self._width, self._may0 | other._may0, self._may1 | other._may1)

    # -----------------------------------------------------------------------
    # Dunder
    # -----------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitVector):
            return NotImplemented
        return (
            self._width == other._width
            and self._may0 == other._may0
            and self._may1 == other._may1
        )

    def __hash__(self) -> int:
        return hash((self._width, self._may0, self._may1))

    def __str__(self) -> str:
        return "".join(str(self[i]) for i in range(self._width - 1, -1, -1))

    def __repr__(self) -> str:
        return f"BitVector({str(self)!r})"
