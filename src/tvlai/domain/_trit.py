"""Three-valued logic: the per-bit lattice and its operation tables.

A ``Trit`` is encoded as the set of concrete bits it may stand for, one
flag per concrete value::

    ZERO    = 0b01   may be 0
    ONE     = 0b10   may be 1
    UNKNOWN = 0b11   may be either

The empty set ``0b00`` is reserved for an uninitialized/bottom element
and is never produced.

Every table below is built by *lifting* a concrete Boolean function: the
entry for abstract arguments is the abstraction of the set of results the
function yields over all concrete instantiations of those arguments.
Lifted tables are sound and as precise as a per-bit table can be.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from enum import IntEnum


class Trit(IntEnum):
    ZERO = 0b01
    ONE = 0b10
    UNKNOWN = 0b11

    @classmethod
    def from_bool(cls, value: bool | int) -> Trit:
        return cls.ONE if value else cls.ZERO

    @classmethod
    def from_char(cls, char: str) -> Trit:
        try:
            return _FROM_CHAR[char]
        except KeyError:
            raise ValueError(f"Invalid trit character: {char!r}") from None

    @property
    def is_known(self) -> bool:
        return self is not Trit.UNKNOWN

    def concretizations(self) -> tuple[int, ...]:
        """The concrete bit values this trit stands for."""
        return tuple(bit for bit in (0, 1) if self & (1 << bit))

    def __str__(self) -> str:
        return _TO_CHAR[self]


_TO_CHAR = {Trit.ZERO: "0", Trit.ONE: "1", Trit.UNKNOWN: "?"}
_FROM_CHAR = {v: k for k, v in _TO_CHAR.items()}

TRITS = (Trit.ZERO, Trit.UNKNOWN, Trit.ONE)


def abstract_bits(values: set[int]) -> Trit:
    """Abstract a non-empty set of concrete bits."""
    if values == {0}:
        return Trit.ZERO
    if values == {1}:
        return Trit.ONE
    if values == {0, 1}:
        return Trit.UNKNOWN
    raise ValueError(f"Cannot abstract bit set {values!r}")


def lift(fn: Callable[..., int], arity: int) -> dict[tuple[Trit, ...], Trit]:
    """Build the abstract table of a concrete *arity*-ary bit function."""
    table: dict[tuple[Trit, ...], Trit] = {}
    for args in itertools.product(TRITS, repeat=arity):
        results = {
            fn(*bits) & 1
            for bits in itertools.product(*(t.concretizations() for t in args))
        }
        table[args] = abstract_bits(results)
    return table


def join_trit(x: Trit, y: Trit) -> Trit:
    """Least trit covering both *x* and *y*."""
    return Trit(x | y)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

NOT_TABLE: dict[Trit, Trit] = {
    args[0]: out for args, out in lift(lambda x: 1 - x, 1).items()
}
AND_TABLE = lift(lambda x, y: x & y, 2)
OR_TABLE = lift(lambda x, y: x | y, 2)
XOR_TABLE = lift(lambda x, y: x ^ y, 2)

# Full adder, indexed by (x, y, carry_in).
SUM_TABLE = lift(lambda x, y, c: x ^ y ^ c, 3)
CARRY_TABLE = lift(lambda x, y, c: (x & y) | (x & c) | (y & c), 3)


def trit_not(x: Trit) -> Trit:
    return NOT_TABLE[x]


def trit_and(x: Trit, y: Trit) -> Trit:
    return AND_TABLE[x, y]


def trit_or(x: Trit, y: Trit) -> Trit:
    return OR_TABLE[x, y]


def trit_xor(x: Trit, y: Trit) -> Trit:
    return XOR_TABLE[x, y]
