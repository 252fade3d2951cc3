"""Three-valued bit-vector domain.

Usage::

    from tvlai.domain import BitVector, ops

    x = BitVector.parse("1010_1010")
    y = BitVector.unknown(8)
    str(ops.bit_and(x, y))      # '?0?0?0?0'
"""

from __future__ import annotations

from . import _ops as ops
from ._bitvector import BitVector, BitVectorError, SizeMismatchError
from ._ops import (
    add,
    bit_and,
    bit_not,
    bit_or,
    bit_xor,
    carry,
    equals,
    multiply,
    negate,
    not_equals,
    shift_left,
    shift_right,
    shift_right_arithmetic,
    sign_extend,
    signed_borrow,
    signed_carry,
    signed_less,
    signed_less_equal,
    subtract,
    unsigned_less,
    unsigned_less_equal,
    zero_extend,
)
from ._trit import AND_TABLE, NOT_TABLE, OR_TABLE, XOR_TABLE, Trit, join_trit, lift

__all__ = [
    "AND_TABLE",
    "NOT_TABLE",
    "OR_TABLE",
    "XOR_TABLE",
    "BitVector",
    "BitVectorError",
    "SizeMismatchError",
    "Trit",
    "add",
    "bit_and",
    "bit_not",
    "bit_or",
    "bit_xor",
    "carry",
    "equals",
    "join_trit",
    "lift",
    "multiply",
    "negate",
    "not_equals",
    "ops",
    "shift_left",
    "shift_right",
    "shift_right_arithmetic",
    "sign_extend",
    "signed_borrow",
    "signed_carry",
    "signed_less",
    "signed_less_equal",
    "subtract",
    "unsigned_less",
    "unsigned_less_equal",
    "zero_extend",
]
