"""Transfer functions over three-valued bit-vectors.

Every function here is pure and sound: for any concrete operands allowed
by the abstract inputs, the concrete result is allowed by the abstract
output.  Binary operations require equal widths and raise
``SizeMismatchError`` otherwise.

Comparison and carry functions return boolean-shaped vectors (the answer
in bit 0, zero above) of *width* bits, so callers can match the declared
size of their destination.
"""

from __future__ import annotations

from collections.abc import Callable

from ._bitvector import BitVector, BitVectorError, check_sizes, width_mask
from ._trit import (
    CARRY_TABLE,
    NOT_TABLE,
    OR_TABLE,
    SUM_TABLE,
    XOR_TABLE,
    Trit,
)


# ---------------------------------------------------------------------------
# Pointwise maps
# ---------------------------------------------------------------------------

def map_trits(bv: BitVector, fn: Callable[[Trit], Trit]) -> BitVector:
    return BitVector.from_trits(fn(t) for t in bv) if bv.width else bv


def map2_trits(
    lhs: BitVector, rhs: BitVector, fn: Callable[[Trit, Trit], Trit],
) -> BitVector:
    check_sizes("map2", lhs, rhs)
    if not lhs.width:
        return lhs
    return BitVector.from_trits(fn(x, y) for x, y in zip(lhs, rhs))


# ---------------------------------------------------------------------------
# Logical
# ---------------------------------------------------------------------------
# Plane formulas are the tables of ``_trit`` applied to all positions at once.

def bit_not(bv: BitVector) -> BitVector:
    return BitVector(bv.width, bv.may1, bv.may0)


def bit_and(lhs: BitVector, rhs: BitVector) -> BitVector:
    check_sizes("and", lhs, rhs)
    return BitVector(lhs.width, lhs.may0 | rhs.may0, lhs.may1 & rhs.may1)


def bit_or(lhs: BitVector, rhs: BitVector) -> BitVector:
    check_sizes("or", lhs, rhs)
    return BitVector(lhs.width, lhs.may0 & rhs.may0, lhs.may1 | rhs.may1)


def bit_xor(lhs: BitVector, rhs: BitVector) -> BitVector:
    check_sizes("xor", lhs, rhs)
    may0 = (lhs.may0 & rhs.may0) | (lhs.may1 & rhs.may1)
    may1 = (lhs.may0 & rhs.may1) | (lhs.may1 & rhs.may0)
    return BitVector(lhs.width, may0, may1)


# ---------------------------------------------------------------------------
# Extension
# ---------------------------------------------------------------------------

def _extend(bv: BitVector, width: int, fill: Trit, op: str) -> BitVector:
    if width < bv.width:
        raise BitVectorError(f"{op}: new width {width} < {bv.width}")
    if width == bv.width:
        return bv
    return BitVector.concat([bv, BitVector.filled(width - bv.width, fill)])


def zero_extend(bv: BitVector, width: int) -> BitVector:
    return _extend(bv, width, Trit.ZERO, "zero_extend")


def sign_extend(bv: BitVector, width: int) -> BitVector:
    return _extend(bv, width, bv.sign, "sign_extend")


# ---------------------------------------------------------------------------
# Fixed-amount shifts
# ---------------------------------------------------------------------------

def shift_left_by(bv: BitVector, amount: int) -> BitVector:
    if amount < 0:
        raise BitVectorError(f"shift_left_by({bv}, {amount})")
    if amount == 0:
        return bv
    width = bv.width
    if amount >= width:
        return BitVector.from_int(width, 0)
    full = width_mask(width)
    return BitVector(
        width,
        ((bv.may0 << amount) | width_mask(amount)) & full,
        (bv.may1 << amount) & full,
    )


def shift_right_by(bv: BitVector, amount: int, fill: Trit = Trit.ZERO) -> BitVector:
    if amount < 0:
        raise BitVectorError(f"shift_right_by({bv}, {amount})")
    if amount == 0:
        return bv
    width = bv.width
    if amount >= width:
        return BitVector.filled(width, fill)
    top = width_mask(width) ^ width_mask(width - amount)
    return BitVector(
        width,
        (bv.may0 >> amount) | (top if fill & Trit.ZERO else 0),
        (bv.may1 >> amount) | (top if fill & Trit.ONE else 0),
    )


# ---------------------------------------------------------------------------
# Variable-amount shifts
# ---------------------------------------------------------------------------

def _shift_variable(
    bv: BitVector,
    amount: BitVector,
    shift_once: Callable[[BitVector, int], BitVector],
    fill: Trit,
) -> BitVector:
    width = bv.width
    if width == 0 or width & (width - 1):
        raise BitVectorError(f"Variable shift needs a power-of-two width, got {width}")
    stages = width.bit_length() - 1
    all_fill = BitVector.filled(width, fill)

    # Amount bits at or above log2(width) push the amount past the width.
    high = [amount[j] for j in range(stages, amount.width)]
    if Trit.ONE in high:
        return all_fill

    result = bv
    for i in range(min(stages, amount.width)):
        bit = amount[i]
        if bit is Trit.ZERO:
            continue
        shifted = shift_once(result, 1 << i)
        result = shifted if bit is Trit.ONE else result.join(shifted)

    if Trit.UNKNOWN in high:
        result = result.join(all_fill)
    return result


def shift_left(bv: BitVector, amount: BitVector) -> BitVector:
    return _shift_variable(bv, amount, shift_left_by, Trit.ZERO)


def shift_right(bv: BitVector, amount: BitVector) -> BitVector:
    return _shift_variable(
        bv, amount, lambda v, n: shift_right_by(v, n, Trit.ZERO), Trit.ZERO,
    )


def shift_right_arithmetic(bv: BitVector, amount: BitVector) -> BitVector:
    fill = bv.sign
    return _shift_variable(
        bv, amount, lambda v, n: shift_right_by(v, n, fill), fill,
    )


# ---------------------------------------------------------------------------
# Addition and friends
# ---------------------------------------------------------------------------

def add_with_carries(
    lhs: BitVector, rhs: BitVector, subtract: bool = False,
) -> tuple[BitVector, Trit, Trit]:
    """Ripple-carry addition over trits.

    Returns ``(sum, carry_into_msb, carry_out)``.  With *subtract* the
    right operand is complemented and the initial carry is one, so the
    sum is ``lhs - rhs``.
    """
    check_sizes("subtract" if subtract else "add", lhs, rhs)
    if subtract:
        rhs = bit_not(rhs)
    carry = Trit.ONE if subtract else Trit.ZERO
    carry_into_msb = carry
    out: list[Trit] = []
    for x, y in zip(lhs, rhs):
        carry_into_msb = carry
        out.append(SUM_TABLE[x, y, carry])
        carry = CARRY_TABLE[x, y, carry]
    return BitVector.from_trits(out) if out else lhs, carry_into_msb, carry


def add(lhs: BitVector, rhs: BitVector) -> BitVector:
    return add_with_carries(lhs, rhs)[0]


def subtract(lhs: BitVector, rhs: BitVector) -> BitVector:
    return add_with_carries(lhs, rhs, subtract=True)[0]


def negate(bv: BitVector) -> BitVector:
    return subtract(BitVector.from_int(bv.width, 0), bv)


def carry(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    """Unsigned carry out of ``lhs + rhs``."""
    _, _, out = add_with_carries(lhs, rhs)
    return BitVector.boolean(out, width)


def signed_carry(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    """Signed overflow of ``lhs + rhs``."""
    _, into_msb, out = add_with_carries(lhs, rhs)
    return BitVector.boolean(XOR_TABLE[into_msb, out], width)


def signed_borrow(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    """Signed overflow of ``lhs - rhs``."""
    _, into_msb, out = add_with_carries(lhs, rhs, subtract=True)
    return BitVector.boolean(XOR_TABLE[into_msb, out], width)


# ---------------------------------------------------------------------------
# Multiplication
# ---------------------------------------------------------------------------

def multiply(lhs: BitVector, rhs: BitVector) -> BitVector:
    """Shift-and-add multiplication, accumulated at double width.

    An unknown multiplier bit adds a partial product in which every
    one-bit of *lhs* became unknown: the term may or may not be present.
    """
    check_sizes("multiply", lhs, rhs)
    width = lhs.width
    wide = zero_extend(lhs, width * 2)
    # Setting may0 everywhere turns each known one into unknown.
    wide_maybe = zero_extend(BitVector(width, width_mask(width), lhs.may1), width * 2)
    product = BitVector.from_int(width * 2, 0)
    for i, bit in enumerate(rhs):
        if bit is Trit.ZERO:
            continue
        term = wide if bit is Trit.ONE else wide_maybe
        product = add(product, shift_left_by(term, i))
    return product.slice(0, width)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def _equality_trit(lhs: BitVector, rhs: BitVector, should_match: bool) -> Trit:
    check_sizes("equals" if should_match else "not_equals", lhs, rhs)
    both_known = lhs.known_mask & rhs.known_mask
    if both_known & (lhs.may1 ^ rhs.may1):
        # A definite mismatch settles it regardless of unknown bits elsewhere.
        return Trit.from_bool(not should_match)
    if both_known != width_mask(lhs.width):
        return Trit.UNKNOWN
    return Trit.from_bool(should_match)


def _ult_trit(lhs: BitVector, rhs: BitVector) -> Trit:
    _, _, borrow_free = add_with_carries(lhs, rhs, subtract=True)
    return NOT_TABLE[borrow_free]


def _slt_trit(lhs: BitVector, rhs: BitVector) -> Trit:
    ult = _ult_trit(lhs, rhs)
    sign_diff = XOR_TABLE[lhs.sign, rhs.sign]
    return XOR_TABLE[sign_diff, ult]


def equals(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    return BitVector.boolean(_equality_trit(lhs, rhs, True), width)


def not_equals(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    return BitVector.boolean(_equality_trit(lhs, rhs, False), width)


def unsigned_less(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    return BitVector.boolean(_ult_trit(lhs, rhs), width)


def unsigned_less_equal(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    result = OR_TABLE[_ult_trit(lhs, rhs), _equality_trit(lhs, rhs, True)]
    return BitVector.boolean(result, width)


def signed_less(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    return BitVector.boolean(_slt_trit(lhs, rhs), width)


def signed_less_equal(lhs: BitVector, rhs: BitVector, width: int = 8) -> BitVector:
    result = OR_TABLE[_slt_trit(lhs, rhs), _equality_trit(lhs, rhs, True)]
    return BitVector.boolean(result, width)
