"""Tests for the adder, multiplication and carry flags."""

import pytest

from conftest import bv, mask

from tvlai.domain import BitVector, SizeMismatchError, Trit, ops


def _n(width, value):
    return BitVector.from_int(width, value)


class TestAdd:
    def test_concrete_bytes(self):
        assert ops.add(_n(8, 0x12), _n(8, 0x34)).to_int() == 0x46

    def test_wraps(self):
        assert ops.add(_n(8, 0xFF), _n(8, 0x01)).to_int() == 0x00

    def test_unknown_low_bit(self):
        # 0b10? + 0b001: low bit unknown, carry into bit 1 unknown.
        assert str(ops.add(bv("10?"), bv("001"))) == "1??"

    def test_adding_zero_keeps_unknowns(self):
        v = bv("1?0?")
        assert ops.add(v, _n(4, 0)) == v

    def test_size_mismatch(self):
        with pytest.raises(SizeMismatchError):
            ops.add(_n(8, 1), _n(16, 1))

    def test_carries(self):
        total, into_msb, out = ops.add_with_carries(_n(4, 0b0111), _n(4, 0b0001))
        assert total.to_int() == 0b1000
        assert into_msb is Trit.ONE
        assert out is Trit.ZERO


class TestSubtract:
    def test_concrete(self):
        assert ops.subtract(_n(8, 0x46), _n(8, 0x34)).to_int() == 0x12

    def test_borrow_wraps(self):
        assert ops.subtract(_n(8, 0), _n(8, 1)).to_int() == 0xFF

    @pytest.mark.parametrize("a,b", [(0, 0), (5, 9), (200, 100), (255, 255), (17, 254)])
    def test_inverts_add(self, a, b):
        x, y = _n(8, a), _n(8, b)
        assert ops.subtract(ops.add(x, y), y) == x

    def test_subtract_self_unknown_is_not_zero_claimed(self):
        # x - x is always 0 concretely, but bitwise the analysis cannot tell.
        v = bv("000?")
        assert ops.subtract(v, v).contains(0)


class TestNegate:
    @pytest.mark.parametrize("value", [0, 1, 5, 128, 255])
    def test_concrete(self, value):
        assert ops.negate(_n(8, value)).to_int() == (-value) & mask(8)

    def test_unknown(self):
        result = ops.negate(bv("000?"))
        assert result.contains(0)
        assert result.contains(0xF)


class TestMultiply:
    @pytest.mark.parametrize("a,b", [(3, 5), (0, 77), (15, 17), (255, 255), (16, 16)])
    def test_concrete(self, a, b):
        assert ops.multiply(_n(8, a), _n(8, b)).to_int() == (a * b) & mask(8)

    def test_by_zero_is_zero(self):
        assert ops.multiply(BitVector.unknown(8), _n(8, 0)).to_int() == 0

    def test_unknown_multiplier_bit(self):
        # 3 * 0b0?1 is either 3 or 9.
        result = ops.multiply(_n(4, 3), bv("00?1"))
        assert result.contains(3)
        assert result.contains(9)

    def test_width_preserved(self):
        assert ops.multiply(bv("1?1?"), bv("?1?1")).width == 4


class TestCarryFlags:
    def test_carry(self):
        assert ops.carry(_n(8, 0xF0), _n(8, 0x20))[0] is Trit.ONE
        assert ops.carry(_n(8, 0x10), _n(8, 0x20))[0] is Trit.ZERO

    def test_carry_width(self):
        assert ops.carry(_n(8, 1), _n(8, 1), width=16).width == 16

    def test_signed_carry(self):
        assert ops.signed_carry(_n(8, 0x7F), _n(8, 0x01))[0] is Trit.ONE
        assert ops.signed_carry(_n(8, 0xFF), _n(8, 0x01))[0] is Trit.ZERO
        assert ops.signed_carry(_n(8, 0x80), _n(8, 0x80))[0] is Trit.ONE

    def test_signed_borrow(self):
        assert ops.signed_borrow(_n(8, 0x80), _n(8, 0x01))[0] is Trit.ONE
        assert ops.signed_borrow(_n(8, 0x05), _n(8, 0x03))[0] is Trit.ZERO
        assert ops.signed_borrow(_n(8, 0x7F), _n(8, 0xFF))[0] is Trit.ONE

    def test_unknown_carry(self):
        assert ops.carry(bv("1???"), bv("1000"))[0] is Trit.ONE
        assert ops.carry(bv("?000"), bv("1000"))[0] is Trit.UNKNOWN
