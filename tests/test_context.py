"""Tests for AnalysisContext and the analyze() entry point."""

import logging

import pytest

from conftest import block, const, ins, make_x86, reg, tmp

from tvlai.analyze import (
    AnalysisConfig,
    AnalysisContext,
    StraightLineInterpreter,
    UnimplementedPolicy,
    analyze,
)
from tvlai.domain import BitVector, SizeMismatchError
from tvlai.model import AddressOperand, Architecture, Opcode


def _ctx(**config):
    return AnalysisContext(config=AnalysisConfig(**config), architecture=make_x86())


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

class TestValues:
    def test_unseeded_register_is_unknown(self):
        assert str(_ctx()["AL"]) == "????????"

    def test_set_by_name(self):
        ctx = _ctx()
        ctx["EAX"] = 0x11223344
        assert ctx["AL"].to_int() == 0x44
        assert ctx.value_of("EAX").to_int() == 0x11223344

    def test_set_bitvector(self):
        ctx = _ctx()
        ctx.set_value("TF", BitVector.parse("0000000?"))
        assert str(ctx["TF"]) == "0000000?"

    def test_set_by_operand(self):
        ctx = AnalysisContext()
        ctx.set_value(reg(0x40, 2), 0xBEEF)
        assert ctx.value_of(reg(0x40, 2)).to_int() == 0xBEEF

    def test_wrong_width(self):
        with pytest.raises(SizeMismatchError):
            _ctx().set_value("AL", BitVector.from_int(16, 0))

    def test_constant_target_rejected(self):
        with pytest.raises(ValueError, match="Constants"):
            _ctx().set_value(const(1), 2)

    def test_name_without_architecture(self):
        with pytest.raises(KeyError, match="without an architecture"):
            AnalysisContext()["EAX"]

    def test_byte_order_from_architecture(self):
        arch = Architecture(name="be", big_endian=True)
        assert AnalysisContext(architecture=arch).config.big_endian


# ---------------------------------------------------------------------------
# Sweeping
# ---------------------------------------------------------------------------

class TestRun:
    def test_scenario_add(self):
        ctx = _ctx()
        report = ctx.run([
            block(ins(Opcode.COPY, [const(0x12, 1)], reg(0, 1))),
            block(ins(Opcode.INT_ADD, [reg(0, 1), const(0x34, 1)], reg(0, 1))),
        ])
        assert report.completed
        assert report.blocks_run == 2
        assert report.instructions_run == 2
        assert str(ctx["AL"]) == "01000110"

    def test_scenario_invalidation(self):
        ctx = _ctx()
        ctx.run([block(
            ins(Opcode.STORE, [const(1, 8), const(0x1000, 8), const(0xAB, 1)]),
            ins(Opcode.STORE, [const(1, 8), reg(0x10, 8), const(0, 1)]),
            ins(Opcode.LOAD, [const(1, 8), const(0x1000, 8)], reg(0, 1)),
        )])
        assert str(ctx["AL"]) == "????????"

    def test_temporaries_reset_between_blocks(self):
        ctx = _ctx()
        ctx.run([
            block(ins(Opcode.COPY, [const(9)], tmp(0x100))),
            block(ins(Opcode.COPY, [tmp(0x100)], reg(0x4))),
        ])
        assert ctx["ECX"] == BitVector.unknown(32)

    def test_temporaries_kept_when_configured(self):
        ctx = _ctx(reset_temporaries=False)
        ctx.run([
            block(ins(Opcode.COPY, [const(9)], tmp(0x100))),
            block(ins(Opcode.COPY, [tmp(0x100)], reg(0x4))),
        ])
        assert ctx["ECX"].to_int() == 9

    def test_temporaries_visible_within_block(self):
        ctx = _ctx()
        ctx.run([block(
            ins(Opcode.COPY, [const(9)], tmp(0x100)),
            ins(Opcode.COPY, [tmp(0x100)], reg(0x4)),
        )])
        assert ctx["ECX"].to_int() == 9

    def test_accepts_generator(self):
        ctx = _ctx()
        blocks = (block(ins(Opcode.COPY, [const(i)], reg(0))) for i in range(3))
        assert ctx.run(blocks).blocks_run == 3
        assert ctx["EAX"].to_int() == 2

    def test_size_mismatch_propagates(self):
        with pytest.raises(SizeMismatchError):
            _ctx().run([block(ins(Opcode.INT_ADD, [const(1, 1), const(1, 2)], reg(0, 1)))])


class TestPolicies:
    def _blocks(self):
        return [
            block(ins(Opcode.COPY, [const(1)], reg(0)), address=0x10),
            block(
                ins(Opcode.CALLOTHER, [const(7)], reg(0x4), seq=0),
                ins(Opcode.COPY, [const(2)], reg(0x8), seq=1),
                address=0x20,
            ),
        ]

    def test_halt(self, caplog):
        ctx = _ctx()
        ctx["ECX"] = 5
        with caplog.at_level(logging.ERROR):
            report = ctx.run(self._blocks())
        assert not report.completed
        assert report.instructions_run == 1
        assert report.diagnostics[0].capability == "CALLOTHER"
        assert report.diagnostics[0].block_address == 0x20
        assert report.diagnostics[0].action is UnimplementedPolicy.HALT
        assert "Halting sweep at 0x20" in caplog.text
        # State at the halt point is kept.
        assert ctx["EAX"].to_int() == 1
        assert ctx["ECX"].to_int() == 5
        assert ctx["EDX"] == BitVector.unknown(32)

    def test_skip(self, caplog):
        ctx = _ctx(on_unimplemented=UnimplementedPolicy.SKIP)
        ctx["ECX"] = 5
        with caplog.at_level(logging.WARNING):
            report = ctx.run(self._blocks())
        assert report.completed
        assert report.instructions_run == 3
        assert ctx["ECX"].to_int() == 5
        assert ctx["EDX"].to_int() == 2
        assert "skipped" in caplog.text

    def test_unknown(self):
        ctx = _ctx(on_unimplemented=UnimplementedPolicy.UNKNOWN)
        ctx["ECX"] = 5
        report = ctx.run(self._blocks())
        assert report.completed
        assert ctx["ECX"] == BitVector.unknown(32)
        assert report.diagnostics[0].action is UnimplementedPolicy.UNKNOWN

    def test_unknown_keeps_boolean_shape(self):
        ctx = _ctx(on_unimplemented=UnimplementedPolicy.UNKNOWN)
        ctx["ZF"] = 1
        report = ctx.run([block(
            ins(Opcode.INT_EQUAL, [AddressOperand(offset=0x10, size=4), const(0)], reg(0x206, 1)),
        )])
        assert report.completed
        assert report.diagnostics[0].capability == "address"
        assert ctx["ZF"] == BitVector.parse("0000000?")

    def test_unknown_fills_full_width_for_values(self):
        ctx = _ctx(on_unimplemented=UnimplementedPolicy.UNKNOWN)
        ctx["EAX"] = 1
        ctx.run([block(
            ins(Opcode.INT_ADD, [AddressOperand(offset=0x10, size=4), const(0)], reg(0)),
        )])
        assert ctx["EAX"] == BitVector.unknown(32)

    def test_straight_line_needs_no_policy(self):
        ctx = AnalysisContext(architecture=make_x86(), interpreter_cls=StraightLineInterpreter)
        report = ctx.run(self._blocks())
        assert report.completed
        assert report.diagnostics == []

    def test_trace_logs_instructions(self, caplog):
        ctx = _ctx(trace=True)
        with caplog.at_level(logging.DEBUG, logger="tvlai.analyze._interpreter"):
            ctx.run([block(ins(Opcode.COPY, [const(1)], reg(0)))])
        assert "(register, 0x0, 4) = COPY (const, 0x1, 4)" in caplog.text


# ---------------------------------------------------------------------------
# Forking
# ---------------------------------------------------------------------------

class TestFork:
    def test_fork_isolation(self):
        ctx = _ctx()
        ctx.run([block(ins(Opcode.STORE, [const(1, 8), const(0x1000, 8), const(0x5A, 1)]))])
        fork = ctx.fork()
        fork.run([block(ins(Opcode.STORE, [const(1, 8), reg(0x10, 8), const(0, 1)]))])
        ctx.run([block(ins(Opcode.LOAD, [const(1, 8), const(0x1000, 8)], reg(0, 1)))])
        fork.run([block(ins(Opcode.LOAD, [const(1, 8), const(0x1000, 8)], reg(0, 1)))])
        assert ctx["AL"].to_int() == 0x5A
        assert fork["AL"] == BitVector.unknown(8)

    def test_fork_keeps_interpreter_class(self):
        ctx = AnalysisContext(interpreter_cls=StraightLineInterpreter)
        assert isinstance(ctx.fork().interpreter, StraightLineInterpreter)


class TestAnalyze:
    def test_seeds_and_sweep(self):
        ctx, report = analyze(
            [block(ins(Opcode.INT_ADD, [reg(0), const(1)], reg(0)))],
            architecture=make_x86(),
            seeds={"EAX": 41},
        )
        assert report.completed
        assert ctx["EAX"].to_int() == 42

    def test_defaults(self):
        ctx, report = analyze([])
        assert report.completed
        assert report.blocks_run == 0
        assert ctx.architecture is None
