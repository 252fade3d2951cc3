"""Abstract interpreter: opcode handlers bound to the bit-vector library.

Each handler reads its inputs through the operand dispatch, computes an
abstract result with ``tvlai.domain`` and associates it with the output
operand.  Opcodes with no precise rule produce an all-Unknown output of
the right shape; control transfer is left to extensions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from tvlai.domain import AND_TABLE, NOT_TABLE, OR_TABLE, XOR_TABLE, BitVector, Trit, ops
from tvlai.export.listing import format_instruction
from tvlai.model.instructions import Instruction
from tvlai.model.opcodes import BOOLEAN_RESULT_OPCODES, Opcode
from tvlai.model.operands import Operand

from ._config import AnalysisConfig
from ._dispatch import OpcodeVisitor
from ._state import AbstractState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Handler factories
# ---------------------------------------------------------------------------

def _unary(fn: Callable[[BitVector], BitVector]):
    def handler(self: AbstractInterpreter, instruction: Instruction) -> None:
        self.write(instruction, fn(self.read(instruction, 0)))
    return handler


def _binary(fn: Callable[[BitVector, BitVector], BitVector]):
    def handler(self: AbstractInterpreter, instruction: Instruction) -> None:
        lhs = self.read(instruction, 0)
        rhs = self.read(instruction, 1)
        self.write(instruction, fn(lhs, rhs))
    return handler


def _predicate(fn: Callable[..., BitVector]):
    """Binary handler whose boolean result is sized to the output."""
    def handler(self: AbstractInterpreter, instruction: Instruction) -> None:
        lhs = self.read(instruction, 0)
        rhs = self.read(instruction, 1)
        self.write(instruction, fn(lhs, rhs, width=instruction.output.bits))
    return handler


def _boolean(table: dict[tuple[Trit, Trit], Trit]):
    """BOOL_AND/OR/XOR: combine bit 0 of both inputs."""
    def handler(self: AbstractInterpreter, instruction: Instruction) -> None:
        lhs = self.read(instruction, 0)
        rhs = self.read(instruction, 1)
        trit = table[lhs[0], rhs[0]]
        self.write(instruction, BitVector.boolean(trit, instruction.output.bits))
    return handler


# ---------------------------------------------------------------------------
# AbstractInterpreter
# ---------------------------------------------------------------------------

class AbstractInterpreter(OpcodeVisitor[None]):
    """Executes instructions over an ``AbstractState``.

    Parameters
    ----------
    config : AnalysisConfig, optional
        Shared analysis options.
    state : AbstractState, optional
        State to mutate.  A fresh all-Unknown state is created if omitted.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        state: AbstractState | None = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.state = state if state is not None else AbstractState(self.config)

    def clone(self) -> AbstractInterpreter:
        return type(self)(config=self.config, state=self.state.clone())

    def before(self, instruction: Instruction) -> None:
        if self.config.trace:
            logger.debug("%s", format_instruction(instruction))

    # -----------------------------------------------------------------------
    # Reading and writing
    # -----------------------------------------------------------------------

    def read(self, instruction: Instruction, index: int) -> BitVector:
        return self.visit_operand(instruction, instruction.inputs[index])

    def write(self, instruction: Instruction, value: BitVector) -> None:
        self.state.associate(instruction.output, value)

    def fill_unknown(self, instruction: Instruction) -> None:
        """Give the output, if any, an all-Unknown value of its shape."""
        output = instruction.output
        if output is None:
            return
        if instruction.opcode in BOOLEAN_RESULT_OPCODES:
            self.write(instruction, BitVector.boolean(Trit.UNKNOWN, output.bits))
        else:
            self.write(instruction, BitVector.unknown(output.bits))

    # -----------------------------------------------------------------------
    # Operands
    # -----------------------------------------------------------------------

    def _operand_storage(self, instruction: Instruction, operand: Operand) -> BitVector:
        return self.state.lookup(operand)

    _OPERAND_DISPATCH = {
        "constant": _operand_storage,
        "register": _operand_storage,
        "temporary": _operand_storage,
        "address": OpcodeVisitor.unimplemented_operand,
    }

    # -----------------------------------------------------------------------
    # Data movement
    # -----------------------------------------------------------------------

    def _copy(self, instruction: Instruction) -> None:
        self.write(instruction, self.read(instruction, 0))

    def _zext(self, instruction: Instruction) -> None:
        value = self.read(instruction, 0)
        self.write(instruction, ops.zero_extend(value, instruction.output.bits))

    def _sext(self, instruction: Instruction) -> None:
        value = self.read(instruction, 0)
        self.write(instruction, ops.sign_extend(value, instruction.output.bits))

    def _load(self, instruction: Instruction) -> None:
        space = instruction.inputs[0].identity
        address = self.read(instruction, 1).to_int()
        bits = instruction.output.bits
        if address is None:
            self.write(instruction, BitVector.unknown(bits))
            return
        self.write(instruction, self.state.load(space, address, bits))

    def _store(self, instruction: Instruction) -> None:
        space = instruction.inputs[0].identity
        address = self.read(instruction, 1).to_int()
        value = self.read(instruction, 2)
        if address is None:
            # The write may alias any byte of the space.
            self.state.invalidate_space(space)
            return
        self.state.store(space, address, value)

    # -----------------------------------------------------------------------
    # Boolean
    # -----------------------------------------------------------------------

    def _bool_negate(self, instruction: Instruction) -> None:
        trit = NOT_TABLE[self.read(instruction, 0)[0]]
        self.write(instruction, BitVector.boolean(trit, instruction.output.bits))

    # -----------------------------------------------------------------------
    # Defaults
    # -----------------------------------------------------------------------

    def _unknown(self, instruction: Instruction) -> None:
        self.fill_unknown(instruction)

    # Opcode dispatch table
    _OPCODE_DISPATCH = {
        # Data movement
        Opcode.COPY: _copy,
        Opcode.CAST: _copy,
        Opcode.LOAD: _load,
        Opcode.STORE: _store,
        Opcode.INT_ZEXT: _zext,
        Opcode.INT_SEXT: _sext,

        # Boolean
        Opcode.BOOL_NEGATE: _bool_negate,
        Opcode.BOOL_AND: _boolean(AND_TABLE),
        Opcode.BOOL_OR: _boolean(OR_TABLE),
        Opcode.BOOL_XOR: _boolean(XOR_TABLE),

        # Logical
        Opcode.INT_NEGATE: _unary(ops.bit_not),
        Opcode.INT_AND: _binary(ops.bit_and),
        Opcode.INT_OR: _binary(ops.bit_or),
        Opcode.INT_XOR: _binary(ops.bit_xor),

        # Arithmetic
        Opcode.INT_2COMP: _unary(ops.negate),
        Opcode.INT_ADD: _binary(ops.add),
        Opcode.INT_SUB: _binary(ops.subtract),
        Opcode.INT_MULT: _binary(ops.multiply),
        Opcode.INT_CARRY: _predicate(ops.carry),
        Opcode.INT_SCARRY: _predicate(ops.signed_carry),
        Opcode.INT_SBORROW: _predicate(ops.signed_borrow),

        # Shifts
        Opcode.INT_LEFT: _binary(ops.shift_left),
        Opcode.INT_RIGHT: _binary(ops.shift_right),
        Opcode.INT_SRIGHT: _binary(ops.shift_right_arithmetic),

        # Comparison
        Opcode.INT_EQUAL: _predicate(ops.equals),
        Opcode.INT_NOTEQUAL: _predicate(ops.not_equals),
        Opcode.INT_LESS: _predicate(ops.unsigned_less),
        Opcode.INT_LESSEQUAL: _predicate(ops.unsigned_less_equal),
        Opcode.INT_SLESS: _predicate(ops.signed_less),
        Opcode.INT_SLESSEQUAL: _predicate(ops.signed_less_equal),

        # No precise rule yet
        Opcode.INT_DIV: _unknown,
        Opcode.INT_REM: _unknown,
        Opcode.INT_SDIV: _unknown,
        Opcode.INT_SREM: _unknown,
        Opcode.PIECE: _unknown,
        Opcode.SUBPIECE: _unknown,
        Opcode.PTRADD: _unknown,
        Opcode.PTRSUB: _unknown,
        Opcode.MULTIEQUAL: _unknown,
        Opcode.INDIRECT: _unknown,
        Opcode.NEW: _unknown,
        Opcode.CPOOLREF: _unknown,

        # Floating point is never tracked
        Opcode.FLOAT_ABS: _unknown,
        Opcode.FLOAT_ADD: _unknown,
        Opcode.FLOAT_CEIL: _unknown,
        Opcode.FLOAT_DIV: _unknown,
        Opcode.FLOAT_EQUAL: _unknown,
        Opcode.FLOAT_FLOAT2FLOAT: _unknown,
        Opcode.FLOAT_FLOOR: _unknown,
        Opcode.FLOAT_INT2FLOAT: _unknown,
        Opcode.FLOAT_LESS: _unknown,
        Opcode.FLOAT_LESSEQUAL: _unknown,
        Opcode.FLOAT_MULT: _unknown,
        Opcode.FLOAT_NAN: _unknown,
        Opcode.FLOAT_NEG: _unknown,
        Opcode.FLOAT_NOTEQUAL: _unknown,
        Opcode.FLOAT_ROUND: _unknown,
        Opcode.FLOAT_SQRT: _unknown,
        Opcode.FLOAT_SUB: _unknown,
        Opcode.FLOAT_TRUNC: _unknown,

        # Control transfer depends on the kind of analysis
        Opcode.BRANCH: OpcodeVisitor.unimplemented,
        Opcode.CBRANCH: OpcodeVisitor.unimplemented,
        Opcode.BRANCHIND: OpcodeVisitor.unimplemented,
        Opcode.CALL: OpcodeVisitor.unimplemented,
        Opcode.CALLIND: OpcodeVisitor.unimplemented,
        Opcode.CALLOTHER: OpcodeVisitor.unimplemented,
        Opcode.RETURN: OpcodeVisitor.unimplemented,
        Opcode.SEGMENTOP: OpcodeVisitor.unimplemented,
        Opcode.UNIMPLEMENTED: OpcodeVisitor.unimplemented,
    }


# ---------------------------------------------------------------------------
# StraightLineInterpreter
# ---------------------------------------------------------------------------

class StraightLineInterpreter(AbstractInterpreter):
    """Interpreter for a linear sweep over consecutive instructions.

    Branches and returns do not change the state since the sweep simply
    falls through.  A call may do anything, so it clears the whole state.
    A user-defined operation clobbers its output and every memory space.
    """

    def _no_effect(self, instruction: Instruction) -> None:
        pass

    def _call(self, instruction: Instruction) -> None:
        self.state.clear()

    def _callother(self, instruction: Instruction) -> None:
        self.fill_unknown(instruction)
        self.state.invalidate_all_spaces()

    _OPCODE_DISPATCH = {
        **AbstractInterpreter._OPCODE_DISPATCH,
        Opcode.BRANCH: _no_effect,
        Opcode.CBRANCH: _no_effect,
        Opcode.BRANCHIND: _no_effect,
        Opcode.RETURN: _no_effect,
        Opcode.CALL: _call,
        Opcode.CALLIND: _call,
        Opcode.CALLOTHER: _callother,
    }
