"""Opcode vocabulary for the instruction IR.

One member per p-code operation kind.  The groupings below are used by
the IR validators and by the interpreter's dispatch tables.
"""

from __future__ import annotations

from enum import Enum


class Opcode(str, Enum):
    # Boolean
    BOOL_AND = "BOOL_AND"
    BOOL_NEGATE = "BOOL_NEGATE"
    BOOL_OR = "BOOL_OR"
    BOOL_XOR = "BOOL_XOR"

    # Control transfer
    BRANCH = "BRANCH"
    BRANCHIND = "BRANCHIND"
    CALL = "CALL"
    CALLIND = "CALLIND"
    CALLOTHER = "CALLOTHER"
    CBRANCH = "CBRANCH"
    RETURN = "RETURN"

    # Data movement
    CAST = "CAST"
    COPY = "COPY"
    LOAD = "LOAD"
    STORE = "STORE"

    # Floating point
    FLOAT_ABS = "FLOAT_ABS"
    FLOAT_ADD = "FLOAT_ADD"
    FLOAT_CEIL = "FLOAT_CEIL"
    FLOAT_DIV = "FLOAT_DIV"
    FLOAT_EQUAL = "FLOAT_EQUAL"
    FLOAT_FLOAT2FLOAT = "FLOAT_FLOAT2FLOAT"
    FLOAT_FLOOR = "FLOAT_FLOOR"
    FLOAT_INT2FLOAT = "FLOAT_INT2FLOAT"
    FLOAT_LESS = "FLOAT_LESS"
    FLOAT_LESSEQUAL = "FLOAT_LESSEQUAL"
    FLOAT_MULT = "FLOAT_MULT"
    FLOAT_NAN = "FLOAT_NAN"
    FLOAT_NEG = "FLOAT_NEG"
    FLOAT_NOTEQUAL = "FLOAT_NOTEQUAL"
    FLOAT_ROUND = "FLOAT_ROUND"
    FLOAT_SQRT = "FLOAT_SQRT"
    FLOAT_SUB = "FLOAT_SUB"
    FLOAT_TRUNC = "FLOAT_TRUNC"

    # Integer
    INT_2COMP = "INT_2COMP"
    INT_ADD = "INT_ADD"
    INT_AND = "INT_AND"
    INT_CARRY = "INT_CARRY"
    INT_DIV = "INT_DIV"
    INT_EQUAL = "INT_EQUAL"
    INT_LEFT = "INT_LEFT"
    INT_LESS = "INT_LESS"
    INT_LESSEQUAL = "INT_LESSEQUAL"
    INT_MULT = "INT_MULT"
    INT_NEGATE = "INT_NEGATE"
    INT_NOTEQUAL = "INT_NOTEQUAL"
    INT_OR = "INT_OR"
    INT_REM = "INT_REM"
    INT_RIGHT = "INT_RIGHT"
    INT_SBORROW = "INT_SBORROW"
    INT_SCARRY = "INT_SCARRY"
    INT_SDIV = "INT_SDIV"
    INT_SEXT = "INT_SEXT"
    INT_SLESS = "INT_SLESS"
    INT_SLESSEQUAL = "INT_SLESSEQUAL"
    INT_SREM = "INT_SREM"
    INT_SRIGHT = "INT_SRIGHT"
    INT_SUB = "INT_SUB"
    INT_XOR = "INT_XOR"
    INT_ZEXT = "INT_ZEXT"

    # Bit-string assembly
    PIECE = "PIECE"
    SUBPIECE = "SUBPIECE"

    # Pseudo / additional operations
    CPOOLREF = "CPOOLREF"
    INDIRECT = "INDIRECT"
    MULTIEQUAL = "MULTIEQUAL"
    NEW = "NEW"
    PTRADD = "PTRADD"
    PTRSUB = "PTRSUB"
    SEGMENTOP = "SEGMENTOP"
    UNIMPLEMENTED = "UNIMPLEMENTED"


# ---------------------------------------------------------------------------
# Groupings
# ---------------------------------------------------------------------------

NO_OUTPUT_OPCODES = frozenset({
    Opcode.STORE,
    Opcode.BRANCH, Opcode.CBRANCH, Opcode.BRANCHIND,
    Opcode.CALL, Opcode.CALLIND, Opcode.RETURN,
})

UNARY_OPCODES = frozenset({
    Opcode.BOOL_NEGATE,
    Opcode.COPY, Opcode.CAST,
    Opcode.INT_2COMP, Opcode.INT_NEGATE, Opcode.INT_SEXT, Opcode.INT_ZEXT,
    Opcode.FLOAT_ABS, Opcode.FLOAT_CEIL, Opcode.FLOAT_FLOAT2FLOAT,
    Opcode.FLOAT_FLOOR, Opcode.FLOAT_INT2FLOAT, Opcode.FLOAT_NAN,
    Opcode.FLOAT_NEG, Opcode.FLOAT_ROUND, Opcode.FLOAT_SQRT, Opcode.FLOAT_TRUNC,
})

BINARY_OPCODES = frozenset({
    Opcode.BOOL_AND, Opcode.BOOL_OR, Opcode.BOOL_XOR,
    Opcode.INT_ADD, Opcode.INT_SUB, Opcode.INT_MULT,
    Opcode.INT_DIV, Opcode.INT_SDIV, Opcode.INT_REM, Opcode.INT_SREM,
    Opcode.INT_AND, Opcode.INT_OR, Opcode.INT_XOR,
    Opcode.INT_LEFT, Opcode.INT_RIGHT, Opcode.INT_SRIGHT,
    Opcode.INT_EQUAL, Opcode.INT_NOTEQUAL,
    Opcode.INT_LESS, Opcode.INT_LESSEQUAL,
    Opcode.INT_SLESS, Opcode.INT_SLESSEQUAL,
    Opcode.INT_CARRY, Opcode.INT_SCARRY, Opcode.INT_SBORROW,
    Opcode.FLOAT_ADD, Opcode.FLOAT_SUB, Opcode.FLOAT_MULT, Opcode.FLOAT_DIV,
    Opcode.FLOAT_EQUAL, Opcode.FLOAT_NOTEQUAL,
    Opcode.FLOAT_LESS, Opcode.FLOAT_LESSEQUAL,
    Opcode.PIECE, Opcode.SUBPIECE,
})

FIXED_ARITY: dict[Opcode, int] = {
    **{op: 1 for op in UNARY_OPCODES},
    **{op: 2 for op in BINARY_OPCODES},
    Opcode.LOAD: 2,
    Opcode.STORE: 3,
}

# Everything that computes a value into its output operand.
VALUE_OPCODES = frozenset(
    UNARY_OPCODES
    | BINARY_OPCODES
    | {
        Opcode.LOAD,
        Opcode.PTRADD, Opcode.PTRSUB,
        Opcode.MULTIEQUAL, Opcode.INDIRECT,
        Opcode.NEW, Opcode.CPOOLREF,
    }
)

BOOLEAN_RESULT_OPCODES = frozenset({
    Opcode.BOOL_AND, Opcode.BOOL_NEGATE, Opcode.BOOL_OR, Opcode.BOOL_XOR,
    Opcode.INT_EQUAL, Opcode.INT_NOTEQUAL,
    Opcode.INT_LESS, Opcode.INT_LESSEQUAL,
    Opcode.INT_SLESS, Opcode.INT_SLESSEQUAL,
    Opcode.INT_CARRY, Opcode.INT_SCARRY, Opcode.INT_SBORROW,
    Opcode.FLOAT_EQUAL, Opcode.FLOAT_NOTEQUAL,
    Opcode.FLOAT_LESS, Opcode.FLOAT_LESSEQUAL, Opcode.FLOAT_NAN,
})
