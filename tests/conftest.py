"""Shared test helpers for the tvlai test suite."""

import itertools

from tvlai.domain import BitVector
from tvlai.model.arch import Architecture, RegisterDef
from tvlai.model.instructions import Instruction, InstructionBlock
from tvlai.model.opcodes import Opcode
from tvlai.model.operands import (
    ConstantOperand,
    RegisterOperand,
    TemporaryOperand,
)


def bv(text: str) -> BitVector:
    """Shorthand for BitVector.parse(text)."""
    return BitVector.parse(text)


def reg(offset: int, size: int = 4, name: str | None = None) -> RegisterOperand:
    return RegisterOperand(offset=offset, size=size, name=name)


def tmp(offset: int, size: int = 4) -> TemporaryOperand:
    return TemporaryOperand(offset=offset, size=size)


def const(value: int, size: int = 4) -> ConstantOperand:
    return ConstantOperand(value=value, size=size)


def ins(opcode: Opcode, inputs, output=None, seq: int = 0) -> Instruction:
    return Instruction(opcode=opcode, inputs=list(inputs), output=output, seq=seq)


def block(*instructions: Instruction, address: int = 0x1000, mnemonic: str = "") -> InstructionBlock:
    return InstructionBlock(address=address, mnemonic=mnemonic, instructions=list(instructions))


def make_x86() -> Architecture:
    """A tiny x86-like register file with overlapping AL/EAX."""
    return Architecture(
        name="x86-mini",
        registers=[
            RegisterDef(name="EAX", offset=0x0, size=4),
            RegisterDef(name="AL", offset=0x0, size=1),
            RegisterDef(name="ECX", offset=0x4, size=4),
            RegisterDef(name="EDX", offset=0x8, size=4),
            RegisterDef(name="ESP", offset=0x10, size=4),
            RegisterDef(name="TF", offset=0x208, size=1),
            RegisterDef(name="ZF", offset=0x206, size=1),
        ],
    )


# ---------------------------------------------------------------------------
# Concrete reference model
# ---------------------------------------------------------------------------

def gamma(value: BitVector) -> list[int]:
    """Every concrete value *value* stands for."""
    choices = [t.concretizations() for t in value]
    return [
        sum(bit << i for i, bit in enumerate(bits))
        for bits in itertools.product(*choices)
    ]


def all_vectors(width: int):
    """Every abstract vector of *width* bits (3**width of them)."""
    chars = "01?"
    for combo in itertools.product(chars, repeat=width):
        yield BitVector.parse("".join(combo))


def to_signed(value: int, width: int) -> int:
    return value - (1 << width) if value >> (width - 1) & 1 else value


def mask(width: int) -> int:
    return (1 << width) - 1
