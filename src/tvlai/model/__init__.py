"""Instruction IR consumed by the abstract interpreter.

Public API::

    from tvlai.model import Instruction, Opcode, RegisterOperand, ConstantOperand

    add = Instruction(
        opcode=Opcode.INT_ADD,
        inputs=[RegisterOperand(offset=0, size=4), ConstantOperand(value=1, size=4)],
        output=RegisterOperand(offset=0, size=4),
    )
"""

from .arch import Architecture, RegisterDef
from .instructions import Instruction, InstructionBlock
from .opcodes import Opcode
from .operands import (
    AddressOperand,
    ConstantOperand,
    Operand,
    RegisterOperand,
    TemporaryOperand,
)

__all__ = [
    "AddressOperand",
    "Architecture",
    "ConstantOperand",
    "Instruction",
    "InstructionBlock",
    "Opcode",
    "Operand",
    "RegisterDef",
    "RegisterOperand",
    "TemporaryOperand",
]
