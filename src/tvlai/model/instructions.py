"""Instruction and block nodes for the instruction IR."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, model_validator

from .opcodes import FIXED_ARITY, NO_OUTPUT_OPCODES, VALUE_OPCODES, Opcode
from .operands import Operand


class Instruction(BaseModel):
    """A single three-address operation: ``output = opcode(inputs...)``.

    For ``LOAD`` the inputs are ``[space, address]``; for ``STORE`` they
    are ``[space, address, value]``.  The space operand is a constant whose
    value identifies the memory space.
    """

    opcode: Opcode
    inputs: list[Operand] = []
    output: Operand | None = None
    seq: int = 0

    @model_validator(mode="after")
    def _shape_check(self) -> Self:
        if self.opcode in NO_OUTPUT_OPCODES and self.output is not None:
            raise ValueError(f"{self.opcode.value} must not have an output")
        if self.opcode in VALUE_OPCODES and self.output is None:
            raise ValueError(f"{self.opcode.value} requires an output")
        arity = FIXED_ARITY.get(self.opcode)
        if arity is not None and len(self.inputs) != arity:
            raise ValueError(
                f"{self.opcode.value} takes {arity} input(s), "
                f"got {len(self.inputs)}"
            )
        return self


class InstructionBlock(BaseModel):
    """The translation of one machine instruction.

    Temporaries written inside a block are assumed not to be read after
    it, so the driver may discard them at the block boundary.
    """

    address: int = 0
    mnemonic: str = ""
    instructions: list[Instruction] = []
