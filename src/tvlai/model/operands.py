"""Operand nodes for the instruction IR.

Operands mirror p-code varnodes: a storage kind, an identity within that
kind (offset, or the literal value for constants) and a size in bytes.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class _OperandBase(BaseModel):
    size: int = Field(gt=0)

    @property
    def bits(self) -> int:
        """Width of the operand in bits."""
        return self.size * 8


class ConstantOperand(_OperandBase):
    """A literal value.  Never stored; converted at read time."""

    kind: Literal["constant"] = "constant"
    value: int

    @property
    def identity(self) -> int:
        return self.value


class RegisterOperand(_OperandBase):
    """A processor register, addressed by its offset in the register file."""

    kind: Literal["register"] = "register"
    offset: int = Field(ge=0)
    name: str | None = None

    @property
    def identity(self) -> int:
        return self.offset


class TemporaryOperand(_OperandBase):
    """A temporary produced while translating one machine instruction."""

    kind: Literal["temporary"] = "temporary"
    offset: int = Field(ge=0)

    @property
    def identity(self) -> int:
        return self.offset


class AddressOperand(_OperandBase):
    """A direct reference to memory in a named address space."""

    kind: Literal["address"] = "address"
    offset: int = Field(ge=0)
    space: str = "ram"

    @property
    def identity(self) -> int:
        return self.offset


Operand = Annotated[
    Union[
        ConstantOperand,
        RegisterOperand,
        TemporaryOperand,
        AddressOperand,
    ],
    Field(discriminator="kind"),
]

OPERAND_KINDS: tuple[str, ...] = ("constant", "register", "temporary", "address")
