"""Architecture description for the instruction IR.

Deliberately minimal: the analysis only needs the byte order and a way
to turn a register name into its storage location.  Everything else
about the processor lives in the host disassembler.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .operands import RegisterOperand


class RegisterDef(BaseModel):
    """A named register and its location in the register file."""

    name: str
    offset: int = Field(ge=0)
    size: int = Field(gt=0)


class Architecture(BaseModel):
    name: str
    big_endian: bool = False
    registers: list[RegisterDef] = []

    @model_validator(mode="after")
    def _unique_register_names(self):
        seen: set[str] = set()
        for reg in self.registers:
            if reg.name in seen:
                raise ValueError(f"Duplicate register name: {reg.name!r}")
            seen.add(reg.name)
        return self

    def register(self, name: str) -> RegisterOperand:
        """Return the operand for register *name*.

        Raises ``KeyError`` if the architecture does not define it.
        """
        for reg in self.registers:
            if reg.name == name:
                return RegisterOperand(offset=reg.offset, size=reg.size, name=reg.name)
        raise KeyError(
            f"Architecture {self.name!r} has no register {name!r}. "
            f"Available: {sorted(r.name for r in self.registers)}"
        )

    def register_at(self, offset: int, size: int) -> RegisterDef | None:
        """Return the register defined exactly at (*offset*, *size*), if any."""
        for reg in self.registers:
            if reg.offset == offset and reg.size == size:
                return reg
        return None
