"""P-code style text listings of instructions and abstract state.

Operands render as ``(space, offset, size)`` triples, instructions as
``out = OPCODE in0, in1``, and abstract values as MSB-first strings of
``0``/``1``/``?``.
"""

from __future__ import annotations

from collections.abc import Iterable
from io import StringIO
from typing import TYPE_CHECKING

from tvlai.model.arch import Architecture
from tvlai.model.instructions import Instruction, InstructionBlock
from tvlai.model.operands import (
    AddressOperand,
    ConstantOperand,
    Operand,
    RegisterOperand,
    TemporaryOperand,
)

if TYPE_CHECKING:
    from tvlai.analyze._memory import AbstractMemory
    from tvlai.analyze._state import AbstractState


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_operand(operand: Operand) -> str:
    """Render *operand* as ``(space, 0xoffset, size)``."""
    if isinstance(operand, ConstantOperand):
        return f"(const, {operand.value:#x}, {operand.size})"
    if isinstance(operand, RegisterOperand):
        return f"(register, {operand.offset:#x}, {operand.size})"
    if isinstance(operand, TemporaryOperand):
        return f"(unique, {operand.offset:#x}, {operand.size})"
    if isinstance(operand, AddressOperand):
        return f"({operand.space}, {operand.offset:#x}, {operand.size})"
    raise TypeError(f"format_operand() got {type(operand).__name__}")


def format_instruction(instruction: Instruction) -> str:
    text = instruction.opcode.value
    if instruction.inputs:
        text += " " + ", ".join(format_operand(op) for op in instruction.inputs)
    if instruction.output is not None:
        text = f"{format_operand(instruction.output)} = {text}"
    return text


def format_block(block: InstructionBlock) -> str:
    w = ListingWriter()
    w.write_block(block)
    return w.getvalue()


def format_blocks(blocks: Iterable[InstructionBlock]) -> str:
    w = ListingWriter()
    for block in blocks:
        w.write_block(block)
    return w.getvalue()


def format_state(state: AbstractState, architecture: Architecture | None = None) -> str:
    """Render registers and memory spaces of *state*.

    With an *architecture*, every named register is listed with its
    current value.  Without one, written register bytes are grouped into
    contiguous runs.
    """
    w = ListingWriter()
    w.write_state(state, architecture)
    return w.getvalue()


# ---------------------------------------------------------------------------
# ListingWriter
# ---------------------------------------------------------------------------

class ListingWriter:
    """Accumulates listing lines in an internal buffer."""

    def __init__(self) -> None:
        self._buf = StringIO()
        self._indent = 0
        self._indent_str = "    "

    def getvalue(self) -> str:
        return self._buf.getvalue().rstrip("\n") + "\n"

    def _line(self, text: str = "") -> None:
        if text:
            self._buf.write(self._indent_str * self._indent + text + "\n")
        else:
            self._buf.write("\n")

    # -- Instructions -------------------------------------------------------

    def write_block(self, block: InstructionBlock) -> None:
        header = f"{block.address:#x}:"
        if block.mnemonic:
            header += f" {block.mnemonic}"
        self._line(header)
        self._indent += 1
        for instruction in block.instructions:
            self._line(format_instruction(instruction))
        self._indent -= 1

    # -- State --------------------------------------------------------------

    def write_state(
        self, state: AbstractState, architecture: Architecture | None = None,
    ) -> None:
        self._line("registers:")
        self._indent += 1
        if architecture is not None:
            for reg in architecture.registers:
                value = state.lookup(architecture.register(reg.name))
                self._line(f"{reg.name} = {value}")
        else:
            self._write_runs(state.registers, "reg")
        self._indent -= 1

        for space in state.spaces:
            self._line(f"space {space}:")
            self._indent += 1
            self._write_runs(state.space(space), "mem")
            self._indent -= 1

    def _write_runs(self, memory: AbstractMemory, label: str) -> None:
        """One line per run of consecutive written addresses."""
        run: list[int] = []
        for address in memory.addresses():
            if run and address != run[-1] + 1:
                self._write_run(memory, label, run)
                run = []
            run.append(address)
        if run:
            self._write_run(memory, label, run)

    def _write_run(self, memory: AbstractMemory, label: str, run: list[int]) -> None:
        # Bytes listed in address order, lowest address first.
        text = " ".join(str(memory.load(address)) for address in run)
        self._line(f"{label}[{run[0]:#x}:{len(run)}] = {text}")
