"""Generic instruction dispatcher.

``OpcodeVisitor`` routes an instruction to exactly one handler chosen by
opcode, and an operand to one handler chosen by operand kind.  Handlers
live in class-level tables.  The base tables bind every case to
``unimplemented``; a subclass that declares its own table must list every
opcode (and every operand kind), binding it either to a real handler or
explicitly to ``OpcodeVisitor.unimplemented``.  A missing entry is a
``TypeError`` when the class is created, not a surprise at run time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from tvlai.model.instructions import Instruction
from tvlai.model.opcodes import Opcode
from tvlai.model.operands import OPERAND_KINDS, Operand

from ._errors import UnimplementedCapabilityError

T = TypeVar("T")


def _check_table(cls: type, attr: str, keys: list) -> None:
    table = cls.__dict__.get(attr)
    if table is None:
        return
    missing = [key for key in keys if key not in table]
    if missing:
        names = ", ".join(getattr(key, "value", key) for key in missing)
        raise TypeError(f"{cls.__name__}.{attr} has no handler for: {names}")


class OpcodeVisitor(Generic[T]):
    """Dispatch instructions by opcode and operands by kind."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        _check_table(cls, "_OPCODE_DISPATCH", list(Opcode))
        _check_table(cls, "_OPERAND_DISPATCH", list(OPERAND_KINDS))

    # -----------------------------------------------------------------------
    # Hooks
    # -----------------------------------------------------------------------

    def before(self, instruction: Instruction) -> None:
        """Called before every dispatched instruction."""

    def after(self, instruction: Instruction) -> None:
        """Called after every successfully handled instruction."""

    # -----------------------------------------------------------------------
    # Dispatch
    # -----------------------------------------------------------------------

    def visit(self, instruction: Instruction) -> T:
        self.before(instruction)
        handler = self._OPCODE_DISPATCH[instruction.opcode]
        result = handler(self, instruction)
        self.after(instruction)
        return result

    def visit_operand(self, instruction: Instruction, operand: Operand) -> Any:
        handler = self._OPERAND_DISPATCH[operand.kind]
        return handler(self, instruction, operand)

    def unimplemented(self, instruction: Instruction) -> T:
        raise UnimplementedCapabilityError(
            instruction.opcode.value,
            f"No transfer function for {instruction.opcode.value} "
            f"(seq {instruction.seq})",
        )

    def unimplemented_operand(self, instruction: Instruction, operand: Operand) -> Any:
        raise UnimplementedCapabilityError(
            operand.kind,
            f"No handler for {operand.kind} operands "
            f"({instruction.opcode.value}, seq {instruction.seq})",
        )

    _OPCODE_DISPATCH: dict[Opcode, Callable[[Any, Instruction], Any]] = dict.fromkeys(
        Opcode, unimplemented,
    )

    _OPERAND_DISPATCH: dict[str, Callable[[Any, Instruction, Operand], Any]] = dict.fromkeys(
        OPERAND_KINDS, unimplemented_operand,
    )
