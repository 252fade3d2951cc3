"""Abstract machine state: registers, temporaries and memory spaces."""

from __future__ import annotations

import logging
from collections.abc import Hashable

from tvlai.domain import BitVector, SizeMismatchError
from tvlai.model.operands import (
    ConstantOperand,
    Operand,
    RegisterOperand,
    TemporaryOperand,
)

from ._config import AnalysisConfig, OperandPolicy
from ._errors import UnrecognizedOperandError
from ._memory import AbstractMemory

logger = logging.getLogger(__name__)


class AbstractState:
    """Three independent regions of abstract storage.

    Registers and temporaries are byte memories keyed by storage offset,
    so overlapping registers (``AL`` inside ``EAX``) alias naturally.
    Memory spaces are created on first write and looked up by identifier.

    Parameters
    ----------
    config : AnalysisConfig, optional
        Supplies the byte order and the unrecognized-operand policy.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self.config = config or AnalysisConfig()
        self.registers = AbstractMemory(self.config.big_endian)
        self.temporaries = AbstractMemory(self.config.big_endian)
        self._spaces: dict[Hashable, AbstractMemory] = {}

    # -----------------------------------------------------------------------
    # Operand access
    # -----------------------------------------------------------------------

    def _region(self, operand: Operand) -> AbstractMemory | None:
        if isinstance(operand, RegisterOperand):
            return self.registers
        if isinstance(operand, TemporaryOperand):
            return self.temporaries
        return None

    def _unrecognized(self, operand: Operand, action: str) -> None:
        message = f"Cannot {action} operand of kind {operand.kind!r}"
        if self.config.on_unrecognized_operand is OperandPolicy.RAISE:
            raise UnrecognizedOperandError(message)
        logger.warning("%s; ignored", message)

    def associate(self, operand: Operand, value: BitVector) -> None:
        """Write *value* to the storage named by *operand*."""
        if value.width != operand.bits:
            raise SizeMismatchError(
                f"associate: value has {value.width} bits, "
                f"operand {operand.kind} declares {operand.bits}"
            )
        region = self._region(operand)
        if region is None:
            self._unrecognized(operand, "write")
            return
        region.store_wide(operand.offset, value)

    def lookup(self, operand: Operand) -> BitVector:
        if isinstance(operand, ConstantOperand):
            return BitVector.from_int(operand.bits, operand.value)
        region = self._region(operand)
        if region is None:
            self._unrecognized(operand, "read")
            return BitVector.unknown(operand.bits)
        return region.load_wide(operand.offset, operand.bits)

    # -----------------------------------------------------------------------
    # Memory spaces
    # -----------------------------------------------------------------------

    @property
    def spaces(self) -> tuple[Hashable, ...]:
        """Identifiers of the spaces that currently hold any memory."""
        return tuple(self._spaces)

    def space(self, space: Hashable) -> AbstractMemory | None:
        return self._spaces.get(space)

    def store(self, space: Hashable, address: int, value: BitVector) -> None:
        memory = self._spaces.get(space)
        if memory is None:
            memory = self._spaces[space] = AbstractMemory(self.config.big_endian)
        memory.store_wide(address, value)

    def load(self, space: Hashable, address: int, bits: int) -> BitVector:
        memory = self._spaces.get(space)
        if memory is None:
            return BitVector.unknown(bits)
        return memory.load_wide(address, bits)

    def invalidate_space(self, space: Hashable) -> None:
        self._spaces.pop(space, None)

    def invalidate_all_spaces(self) -> None:
        self._spaces.clear()

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def clear_temporaries(self) -> None:
        self.temporaries.invalidate()

    def clear(self) -> None:
        """Forget everything: registers, temporaries and every space."""
        self.registers.invalidate()
        self.temporaries.invalidate()
        self._spaces.clear()

    def clone(self) -> AbstractState:
        """An independent copy; writes to either side never reach the other."""
        other = AbstractState(self.config)
        other.registers = self.registers.clone()
        other.temporaries = self.temporaries.clone()
        other._spaces = {key: memory.clone() for key, memory in self._spaces.items()}
        return other

    def __repr__(self) -> str:
        return (
            f"AbstractState(registers={len(self.registers)}, "
            f"temporaries={len(self.temporaries)}, spaces={list(self._spaces)})"
        )
