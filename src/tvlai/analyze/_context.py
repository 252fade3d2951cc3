"""Analysis context: the user-facing object for sweeping instruction blocks.

Owns an interpreter (and through it the abstract state), resolves
register names through an optional ``Architecture`` and applies the
configured policy when an instruction has no transfer function.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel

from tvlai.domain import BitVector
from tvlai.model.arch import Architecture
from tvlai.model.instructions import Instruction, InstructionBlock
from tvlai.model.opcodes import Opcode
from tvlai.model.operands import ConstantOperand, Operand

from ._config import AnalysisConfig, UnimplementedPolicy
from ._errors import UnimplementedCapabilityError
from ._interpreter import AbstractInterpreter
from ._state import AbstractState

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class Diagnostic(BaseModel):
    """One unimplemented capability met during a sweep."""

    block_address: int
    seq: int
    opcode: Opcode
    capability: str
    action: UnimplementedPolicy


class SweepReport(BaseModel):
    completed: bool = True
    blocks_run: int = 0
    instructions_run: int = 0
    diagnostics: list[Diagnostic] = []


# ---------------------------------------------------------------------------
# AnalysisContext
# ---------------------------------------------------------------------------

class AnalysisContext:
    """Seed values, run sweeps, query results.

    Parameters
    ----------
    config : AnalysisConfig, optional
        Analysis options (byte order, policies, tracing).
    architecture : Architecture, optional
        Needed to address registers by name.
    interpreter_cls : type[AbstractInterpreter]
        Interpreter to run instructions with.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        architecture: Architecture | None = None,
        interpreter_cls: type[AbstractInterpreter] = AbstractInterpreter,
        *,
        interpreter: AbstractInterpreter | None = None,
    ) -> None:
        if config is None:
            # Byte order follows the architecture unless configured explicitly.
            big_endian = architecture.big_endian if architecture is not None else False
            config = AnalysisConfig(big_endian=big_endian)
        self.config = config
        self.architecture = architecture
        self.interpreter = interpreter or interpreter_cls(config=config)

    @property
    def state(self) -> AbstractState:
        return self.interpreter.state

    # -----------------------------------------------------------------------
    # Values
    # -----------------------------------------------------------------------

    def _resolve(self, target: str | Operand) -> Operand:
        if not isinstance(target, str):
            return target
        if self.architecture is None:
            raise KeyError(f"Cannot resolve register {target!r} without an architecture")
        return self.architecture.register(target)

    def set_value(self, target: str | Operand, value: int | BitVector) -> None:
        """Seed *target* (register name or operand) before a sweep."""
        operand = self._resolve(target)
        if isinstance(operand, ConstantOperand):
            raise ValueError("Constants cannot be assigned")
        if isinstance(value, int):
            value = BitVector.from_int(operand.bits, value)
        self.state.associate(operand, value)

    def value_of(self, target: str | Operand) -> BitVector:
        return self.state.lookup(self._resolve(target))

    def __getitem__(self, name: str) -> BitVector:
        return self.value_of(name)

    def __setitem__(self, name: str, value: int | BitVector) -> None:
        self.set_value(name, value)

    # -----------------------------------------------------------------------
    # Sweeping
    # -----------------------------------------------------------------------

    def run(self, blocks: Iterable[InstructionBlock]) -> SweepReport:
        """Interpret *blocks* once, in order.

        Returns a ``SweepReport``; ``completed`` is False when the sweep
        halted on an unimplemented capability.  Size mismatches are
        contract violations and propagate.
        """
        report = SweepReport()
        for block in blocks:
            report.blocks_run += 1
            for instruction in block.instructions:
                try:
                    self.interpreter.visit(instruction)
                except UnimplementedCapabilityError as exc:
                    if not self._recover(block, instruction, exc, report):
                        report.completed = False
                        return report
                report.instructions_run += 1
            if self.config.reset_temporaries:
                self.state.clear_temporaries()
        return report

    def _recover(
        self,
        block: InstructionBlock,
        instruction: Instruction,
        exc: UnimplementedCapabilityError,
        report: SweepReport,
    ) -> bool:
        """Apply the unimplemented policy.  Returns False to halt the sweep."""
        policy = self.config.on_unimplemented
        report.diagnostics.append(Diagnostic(
            block_address=block.address,
            seq=instruction.seq,
            opcode=instruction.opcode,
            capability=exc.capability,
            action=policy,
        ))
        if policy is UnimplementedPolicy.HALT:
            logger.error("Halting sweep at %#x: %s", block.address, exc)
            return False
        if policy is UnimplementedPolicy.UNKNOWN:
            logger.warning("%s at %#x; output set to Unknown", exc, block.address)
            self.interpreter.fill_unknown(instruction)
        else:
            logger.warning("%s at %#x; skipped", exc, block.address)
        return True

    def fork(self) -> AnalysisContext:
        """An independent context over a copy of the current state."""
        return AnalysisContext(
            config=self.config,
            architecture=self.architecture,
            interpreter=self.interpreter.clone(),
        )
