"""tvlai analyzer: abstract interpretation of instruction blocks.

Entry point::

    from tvlai.analyze import analyze

    ctx, report = analyze(blocks, architecture=x86, seeds={"TF": 0})
    assert report.completed
    print(ctx["EAX"])           # e.g. 0000000000000000000000000???????
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from tvlai.domain import BitVector
from tvlai.model.arch import Architecture
from tvlai.model.instructions import InstructionBlock

from ._config import AnalysisConfig, OperandPolicy, UnimplementedPolicy
from ._context import AnalysisContext, Diagnostic, SweepReport
from ._dispatch import OpcodeVisitor
from ._errors import AnalysisError, UnimplementedCapabilityError, UnrecognizedOperandError
from ._interpreter import AbstractInterpreter, StraightLineInterpreter
from ._memory import AbstractMemory
from ._state import AbstractState


def analyze(
    blocks: Iterable[InstructionBlock],
    *,
    config: AnalysisConfig | None = None,
    architecture: Architecture | None = None,
    seeds: Mapping[str, int | BitVector] | None = None,
    interpreter_cls: type[AbstractInterpreter] = AbstractInterpreter,
) -> tuple[AnalysisContext, SweepReport]:
    """Run one sweep over *blocks* from an all-Unknown state.

    Parameters
    ----------
    blocks
        Instruction blocks in execution order.  Any iterable works,
        including a lazy generator.
    config
        Analysis options.  Defaults to ``AnalysisConfig()`` with the
        architecture's byte order.
    architecture
        Register file used to resolve names in *seeds* and queries.
    seeds
        Register name -> initial value, applied before the sweep.
    interpreter_cls
        Interpreter class, e.g. ``StraightLineInterpreter`` to step over
        branches and calls.

    Returns
    -------
    tuple[AnalysisContext, SweepReport]
        The context holding the final state, and the sweep report.
    """
    ctx = AnalysisContext(
        config=config,
        architecture=architecture,
        interpreter_cls=interpreter_cls,
    )
    if seeds:
        for name, value in seeds.items():
            ctx.set_value(name, value)
    report = ctx.run(blocks)
    return ctx, report


__all__ = [
    "AbstractInterpreter",
    "AbstractMemory",
    "AbstractState",
    "AnalysisConfig",
    "AnalysisContext",
    "AnalysisError",
    "Diagnostic",
    "OpcodeVisitor",
    "OperandPolicy",
    "StraightLineInterpreter",
    "SweepReport",
    "UnimplementedCapabilityError",
    "UnimplementedPolicy",
    "UnrecognizedOperandError",
    "analyze",
]
