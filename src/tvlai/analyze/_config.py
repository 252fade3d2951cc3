"""Analysis configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class UnimplementedPolicy(str, Enum):
    """What a sweep does when an instruction has no transfer function."""

    HALT = "halt"
    SKIP = "skip"
    UNKNOWN = "unknown"


class OperandPolicy(str, Enum):
    """What the state does with an operand kind it cannot store."""

    LOG = "log"
    RAISE = "raise"


class AnalysisConfig(BaseModel):
    """Options shared by the state, the interpreter and the driver.

    Attributes
    ----------
    big_endian
        Byte order used when splitting wide values into memory bytes.
    reset_temporaries
        Discard temporaries after every instruction block.
    on_unimplemented
        Policy for ``UnimplementedCapabilityError`` during a sweep.
    on_unrecognized_operand
        Policy for reading or writing an operand kind with no storage.
    trace
        Log every visited instruction at DEBUG level.
    """

    big_endian: bool = False
    reset_temporaries: bool = True
    on_unimplemented: UnimplementedPolicy = UnimplementedPolicy.HALT
    on_unrecognized_operand: OperandPolicy = OperandPolicy.LOG
    trace: bool = False
