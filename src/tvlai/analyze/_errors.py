"""Exceptions raised while interpreting an instruction stream."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for analysis-time conditions."""


class UnimplementedCapabilityError(AnalysisError):
    """No transfer function is bound for an opcode or operand kind.

    Recoverable: the driver decides whether to halt, skip the
    instruction, or substitute an Unknown result.
    """

    def __init__(self, capability: str, message: str | None = None) -> None:
        self.capability = capability
        super().__init__(message or f"Unimplemented capability: {capability}")


class UnrecognizedOperandError(AnalysisError):
    """An operand kind the abstract state cannot read or write."""
