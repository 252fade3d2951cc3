"""Straight-line sweep over a short obfuscated x86 fragment.

The fragment mixes known constants with registers whose values are not
known, then tests the trap flag.  Seeding ``TF = 0`` (no debugger single
stepping) lets the final comparison be decided, which is what exposes an
opaque predicate in anti-debugging code.
"""

import logging

from tvlai.analyze import AnalysisConfig, StraightLineInterpreter, analyze
from tvlai.export import format_blocks, format_state
from tvlai.model import (
    Architecture,
    ConstantOperand,
    Instruction,
    InstructionBlock,
    Opcode,
    RegisterDef,
    RegisterOperand,
    TemporaryOperand,
)

RAM = 1

ARCH = Architecture(
    name="x86-32",
    registers=[
        RegisterDef(name="EAX", offset=0x0, size=4),
        RegisterDef(name="AL", offset=0x0, size=1),
        RegisterDef(name="ECX", offset=0x4, size=4),
        RegisterDef(name="CL", offset=0x4, size=1),
        RegisterDef(name="EDX", offset=0x8, size=4),
        RegisterDef(name="ESP", offset=0x10, size=4),
        RegisterDef(name="ZF", offset=0x206, size=1),
        RegisterDef(name="TF", offset=0x208, size=1),
    ],
)

EAX, AL = ARCH.register("EAX"), ARCH.register("AL")
ECX, CL = ARCH.register("ECX"), ARCH.register("CL")
EDX, ESP = ARCH.register("EDX"), ARCH.register("ESP")
ZF, TF = ARCH.register("ZF"), ARCH.register("TF")


def c(value: int, size: int = 4) -> ConstantOperand:
    return ConstantOperand(value=value, size=size)


def op(opcode: Opcode, inputs, output=None, seq: int = 0) -> Instruction:
    return Instruction(opcode=opcode, inputs=inputs, output=output, seq=seq)


BLOCKS = [
    InstructionBlock(address=0x401000, mnemonic="MOV AL, 0x12", instructions=[
        op(Opcode.COPY, [c(0x12, 1)], AL),
    ]),
    InstructionBlock(address=0x401002, mnemonic="ADD AL, 0x34", instructions=[
        op(Opcode.INT_ADD, [AL, c(0x34, 1)], AL),
    ]),
    InstructionBlock(address=0x401004, mnemonic="AND ECX, 0xFF00", instructions=[
        op(Opcode.INT_AND, [ECX, c(0xFF00)], ECX),
    ]),
    InstructionBlock(address=0x40100A, mnemonic="SHL EDX, CL", instructions=[
        op(Opcode.INT_AND, [CL, c(0x1F, 1)], TemporaryOperand(offset=0x100, size=1), seq=0),
        op(Opcode.INT_LEFT, [EDX, TemporaryOperand(offset=0x100, size=1)], EDX, seq=1),
    ]),
    InstructionBlock(address=0x40100C, mnemonic="MOV [ESP], EAX", instructions=[
        op(Opcode.STORE, [c(RAM, 8), ESP, EAX]),
    ]),
    InstructionBlock(address=0x40100F, mnemonic="CMP TF, 0", instructions=[
        op(Opcode.INT_EQUAL, [TF, c(0, 1)], ZF),
    ]),
    InstructionBlock(address=0x401012, mnemonic="JZ 0x401100", instructions=[
        op(Opcode.CBRANCH, [c(0x401100, 8), ZF]),
    ]),
]


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    print(format_blocks(BLOCKS))
    ctx, report = analyze(
        BLOCKS,
        config=AnalysisConfig(trace=True),
        architecture=ARCH,
        seeds={"TF": 0},
        interpreter_cls=StraightLineInterpreter,
    )
    print(f"completed={report.completed}  blocks={report.blocks_run}  "
          f"instructions={report.instructions_run}")
    print(format_state(ctx.state, ARCH))
    print(f"ZF after CMP TF, 0: {ctx['ZF']}  (branch always taken)")
