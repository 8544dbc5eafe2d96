from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Optional, Tuple

import numpy as np


# ---------------- Instruction set ----------------
class Op(IntEnum):
    CELL_DELTA = 0     # +-
    POINTER_DELTA = 1  # <>
    OUTPUT = 2         # .
    INPUT = 3          # ,
    LOOP_START = 4     # [
    LOOP_END = 5       # ]


@dataclass(frozen=True)
class Instruction:
    op: Op
    operand: int = 0  # delta for *_DELTA, jump distance for LOOP_*, 0 otherwise

    def __str__(self) -> str:
        return f"{self.op.name}\t{self.operand}"


@dataclass(frozen=True)
class Program:
    """Compiled instruction sequence, immutable once built.

    Loop instructions carry resolved jump distances: a taken jump moves the
    program counter to ``pc + operand + 1``.
    """

    instructions: Tuple[Instruction, ...] = ()
    _arrays: Optional[Tuple[np.ndarray, np.ndarray]] = field(
        default=None, init=False, repr=False, compare=False, hash=False
    )

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(ops, operands)`` as read-only numpy arrays for the VM kernel."""
        if self._arrays is None:
            ops = np.array([int(i.op) for i in self.instructions], dtype=np.int8)
            operands = np.array([i.operand for i in self.instructions], dtype=np.int64)
            ops.setflags(write=False)
            operands.setflags(write=False)
            object.__setattr__(self, '_arrays', (ops, operands))
        return self._arrays


# ---------------- Diagnostics ----------------
def format_program(program: Program) -> str:
    """One line per instruction: index, kind and operand, tab separated.

    Loop instructions also show where a taken jump resumes.
    """
    width = len(str(max(len(program) - 1, 0)))
    lines = []
    for pc, inst in enumerate(program):
        line = f"{pc:>{width}}\t{inst}"
        if inst.op in (Op.LOOP_START, Op.LOOP_END):
            line += f"\t-> {jump_target(program, pc)}"
        lines.append(line)
    return "\n".join(lines)


def jump_target(program: Program, pc: int) -> int:
    """Where a taken jump at ``pc`` resumes execution."""
    inst = program[pc]
    if inst.op not in (Op.LOOP_START, Op.LOOP_END):
        raise ValueError(f"instruction {pc} is {inst.op.name}, not a loop instruction")
    return pc + inst.operand + 1
