from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

import numpy as np
from numba import njit

from .errors import BFMemoryError, make_memory_error
from .instructions import Op, Program
from .state import Tape

logger = logging.getLogger(__name__)

# End-of-input policies for INPUT
EOF_KEEP = 'keep'            # leave the cell unchanged
EOF_ZERO = 'zero'            # store 0
EOF_MINUS_ONE = 'minus-one'  # store 255
EOF_POLICIES = (EOF_KEEP, EOF_ZERO, EOF_MINUS_ONE)

# Execution status
HALTED = 'halted'
STEP_LIMIT = 'step_limit'
MEMORY_ERROR = 'memory_error'

# Kernel stop reasons
STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_END = 3
STOP_STEPS = 4
STOP_BOUNDS = 5

_CELL_DELTA = int(Op.CELL_DELTA)
_POINTER_DELTA = int(Op.POINTER_DELTA)
_OUTPUT = int(Op.OUTPUT)
_INPUT = int(Op.INPUT)
_LOOP_START = int(Op.LOOP_START)
_LOOP_END = int(Op.LOOP_END)

_UNBOUNDED = 2 ** 62


@njit(cache=True)
def run_until_io(ops, operands, cells, pc, pointer, max_steps):
    """
    Execute instructions until I/O, end of program, a bounds violation or
    ``max_steps`` executed instructions.

    I/O instructions are not executed here: the kernel stops with pc on them
    and the caller services the stream. On a bounds violation pc stays on the
    offending POINTER_DELTA and pointer keeps its last valid value.

    Returns (pc, pointer, stop_reason, steps).
    """
    prog_len = len(ops)
    mem_len = len(cells)
    steps = 0
    stop_reason = STOP_END

    while pc < prog_len:
        if steps >= max_steps:
            stop_reason = STOP_STEPS
            break

        op = ops[pc]
        if op == _CELL_DELTA:
            cells[pointer] = (cells[pointer] + operands[pc]) & 255
        elif op == _POINTER_DELTA:
            target = pointer + operands[pc]
            if target < 0 or target >= mem_len:
                stop_reason = STOP_BOUNDS
                break
            pointer = target
        elif op == _OUTPUT:
            stop_reason = STOP_OUTPUT
            break
        elif op == _INPUT:
            stop_reason = STOP_INPUT
            break
        elif op == _LOOP_START:
            if cells[pointer] == 0:
                pc += operands[pc]
        elif op == _LOOP_END:
            if cells[pointer] != 0:
                pc += operands[pc]

        pc += 1
        steps += 1

    return pc, pointer, stop_reason, steps


@dataclass(frozen=True)
class ExecutionResult:
    status: str
    steps: int
    pc: int
    tape: Tape
    error: Optional[BFMemoryError] = None

    @property
    def ok(self) -> bool:
        return self.status == HALTED

    def unwrap(self) -> Tape:
        if self.error is not None:
            raise self.error
        return self.tape


class VirtualMachine:
    """Runs compiled Programs against a fresh tape and injected byte streams."""

    def __init__(self, input_stream: BinaryIO, output_stream: BinaryIO, *, eof: str = EOF_KEEP):
        if eof not in EOF_POLICIES:
            raise ValueError(f"invalid eof policy: {eof!r}")
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.eof = eof

    def execute(self, program: Program, *, max_steps: Optional[int] = None) -> ExecutionResult:
        if max_steps is not None and max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")

        ops, operands = program.as_arrays()
        tape = Tape()
        cells = tape.cells
        pc = 0
        pointer = 0
        steps = 0
        budget = _UNBOUNDED if max_steps is None else max_steps
        logger.debug("executing %d instructions (max_steps=%s)", len(program), max_steps)

        while True:
            pc, pointer, stop_reason, ran = run_until_io(ops, operands, cells, pc, pointer, budget - steps)
            pc, pointer, steps = int(pc), int(pointer), steps + int(ran)

            if stop_reason == STOP_OUTPUT:
                self.output_stream.write(bytes((int(cells[pointer]),)))
            elif stop_reason == STOP_INPUT:
                self._read_into(cells, pointer)
            else:
                break
            pc += 1
            steps += 1

        self.output_stream.flush()

        tape.pointer = pointer
        error = None
        if stop_reason == STOP_END:
            status = HALTED
        elif stop_reason == STOP_STEPS:
            status = STEP_LIMIT
        else:
            status = MEMORY_ERROR
            error = make_memory_error(
                pointer=pointer + int(operands[pc]), pc=pc, tape_length=len(cells)
            )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("execution stopped: %s after %d steps (pc=%d) %s", status, steps, pc, tape.window())
        return ExecutionResult(status=status, steps=steps, pc=pc, tape=tape, error=error)

    def _read_into(self, cells: np.ndarray, pointer: int) -> None:
        self.output_stream.flush()
        data = self.input_stream.read(1)
        if data:
            cells[pointer] = data[0]
        elif self.eof == EOF_ZERO:
            cells[pointer] = 0
        elif self.eof == EOF_MINUS_ONE:
            cells[pointer] = 255
