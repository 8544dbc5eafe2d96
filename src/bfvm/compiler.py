from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import UNMATCHED_CLOSE, UNMATCHED_OPEN, BFCompileError, make_compile_error
from .instructions import Instruction, Op, Program
from .lexer import Scanner, Source, Symbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    program: Optional[Program] = None
    error: Optional[BFCompileError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Program:
        if self.error is not None:
            raise self.error
        return self.program


class Compiler:
    """
    Tape language compiler

    Turns a character stream into a Program.

    Folding:
    - Runs of +/- become one CELL_DELTA carrying the net count
    - Runs of </> become one POINTER_DELTA carrying the net count
    - A run whose net count is zero emits nothing

    Loops:
    - "[" emits a LOOP_START placeholder and remembers its index
    - "]" patches the placeholder with the forward distance and emits
      LOOP_END with -1 - distance, so no bracket matching is left for run time
    """

    def __init__(self):
        self.instructions: List[Instruction] = []
        self.loop_stack: List[Tuple[int, Symbol]] = []  # (LOOP_START index, its "[")
        self.cell_delta = 0
        self.pointer_delta = 0

    def reset(self) -> None:
        self.instructions.clear()
        self.loop_stack.clear()
        self.cell_delta = 0
        self.pointer_delta = 0

    # ===== Main Compilation Pipeline =====

    def compile(self, source: Source) -> CompileResult:
        """
        Compile ``source`` (a string or readable text stream).

        Returns a CompileResult holding either the Program or the
        BFCompileError describing the first unmatched bracket.
        """
        self.reset()
        scanner = Scanner(source)
        count = 0

        for sym in scanner:
            count += 1
            ch = sym.char
            if ch == '+' or ch == '-':
                self._flush_pointer()
                self.cell_delta += 1 if ch == '+' else -1
            elif ch == '>' or ch == '<':
                self._flush_cell()
                self.pointer_delta += 1 if ch == '>' else -1
            elif ch == '.':
                self._flush()
                self._emit(Op.OUTPUT)
            elif ch == ',':
                self._flush()
                self._emit(Op.INPUT)
            elif ch == '[':
                self._flush()
                self.loop_stack.append((len(self.instructions), sym))
                self._emit(Op.LOOP_START)  # operand patched by the matching "]"
            elif ch == ']':
                self._flush()
                if not self.loop_stack:
                    return self._fail(UNMATCHED_CLOSE, sym, scanner)
                start, _ = self.loop_stack.pop()
                distance = len(self.instructions) - start
                self.instructions[start] = Instruction(Op.LOOP_START, distance)
                self._emit(Op.LOOP_END, -1 - distance)

        self._flush()
        if self.loop_stack:
            return self._fail(UNMATCHED_OPEN, self.loop_stack[-1][1], scanner)

        program = Program(tuple(self.instructions))
        logger.debug("compiled %d symbols into %d instructions", count, len(program))
        return CompileResult(program=program)

    # ===== Emission helpers =====

    def _emit(self, op: Op, operand: int = 0) -> None:
        self.instructions.append(Instruction(op, operand))

    def _flush_cell(self) -> None:
        if self.cell_delta != 0:
            self._emit(Op.CELL_DELTA, self.cell_delta)
        self.cell_delta = 0

    def _flush_pointer(self) -> None:
        if self.pointer_delta != 0:
            self._emit(Op.POINTER_DELTA, self.pointer_delta)
        self.pointer_delta = 0

    def _flush(self) -> None:
        self._flush_cell()
        self._flush_pointer()

    def _fail(self, kind: str, sym: Symbol, scanner: Scanner) -> CompileResult:
        error = make_compile_error(kind=kind, lines=scanner.lines, line=sym.line, column=sym.column)
        logger.debug("compile failed: %s at line %d, column %d", kind, sym.line, sym.column)
        self.reset()
        return CompileResult(error=error)
