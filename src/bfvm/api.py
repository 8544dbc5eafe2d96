from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .compiler import CompileResult, Compiler
from .instructions import Program
from .vm import EOF_KEEP, EOF_POLICIES, ExecutionResult, VirtualMachine


@dataclass(frozen=True)
class ExecutionOptions:
    max_steps: Optional[int] = None
    eof: str = EOF_KEEP

    def __post_init__(self) -> None:
        if self.eof not in EOF_POLICIES:
            raise ValueError(f"invalid eof policy: {self.eof!r}")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {self.max_steps}")


@dataclass(frozen=True)
class RunResult:
    compiled: CompileResult
    execution: Optional[ExecutionResult]
    output: bytes

    @property
    def ok(self) -> bool:
        return self.compiled.ok and self.execution is not None and self.execution.ok


def compile_string(source: str) -> CompileResult:
    return Compiler().compile(source)


def compile_file(path: str | Path, *, encoding: str = "utf-8") -> CompileResult:
    # undecodable bytes can only be comments; replace them rather than fail
    with Path(path).open(encoding=encoding, errors="replace", newline='') as f:
        return Compiler().compile(f)


def execute(
    program: Program,
    input_stream: BinaryIO,
    output_stream: BinaryIO,
    *,
    options: Optional[ExecutionOptions] = None,
) -> ExecutionResult:
    opts = options or ExecutionOptions()
    vm = VirtualMachine(input_stream, output_stream, eof=opts.eof)
    return vm.execute(program, max_steps=opts.max_steps)


def run_string(source: str, input_data: bytes = b"", *, options: Optional[ExecutionOptions] = None) -> RunResult:
    """Compile and run ``source`` with in-memory streams."""
    compiled = compile_string(source)
    if not compiled.ok:
        return RunResult(compiled=compiled, execution=None, output=b"")

    stdout = io.BytesIO()
    result = execute(compiled.program, io.BytesIO(input_data), stdout, options=options)
    return RunResult(compiled=compiled, execution=result, output=stdout.getvalue())
