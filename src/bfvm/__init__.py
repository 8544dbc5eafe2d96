
from .api import ExecutionOptions, RunResult, compile_file, compile_string, execute, run_string
from .compiler import CompileResult, Compiler
from .errors import BFCompileError, BFError, BFMemoryError
from .instructions import Instruction, Op, Program, format_program
from .state import TAPE_LENGTH, Tape
from .vm import EOF_KEEP, EOF_MINUS_ONE, EOF_ZERO, ExecutionResult, VirtualMachine

__all__ = [
    'Compiler',
    'CompileResult',
    'VirtualMachine',
    'ExecutionResult',
    'ExecutionOptions',
    'RunResult',
    'Instruction',
    'Op',
    'Program',
    'Tape',
    'TAPE_LENGTH',
    'EOF_KEEP',
    'EOF_ZERO',
    'EOF_MINUS_ONE',
    'BFError',
    'BFCompileError',
    'BFMemoryError',
    'format_program',
    'compile_string',
    'compile_file',
    'execute',
    'run_string',
]
